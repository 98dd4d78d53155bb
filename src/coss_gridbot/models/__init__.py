# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

from coss_gridbot.models.configuration import (
    BotConfigDTO,
    GridConfigDTO,
    NotificationConfigDTO,
    TelegramConfigDTO,
)
from coss_gridbot.models.exchange import (
    AssetSchema,
    CancelOrderResponseSchema,
    Credentials,
    OrderRecordSchema,
    OrderSide,
    OrderStatus,
    OrderType,
    PriceSchema,
)

__all__ = [
    "AssetSchema",
    "BotConfigDTO",
    "CancelOrderResponseSchema",
    "Credentials",
    "GridConfigDTO",
    "NotificationConfigDTO",
    "OrderRecordSchema",
    "OrderSide",
    "OrderStatus",
    "OrderType",
    "PriceSchema",
    "TelegramConfigDTO",
]
