# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

"""Configuration models, filled via CLI options or environment variables."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field


class GridConfigDTO(BaseModel):
    """
    Parameters of one grid. These stay the same for the whole lifetime of a
    run.

    The limits are deliberately not constrained here, they are validated by
    the grid strategy before anything is sent to the exchange.
    """

    model_config = ConfigDict(frozen=True)

    pair: str = Field(..., min_length=1)  # e.g. "ETH_USDT"
    upper_limit: Decimal
    lower_limit: Decimal
    order_amount: Decimal = Field(..., gt=0)  # in base currency per grid line
    number_of_grids: int = Field(..., gt=0)


class BotConfigDTO(BaseModel):
    """General bot configuration"""

    name: str = "coss-gridbot"
    api_public_key: str
    api_secret_key: str = Field(..., repr=False)
    poll_interval: float = Field(default=10.0, gt=0)
    rollback_on_failure: bool = True
    grid: GridConfigDTO


class TelegramConfigDTO(BaseModel):
    """Pydantic model for Telegram notification configuration."""

    token: str | None = None
    chat_id: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def enabled(self) -> bool:
        """Return True if both token and chat_id are truthy values."""
        return bool(self.token and self.chat_id)


class NotificationConfigDTO(BaseModel):
    """Pydantic model for notification service configuration."""

    telegram: TelegramConfigDTO = Field(default_factory=TelegramConfigDTO)
