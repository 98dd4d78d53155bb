# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

"""
Notifications about the lifecycle of the bot and its orders.

The service listens on the event bus: notification events carry a ready
message, order_filled events carry the filled order record.
"""

from logging import getLogger
from typing import Self

from coss_gridbot.adapters.notification import TelegramNotificationChannelAdapter
from coss_gridbot.core.event_bus import Event, EventBus
from coss_gridbot.interfaces import INotificationChannel
from coss_gridbot.models.configuration import NotificationConfigDTO
from coss_gridbot.models.exchange import OrderRecordSchema

LOG = getLogger(__name__)


class NotificationService:
    """Forwards bot and order events to the configured channels."""

    def __init__(self: Self, config: NotificationConfigDTO) -> None:
        self.__channels: list[INotificationChannel] = []
        if config.telegram.enabled:
            self.add_channel(
                TelegramNotificationChannelAdapter(
                    token=config.telegram.token,  # type: ignore[arg-type]
                    chat_id=config.telegram.chat_id,  # type: ignore[arg-type]
                ),
            )

    @property
    def channels(self: Self) -> list[INotificationChannel]:
        return list(self.__channels)

    def add_channel(self: Self, channel: INotificationChannel) -> None:
        self.__channels.append(channel)

    def subscribe(self: Self, event_bus: EventBus) -> None:
        event_bus.subscribe("notification", self.on_notification)
        event_bus.subscribe("order_filled", self.on_order_filled)

    def notify(self: Self, message: str) -> None:
        """Send message through every channel, failures are logged."""
        LOG.info("Notification: %s", message)
        if not self.__channels:
            return
        delivered = [channel.send(message) for channel in self.__channels]
        if not any(delivered):
            LOG.warning("The notification was not delivered by any channel")

    def on_notification(self: Self, event: Event) -> None:
        self.notify(event.data["message"])

    def on_order_filled(self: Self, event: Event) -> None:
        order = OrderRecordSchema.model_validate(event.data)
        self.notify(
            f"{order.order_symbol}: {order.order_side.value} order "
            f"@ {order.order_price} filled (size {order.executed})",
        )
