# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

from logging import getLogger
from typing import Any, Callable, Self

from pydantic import BaseModel, Field

LOG = getLogger(__name__)


class Event(BaseModel):
    """Message passed from a publisher to its subscribers"""

    type: str
    data: dict[str, Any] = Field(default_factory=dict)


class EventBus:
    """Central event bus for communication between components"""

    def __init__(self: Self) -> None:
        self._subscribers: dict[str, list[Callable[[Event], None]]] = {}

    def subscribe(
        self: Self,
        event_type: str,
        callback: Callable[[Event], None],
    ) -> None:
        """Subscribe to an event type"""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(callback)

    def publish(self: Self, event_type: str, data: dict[str, Any]) -> None:
        """Publish an event to all subscribers"""
        if event_type not in self._subscribers:
            LOG.debug("No subscribers for event '%s'", event_type)
            return

        event = Event(type=event_type, data=data)
        for callback in self._subscribers[event_type]:
            callback(event)
