# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

"""Interfaces for the exchange access of the grid bot"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Protocol, Self

from coss_gridbot.models.exchange import (
    AssetSchema,
    CancelOrderResponseSchema,
    OrderRecordSchema,
    OrderSide,
    OrderType,
)


class HTTPResponse(Protocol):
    """Minimal view on an HTTP response as consumed by the REST adapters."""

    status_code: int
    text: str


class IHttpTransport(ABC):
    """Capability to execute a single HTTP round trip."""

    @abstractmethod
    def request(
        self: Self,
        method: str,
        url: str,
        headers: dict[str, str],
        data: str | None = None,
    ) -> HTTPResponse:
        """
        Send a request and return the response.

        Raises ``TransportError`` if the request could not be executed.
        """


class IExchangeRESTService(ABC):
    """Interface for exchange operations."""

    # == Getters for exchange user operations ==================================
    @abstractmethod
    def get_balances(self: Self) -> list[AssetSchema]:
        """Get the balances of all currencies."""

    @abstractmethod
    def get_balance(self: Self, currency: str) -> AssetSchema:
        """Get the balance of a currency, zero if it is not listed."""

    @abstractmethod
    def get_available_balance(self: Self, currency: str) -> Decimal:
        """Get the available balance of a currency, 0 if anything fails."""

    @abstractmethod
    def list_orders(
        self: Self,
        pair: str,
        from_id: str | None = None,
        limit: int = 50,
    ) -> list[OrderRecordSchema]:
        """Get the orders of a pair."""

    @abstractmethod
    def get_order_details(self: Self, order_id: str) -> OrderRecordSchema:
        """Get the current state of an order."""

    # == Exchange trade operations =============================================
    @abstractmethod
    def add_order(  # noqa: PLR0913
        self: Self,
        pair: str,
        order_type: OrderType,
        side: OrderSide,
        size: Decimal,
        price: Decimal,
    ) -> OrderRecordSchema:
        """Create a new order."""

    @abstractmethod
    def cancel_order(self: Self, pair: str, order_id: str) -> CancelOrderResponseSchema:
        """Cancel an order."""

    # == Exchange market operations ============================================
    @abstractmethod
    def get_market_price(self: Self, pair: str) -> Decimal:
        """Get the current market price of a pair."""
