# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

"""
Exchange models and schemas for the COSS grid bot.

This module contains Pydantic models that define the structure of the COSS
REST API payloads, such as balances, prices and orders. Quantities and prices
are kept as decimal strings, exactly as the exchange sends them.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Self

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def to_decimal_string(value: Any) -> str:  # noqa: ANN401
    """
    Normalise a numeric wire value into a decimal string.

    The order list and details endpoints send prices as strings while the
    add-order endpoint sends them as JSON numbers.
    """
    if isinstance(value, bool):
        raise ValueError(f"Expected a decimal value, got {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        decimal = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Expected a decimal value, got {value!r}") from exc
    if not decimal.is_finite():
        raise ValueError(f"Expected a finite decimal value, got {value!r}")
    return str(value).strip()


class Credentials(BaseModel):
    """API key pair used to authenticate against the exchange."""

    model_config = ConfigDict(frozen=True)

    public_key: str = Field(..., min_length=1)
    secret_key: str = Field(..., min_length=1, repr=False)


class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class OrderType(str, Enum):
    """Order types, the values are the wire representation."""

    MARKET = "market"
    LIMIT = "limit"


class OrderStatus(str, Enum):
    OPEN = "OPEN"
    CANCELLED = "CANCELLED"
    FILLED = "FILLED"
    PARTIAL_FILL = "PARTIAL_FILL"
    CANCELLING = "CANCELLING"

    @property
    def is_terminal(self: Self) -> bool:
        """True if no further state transition is expected."""
        return self in {OrderStatus.FILLED, OrderStatus.CANCELLED}


class AssetSchema(BaseModel):
    """Balance of a single currency"""

    currency_code: str | None = None
    address: str | None = None
    total: str
    available: str
    in_order: str
    memo: str | None = None
    memoLabel: str | None = None  # noqa: N815

    @field_validator("total", "available", "in_order", mode="before")
    @classmethod
    def validate_quantity(cls, value: Any) -> str:  # noqa: ANN401
        return to_decimal_string(value)

    @classmethod
    def zero(cls, currency_code: str | None = None) -> AssetSchema:
        """Asset without any position, used if a currency is not listed."""
        return cls(
            currency_code=currency_code,
            total="0",
            available="0",
            in_order="0",
        )


class PriceSchema(BaseModel):
    """Market price of a symbol"""

    symbol: str
    price: str
    updated_time: int

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, value: Any) -> str:  # noqa: ANN401
        return to_decimal_string(value)


class OrderRecordSchema(BaseModel):
    """
    Model for an order as returned by the order add, details and list
    endpoints.

    Extra fields of the add-order response (e.g. ``hex_id``, ``total``) are
    ignored.
    """

    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., min_length=1)
    account_id: str
    order_symbol: str
    order_side: OrderSide
    status: OrderStatus
    create_time: int = Field(..., alias="createTime")
    type: OrderType
    order_price: str
    order_size: str
    executed: str
    stop_price: str = Field(
        default="0",
        validation_alias=AliasChoices("stop_price", "stop_prices"),
    )
    avg: str

    @field_validator("account_id", mode="before")
    @classmethod
    def validate_account_id(cls, value: Any) -> str:  # noqa: ANN401
        return str(value)

    @field_validator("order_side", "status", mode="before")
    @classmethod
    def normalise_tag(cls, value: Any) -> Any:  # noqa: ANN401
        # The add-order endpoint reports tags in lower case.
        return value.upper() if isinstance(value, str) else value

    @field_validator("type", mode="before")
    @classmethod
    def normalise_type(cls, value: Any) -> Any:  # noqa: ANN401
        return value.lower() if isinstance(value, str) else value

    @field_validator(
        "order_price",
        "order_size",
        "executed",
        "stop_price",
        "avg",
        mode="before",
    )
    @classmethod
    def validate_amount(cls, value: Any) -> str:  # noqa: ANN401
        return to_decimal_string(value)


class CancelOrderResponseSchema(BaseModel):
    """Model for the response of a cancel order operation"""

    order_id: str
    order_symbol: str
