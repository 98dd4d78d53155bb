# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

import hashlib
import hmac
import json
from decimal import Decimal
from logging import getLogger
from time import time
from typing import Any, Self, TypeVar
from urllib.parse import urlencode

from pydantic import TypeAdapter, ValidationError

from coss_gridbot.adapters.http import RequestsHTTPTransport
from coss_gridbot.exceptions import ApiError, DecodeError, TransportError
from coss_gridbot.interfaces.exchange import IExchangeRESTService, IHttpTransport
from coss_gridbot.models.exchange import (
    AssetSchema,
    CancelOrderResponseSchema,
    Credentials,
    OrderRecordSchema,
    OrderSide,
    OrderType,
    PriceSchema,
)

LOG = getLogger(__name__)

COSS_API_BASE_URL = "https://trade.coss.io"
RECV_WINDOW = 5000
ORDER_PRECISION = Decimal("0.001")

T = TypeVar("T")


def get_timestamp() -> int:
    """Current epoch time in milliseconds"""
    return int(time() * 1000)


def format_amount(value: Decimal) -> float:
    """
    Round a size or price to the precision accepted by the order endpoint.

    The order endpoint expects JSON numbers. A float built from a value with
    at most 3 fractional digits is serialised by ``json.dumps`` as that exact
    decimal without trailing zeros, e.g. ``Decimal("140.10")`` as ``140.1``.
    """
    return float(Decimal(value).quantize(ORDER_PRECISION))


class CossExchangeRESTServiceAdapter(IExchangeRESTService):
    """
    Signed client for the COSS REST API.

    Every request is authenticated by an HMAC-SHA256 signature over the exact
    payload that is sent: the query string for GET requests and the JSON body
    for POST and DELETE requests.
    """

    def __init__(
        self: Self,
        credentials: Credentials,
        transport: IHttpTransport | None = None,
        base_url: str = COSS_API_BASE_URL,
    ) -> None:
        self.__credentials: Credentials = credentials
        self.__transport: IHttpTransport = transport or RequestsHTTPTransport()
        self.__base_url: str = base_url.rstrip("/")

    # == Request handling ======================================================

    def sign(self: Self, payload: str) -> str:
        """Returns the hex encoded HMAC-SHA256 digest of ``payload``."""
        return hmac.new(
            self.__credentials.secret_key.encode("utf-8"),
            payload.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    def _headers(self: Self, payload: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Requested-With": "XMLHttpRequest",
            "Authorization": self.__credentials.public_key,
            "Signature": self.sign(payload),
        }

    def _request(
        self: Self,
        method: str,
        uri: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> str:
        """
        Execute a signed request and return the raw response body.

        GET requests carry their data as query parameters, all other methods
        send ``body`` as JSON. A fresh timestamp is added in both cases.
        """
        url = f"{self.__base_url}{uri}"
        if method == "GET":
            payload = urlencode({**(params or {}), "timestamp": get_timestamp()})
            url = f"{url}?{payload}"
            data = None
        else:
            payload = json.dumps({**(body or {}), "timestamp": get_timestamp()})
            data = payload

        response = self.__transport.request(
            method=method,
            url=url,
            headers=self._headers(payload),
            data=data,
        )
        if not 200 <= response.status_code < 300:  # noqa: PLR2004
            raise TransportError(
                f"{method} {uri} returned status {response.status_code}: "
                f"{response.text}",
                status_code=response.status_code,
            )
        return response.text

    @staticmethod
    def _decode(text: str, schema: type[T] | Any) -> T:  # noqa: ANN401
        try:
            return TypeAdapter(schema).validate_json(text)  # type: ignore[no-any-return]
        except ValidationError as exc:
            raise DecodeError(f"Unexpected response: {text!r}") from exc

    # == Implemented abstract methods from IExchangeRESTService ================

    def get_balances(self: Self) -> list[AssetSchema]:
        LOG.debug("Retrieving the user's balances...")
        return self._decode(
            self._request("GET", "/c/api/v1/account/balances"),
            list[AssetSchema],
        )

    def get_balance(self: Self, currency: str) -> AssetSchema:
        for asset in self.get_balances():
            if asset.currency_code == currency:
                return asset
        LOG.debug("No balance listed for %s", currency)
        return AssetSchema.zero(currency)

    def get_available_balance(self: Self, currency: str) -> Decimal:
        """
        Returns the available balance of ``currency``.

        NOTE: Any failure results in 0, so a return value of 0 does not tell
              whether the account holds nothing or the lookup failed. Use
              ``get_balance`` where that difference matters.
        """
        try:
            return Decimal(self.get_balance(currency).available)
        except ApiError as exc:
            LOG.warning("Could not retrieve the balance of %s: %s", currency, exc)
            return Decimal(0)

    def get_market_price(self: Self, pair: str) -> Decimal:
        prices = self._decode(
            self._request("GET", "/c/api/v1/market-price", params={"symbol": pair}),
            list[PriceSchema],
        )
        if not prices:
            raise DecodeError(f"No market price returned for {pair}")
        return Decimal(prices[0].price)

    def list_orders(
        self: Self,
        pair: str,
        from_id: str | None = None,
        limit: int = 50,
    ) -> list[OrderRecordSchema]:
        return self._decode(
            self._request(
                "POST",
                "/c/api/v1/order/list/all",
                body={
                    "symbol": pair,
                    "from_id": from_id,
                    "limit": limit,
                    "recvWindow": RECV_WINDOW,
                },
            ),
            list[OrderRecordSchema],
        )

    def get_order_details(self: Self, order_id: str) -> OrderRecordSchema:
        return self._decode(
            self._request(
                "POST",
                "/c/api/v1/order/details",
                body={"order_id": order_id},
            ),
            OrderRecordSchema,
        )

    def add_order(  # noqa: PLR0913
        self: Self,
        pair: str,
        order_type: OrderType,
        side: OrderSide,
        size: Decimal,
        price: Decimal,
    ) -> OrderRecordSchema:
        """Create a new order, size and price are rounded to 3 decimals."""
        return self._decode(
            self._request(
                "POST",
                "/c/api/v1/order/add/",
                body={
                    "order_symbol": pair,
                    "order_side": OrderSide(side).value,
                    "type": OrderType(order_type).value,
                    "order_size": format_amount(size),
                    "order_price": format_amount(price),
                },
            ),
            OrderRecordSchema,
        )

    def cancel_order(self: Self, pair: str, order_id: str) -> CancelOrderResponseSchema:
        return self._decode(
            self._request(
                "DELETE",
                "/c/api/v1/order/cancel",
                body={"order_symbol": pair, "order_id": order_id},
            ),
            CancelOrderResponseSchema,
        )
