#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# GitHub: https://github.com/btschwertfeger
#

"""Helper data structures used for integration testing."""

import hashlib
import hmac
import json
import uuid
from decimal import Decimal
from types import SimpleNamespace
from typing import Any, Self
from urllib.parse import parse_qsl, urlsplit

from coss_gridbot.interfaces.exchange import IHttpTransport


class CossExchange(IHttpTransport):
    """
    In-memory COSS exchange answering the requests of the REST adapter.

    Requests are authenticated exactly like the real exchange does it, so the
    signature of every request is verified against the payload that was sent.
    Balances are reserved when orders are placed and released on
    cancellation.
    """

    def __init__(  # noqa: PLR0913
        self: Self,
        public_key: str,
        secret_key: str,
        pair: str = "ETH_USDT",
        price: str = "150",
        balances: dict[str, str] | None = None,
    ) -> None:
        self.__public_key = public_key
        self.__secret_key = secret_key
        self.pair = pair
        self.price = price
        self.__balances: dict[str, dict[str, Decimal]] = {
            currency: {"available": Decimal(amount), "in_order": Decimal(0)}
            for currency, amount in (
                balances or {"ETH": "100", "USDT": "1000000"}
            ).items()
        }
        self.orders: dict[str, dict[str, Any]] = {}
        self.requests: list[SimpleNamespace] = []
        self.fail_add_order_after: int | None = None
        self.fill_on_lookup = False
        self.unavailable = False

    # == Helpers used by the tests =============================================

    def balance(self: Self, currency: str) -> dict[str, Decimal]:
        return self.__balances[currency]

    def fill_order(self: Self, order_id: str) -> None:
        order = self.orders[order_id]
        order["status"] = "FILLED"
        order["executed"] = order["order_size"]
        order["avg"] = order["order_price"]

    def cancel_externally(self: Self, order_id: str) -> None:
        self.__release(self.orders[order_id])
        self.orders[order_id]["status"] = "CANCELLED"

    def open_orders(self: Self) -> list[dict[str, Any]]:
        return [
            order
            for order in self.orders.values()
            if order["status"] not in {"FILLED", "CANCELLED"}
        ]

    # == Transport =============================================================

    def request(
        self: Self,
        method: str,
        url: str,
        headers: dict[str, str],
        data: str | None = None,
    ) -> SimpleNamespace:
        parts = urlsplit(url)
        if method == "GET":
            payload = parts.query
            params = dict(parse_qsl(parts.query))
        else:
            payload = data or ""
            params = json.loads(payload)
        self.requests.append(
            SimpleNamespace(method=method, path=parts.path, params=params),
        )

        if self.unavailable:
            return self.__response({"error": "Service unavailable"}, status_code=503)
        if (
            headers.get("Authorization") != self.__public_key
            or headers.get("Signature") != self.__sign(payload)
            or "timestamp" not in params
        ):
            return self.__response({"error": "Invalid signature"}, status_code=401)

        routes = {
            ("GET", "/c/api/v1/account/balances"): self.__get_balances,
            ("GET", "/c/api/v1/market-price"): self.__get_market_price,
            ("POST", "/c/api/v1/order/list/all"): self.__list_orders,
            ("POST", "/c/api/v1/order/details"): self.__get_order_details,
            ("POST", "/c/api/v1/order/add/"): self.__add_order,
            ("DELETE", "/c/api/v1/order/cancel"): self.__cancel_order,
        }
        if (method, parts.path) not in routes:
            return self.__response({"error": "Not found"}, status_code=404)
        return routes[method, parts.path](params)

    def __sign(self: Self, payload: str) -> str:
        return hmac.new(
            self.__secret_key.encode(),
            payload.encode(),
            hashlib.sha256,
        ).hexdigest()

    @staticmethod
    def __response(body: Any, status_code: int = 200) -> SimpleNamespace:  # noqa: ANN401
        return SimpleNamespace(status_code=status_code, text=json.dumps(body))

    # == Endpoints =============================================================

    def __get_balances(self: Self, params: dict) -> SimpleNamespace:  # noqa: ARG002
        return self.__response(
            [
                {
                    "currency_code": currency,
                    "address": "0x0",
                    "total": str(balance["available"] + balance["in_order"]),
                    "available": str(balance["available"]),
                    "in_order": str(balance["in_order"]),
                    "memo": None,
                }
                for currency, balance in self.__balances.items()
            ],
        )

    def __get_market_price(self: Self, params: dict) -> SimpleNamespace:
        if params.get("symbol") != self.pair:
            return self.__response([])
        return self.__response(
            [{"symbol": self.pair, "price": self.price, "updated_time": 1560000000000}],
        )

    def __list_orders(self: Self, params: dict) -> SimpleNamespace:
        return self.__response(
            [
                order
                for order in self.orders.values()
                if order["order_symbol"] == params["symbol"]
            ][: params["limit"]],
        )

    def __get_order_details(self: Self, params: dict) -> SimpleNamespace:
        if params["order_id"] not in self.orders:
            return self.__response({"error": "Order not found"}, status_code=400)
        if self.fill_on_lookup and self.orders[params["order_id"]]["status"] == "OPEN":
            self.fill_order(params["order_id"])
        return self.__response(self.orders[params["order_id"]])

    def __add_order(self: Self, params: dict) -> SimpleNamespace:
        if (
            self.fail_add_order_after is not None
            and len(self.orders) >= self.fail_add_order_after
        ):
            return self.__response({"error": "Order rejected"}, status_code=400)

        base, quote = params["order_symbol"].split("_")
        size = Decimal(str(params["order_size"]))
        price = Decimal(str(params["order_price"]))
        currency, amount = (
            (quote, size * price) if params["order_side"] == "BUY" else (base, size)
        )
        if self.__balances[currency]["available"] < amount:
            return self.__response({"error": "Insufficient balance"}, status_code=400)
        self.__balances[currency]["available"] -= amount
        self.__balances[currency]["in_order"] += amount

        order_id = str(uuid.uuid4())
        self.orders[order_id] = {
            "order_id": order_id,
            "account_id": "account-1",
            "order_symbol": params["order_symbol"],
            "order_side": params["order_side"],
            "status": "OPEN",
            "createTime": 1560000000000,
            "type": params["type"],
            "order_price": str(price),
            "order_size": str(size),
            "executed": "0",
            "stop_price": "0",
            "avg": "0",
        }
        # The add endpoint answers with numbers and lower case tags.
        return self.__response(
            {
                "hex_id": None,
                "order_id": order_id,
                "account_id": "account-1",
                "order_symbol": params["order_symbol"],
                "order_side": params["order_side"].lower(),
                "status": "open",
                "createTime": 1560000000000,
                "type": params["type"],
                "order_price": float(price),
                "order_size": float(size),
                "executed": 0,
                "stop_price": 0,
                "avg": 0,
                "total": f"{size * price} {quote}",
            },
        )

    def __cancel_order(self: Self, params: dict) -> SimpleNamespace:
        order = self.orders.get(params["order_id"])
        if order is None or order["status"] in {"FILLED", "CANCELLED"}:
            return self.__response({"error": "Cannot cancel order"}, status_code=400)
        self.__release(order)
        order["status"] = "CANCELLED"
        return self.__response(
            {"order_id": order["order_id"], "order_symbol": order["order_symbol"]},
        )

    def __release(self: Self, order: dict[str, Any]) -> None:
        base, quote = order["order_symbol"].split("_")
        size = Decimal(order["order_size"])
        currency, amount = (
            (quote, size * Decimal(order["order_price"]))
            if order["order_side"] == "BUY"
            else (base, size)
        )
        self.__balances[currency]["available"] += amount
        self.__balances[currency]["in_order"] -= amount
