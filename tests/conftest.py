# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

import json
from decimal import Decimal
from types import SimpleNamespace
from typing import Any, Self

import pytest

from coss_gridbot.interfaces.exchange import IHttpTransport
from coss_gridbot.models.configuration import (
    BotConfigDTO,
    GridConfigDTO,
    NotificationConfigDTO,
    TelegramConfigDTO,
)
from coss_gridbot.models.exchange import Credentials

PUBLIC_KEY = "test-public-key"
SECRET_KEY = "test-secret-key"  # noqa: S105


class FakeTransport(IHttpTransport):
    """Transport returning queued responses and recording all requests."""

    def __init__(self: Self) -> None:
        self.requests: list[SimpleNamespace] = []
        self.responses: list[SimpleNamespace] = []

    def queue(self: Self, body: Any, status_code: int = 200) -> None:  # noqa: ANN401
        text = body if isinstance(body, str) else json.dumps(body)
        self.responses.append(SimpleNamespace(status_code=status_code, text=text))

    def request(
        self: Self,
        method: str,
        url: str,
        headers: dict[str, str],
        data: str | None = None,
    ) -> SimpleNamespace:
        self.requests.append(
            SimpleNamespace(method=method, url=url, headers=headers, data=data),
        )
        return self.responses.pop(0)


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(public_key=PUBLIC_KEY, secret_key=SECRET_KEY)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def grid_config() -> GridConfigDTO:
    return GridConfigDTO(
        pair="ETH_USDT",
        upper_limit=Decimal(200),
        lower_limit=Decimal(100),
        order_amount=Decimal("0.5"),
        number_of_grids=10,
    )


@pytest.fixture
def bot_config(grid_config: GridConfigDTO) -> BotConfigDTO:
    return BotConfigDTO(
        name="TestBot",
        api_public_key=PUBLIC_KEY,
        api_secret_key=SECRET_KEY,
        poll_interval=0.01,
        grid=grid_config,
    )


@pytest.fixture
def notification_config() -> NotificationConfigDTO:
    return NotificationConfigDTO(telegram=TelegramConfigDTO(token=None, chat_id=None))


def order_record(  # noqa: PLR0913
    order_id: str = "order-1",
    status: str = "OPEN",
    side: str = "BUY",
    price: str = "140",
    size: str = "0.5",
    symbol: str = "ETH_USDT",
) -> dict:
    """Order as returned by the order details endpoint"""
    return {
        "order_id": order_id,
        "account_id": "account-1",
        "order_symbol": symbol,
        "order_side": side,
        "status": status,
        "createTime": 1560000000000,
        "type": "limit",
        "order_price": price,
        "order_size": size,
        "executed": size if status == "FILLED" else "0",
        "stop_prices": "0",
        "avg": price if status == "FILLED" else "0",
    }


@pytest.fixture
def make_order_record() -> Any:  # noqa: ANN401
    return order_record
