# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

"""
Grid strategy

Places a ladder of limit orders around the current market price: buy orders
below and sell orders above, evenly spaced between the configured lower and
upper limit. Afterwards the placed orders are polled until they reach a
terminal state.
"""

from decimal import Decimal
from logging import getLogger
from math import floor
from typing import Self

from pydantic import BaseModel, computed_field

from coss_gridbot.core.event_bus import EventBus
from coss_gridbot.core.state_machine import StateMachine, States
from coss_gridbot.exceptions import (
    ApiError,
    GridBotError,
    GridBotStateError,
    GridValidationError,
    OrderStateError,
)
from coss_gridbot.interfaces.exchange import IExchangeRESTService
from coss_gridbot.models.configuration import GridConfigDTO
from coss_gridbot.models.exchange import (
    OrderRecordSchema,
    OrderSide,
    OrderStatus,
    OrderType,
)

LOG = getLogger(__name__)


class GridLadder(BaseModel):
    """Price levels of a grid computed for a given market price"""

    current_price: Decimal
    order_step: Decimal
    order_amount: Decimal
    buy_prices: list[Decimal]
    sell_prices: list[Decimal]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def required_base(self) -> Decimal:
        """Base currency needed to place all sell orders"""
        return self.order_amount * len(self.sell_prices)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def required_quote(self) -> Decimal:
        """Quote currency needed to place all buy orders"""
        return self.order_amount * sum(self.buy_prices, Decimal(0))


def split_pair(pair: str) -> tuple[str, str]:
    """Split e.g. "ETH_USDT" into ("ETH", "USDT")."""
    currencies = pair.split("_")
    if len(currencies) != 2 or not all(currencies):  # noqa: PLR2004
        raise GridValidationError(
            f"Pair '{pair}' must consist of a base and a quote currency separated by '_'",
        )
    return currencies[0], currencies[1]


class GridStrategy:
    """
    Grid trading strategy for a single pair.

    The strategy is driven from outside: ``initialize`` places the grid once,
    ``process`` must be called periodically to retire filled and cancelled
    orders. Orders that got filled are not replaced.
    """

    def __init__(  # noqa: PLR0913
        self: Self,
        config: GridConfigDTO,
        rest_api: IExchangeRESTService,
        event_bus: EventBus,
        state_machine: StateMachine,
        rollback_on_failure: bool = True,
    ) -> None:
        self._config = config
        self._rest_api = rest_api
        self._event_bus = event_bus
        self._state_machine = state_machine
        self._rollback_on_failure = rollback_on_failure
        self.base_currency: str | None = None
        self.quote_currency: str | None = None
        # Insertion ordered: order_id -> last status reported by the exchange
        self.__tracked: dict[str, OrderStatus] = {}

    @property
    def tracked_order_ids(self: Self) -> list[str]:
        return list(self.__tracked)

    # ==========================================================================
    # Grid computation

    def compute_ladder(self: Self, current_price: Decimal) -> GridLadder:
        """
        Compute the buy and sell price levels for ``current_price``.

        Levels are spaced by ``(upper - lower) / number_of_grids``, starting
        one step away from the current price and not exceeding the limits.
        """
        upper = self._config.upper_limit
        lower = self._config.lower_limit
        order_step = (upper - lower) / self._config.number_of_grids
        if order_step <= 0:
            raise GridValidationError(
                f"The grid step must be larger than 0 (upper={upper}, lower={lower})",
            )

        num_sell_orders = floor((upper - current_price) / order_step)
        num_buy_orders = floor((current_price - lower) / order_step)

        return GridLadder(
            current_price=current_price,
            order_step=order_step,
            order_amount=self._config.order_amount,
            buy_prices=[
                current_price - i * order_step for i in range(1, num_buy_orders + 1)
            ],
            sell_prices=[
                current_price + i * order_step for i in range(1, num_sell_orders + 1)
            ],
        )

    # ==========================================================================
    # Setup

    def __validate_limits(self: Self) -> None:
        if self._config.upper_limit < 0 or self._config.lower_limit < 0:
            raise GridValidationError("Limits cannot be negative values")
        if self._config.upper_limit < self._config.lower_limit:
            raise GridValidationError("Upper limit must be higher than lower limit")

    def __available_balance(self: Self, currency: str) -> Decimal:
        return Decimal(self._rest_api.get_balance(currency).available)

    def __fail(self: Self, exc: Exception) -> None:
        LOG.error("Initialization failed: %s", exc)
        self._state_machine.transition_to(States.ERROR)

    def initialize(self: Self) -> GridLadder:
        """
        Validate the configuration, check price and balances and place the
        grid. Nothing is placed if any of the checks fail.
        """
        LOG.info("Initializing the grid for %s...", self._config.pair)
        self._state_machine.transition_to(States.VALIDATING)

        try:
            self.base_currency, self.quote_currency = split_pair(self._config.pair)
            self.__validate_limits()

            base_available = self.__available_balance(self.base_currency)
            quote_available = self.__available_balance(self.quote_currency)

            current_price = self._rest_api.get_market_price(self._config.pair)
            LOG.info("Current price: %s", current_price)

            if not (
                self._config.lower_limit <= current_price <= self._config.upper_limit
            ):
                raise GridValidationError(
                    f"The current price for this pair is {current_price} and "
                    "should fit within the lower/upper limits",
                )

            ladder = self.compute_ladder(current_price)

            if base_available < ladder.required_base:
                raise GridValidationError(
                    f"You need at least {ladder.required_base} {self.base_currency} "
                    f"to start this bot (available: {base_available})",
                )
            if quote_available < ladder.required_quote:
                raise GridValidationError(
                    f"You need at least {ladder.required_quote} {self.quote_currency} "
                    f"to start this bot (available: {quote_available})",
                )
        except (GridValidationError, ApiError) as exc:
            self.__fail(exc)
            raise

        LOG.info("Balances:")
        LOG.info(" - %s %s", base_available, self.base_currency)
        LOG.info(" - %s %s", quote_available, self.quote_currency)
        self._state_machine.transition_to(States.PRICED_AND_BALANCED)

        self.__place_ladder(ladder)
        self._state_machine.transition_to(States.ORDERS_PLACED)
        return ladder

    def __place_ladder(self: Self, ladder: GridLadder) -> None:
        placed: list[str] = []
        for side, prices in (
            (OrderSide.BUY, ladder.buy_prices),
            (OrderSide.SELL, ladder.sell_prices),
        ):
            for price in prices:
                try:
                    order = self._rest_api.add_order(
                        pair=self._config.pair,
                        order_type=OrderType.LIMIT,
                        side=side,
                        size=self._config.order_amount,
                        price=price,
                    )
                    self.__track(order)
                except GridBotError as exc:
                    message = f"Failed to place {side.value.lower()} order at {price}: {exc}"
                    LOG.error(message)
                    if self._rollback_on_failure:
                        self.__rollback(placed)
                    self._state_machine.transition_to(States.ERROR)
                    raise GridBotStateError(message) from exc

                LOG.info(
                    "Placed %s order @ %s %s",
                    side.value.lower(),
                    price,
                    self.quote_currency,
                )
                placed.append(order.order_id)
                self._event_bus.publish(
                    "order_placed",
                    {"order_id": order.order_id, "side": side.value, "price": price},
                )

    def __track(self: Self, order: OrderRecordSchema) -> None:
        if order.order_id in self.__tracked:
            raise OrderStateError(f"Order '{order.order_id}' is already tracked")
        self.__tracked[order.order_id] = order.status

    def __rollback(self: Self, order_ids: list[str]) -> None:
        """Cancel orders placed during a failed initialization."""
        LOG.warning("Cancelling %d already placed orders...", len(order_ids))
        for order_id in order_ids:
            try:
                self._rest_api.cancel_order(self._config.pair, order_id)
            except ApiError as exc:
                LOG.error("Failed to cancel order '%s': %s", order_id, exc)
            self.__tracked.pop(order_id, None)

    # ==========================================================================
    # Monitoring

    @staticmethod
    def __check_transition(
        order_id: str,
        previous: OrderStatus,
        current: OrderStatus,
    ) -> None:
        if previous.is_terminal and current != previous:
            raise OrderStateError(
                f"Order '{order_id}' changed from terminal status "
                f"{previous.value} to {current.value}",
            )

    def process(self: Self) -> list[OrderRecordSchema]:
        """
        Poll all tracked orders once and stop tracking those that were filled
        or cancelled. Returns the retired orders.

        A failing lookup leaves the order tracked for the next cycle.
        """
        if self._state_machine.state == States.ORDERS_PLACED:
            self._state_machine.transition_to(States.MONITORING)

        retired: list[OrderRecordSchema] = []
        updates: dict[str, OrderStatus] = {}

        for order_id, previous in self.__tracked.items():
            try:
                order = self._rest_api.get_order_details(order_id)
            except ApiError as exc:
                LOG.warning("Could not retrieve order '%s': %s", order_id, exc)
                continue

            if order.order_id != order_id:
                raise OrderStateError(
                    f"Requested order '{order_id}' but received '{order.order_id}'",
                )
            self.__check_transition(order_id, previous, order.status)

            if order.status == OrderStatus.FILLED:
                LOG.info("Order @ %s was filled", order.order_price)
                retired.append(order)
                self._event_bus.publish("order_filled", order.model_dump())
            elif order.status == OrderStatus.CANCELLED:
                LOG.info("Order '%s' was cancelled", order_id)
                retired.append(order)
                self._event_bus.publish("order_cancelled", order.model_dump())
            else:
                updates[order_id] = order.status

        retired_ids = {order.order_id for order in retired}
        self.__tracked = {
            order_id: updates.get(order_id, status)
            for order_id, status in self.__tracked.items()
            if order_id not in retired_ids
        }
        return retired

    def cancel_all(self: Self) -> list[str]:
        """
        Cancel all tracked orders and stop tracking them.

        Orders that could not be cancelled stay tracked, their ids are
        returned.
        """
        LOG.info("Cancelling %d tracked orders...", len(self.__tracked))
        failed: list[str] = []
        for order_id in list(self.__tracked):
            try:
                self._rest_api.cancel_order(self._config.pair, order_id)
            except ApiError as exc:
                LOG.error("Failed to cancel order '%s': %s", order_id, exc)
                failed.append(order_id)
                continue
            del self.__tracked[order_id]
        return failed
