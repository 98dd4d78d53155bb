# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2023 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

import signal
import sys
from importlib.metadata import version
from logging import getLogger
from time import monotonic, sleep
from types import FrameType
from typing import Self

from coss_gridbot.core.event_bus import EventBus
from coss_gridbot.core.state_machine import StateMachine, States
from coss_gridbot.exceptions import GridBotError
from coss_gridbot.interfaces.exchange import IExchangeRESTService
from coss_gridbot.models.configuration import BotConfigDTO, NotificationConfigDTO
from coss_gridbot.models.exchange import Credentials
from coss_gridbot.services.notification_service import NotificationService
from coss_gridbot.strategies.grid import GridStrategy

LOG = getLogger(__name__)


class Bot:
    """
    Orchestrates the trading bot's components: places the grid once and
    polls the placed orders periodically until a shutdown is requested.
    """

    def __init__(
        self: Self,
        bot_config: BotConfigDTO,
        notification_config: NotificationConfigDTO,
        rest_api: IExchangeRESTService | None = None,
    ) -> None:
        LOG.info("Initiate the COSS grid bot instance (v%s)", version("coss-gridbot"))
        LOG.debug("Config: %s", bot_config)

        self.__config = bot_config
        self.__event_bus = EventBus()
        self.__state_machine = StateMachine()

        if rest_api is None:
            from coss_gridbot.adapters.exchanges.coss import (  # noqa: PLC0415
                CossExchangeRESTServiceAdapter,
            )

            rest_api = CossExchangeRESTServiceAdapter(
                credentials=Credentials(
                    public_key=bot_config.api_public_key,
                    secret_key=bot_config.api_secret_key,
                ),
            )
        self.__rest_api = rest_api

        # == Application services ==============================================
        ##
        self.__notification_service = NotificationService(notification_config)
        self.__strategy = GridStrategy(
            config=bot_config.grid,
            rest_api=self.__rest_api,
            event_bus=self.__event_bus,
            state_machine=self.__state_machine,
            rollback_on_failure=bot_config.rollback_on_failure,
        )
        self.__notification_service.subscribe(self.__event_bus)

    @property
    def state(self: Self) -> States:
        return self.__state_machine.state

    @property
    def strategy(self: Self) -> GridStrategy:
        return self.__strategy

    def run(self: Self) -> None:
        """Place the grid and poll the orders until shutdown."""
        LOG.info("Starting the COSS grid bot...")

        try:
            self.__strategy.initialize()
        except GridBotError as exc:
            self.terminate(f"The grid could not be placed: {exc}")

        # ======================================================================
        # A controlled shutdown is initiated by sending a SIGINT or SIGTERM
        # signal to the process. The current poll cycle is always completed.
        ##
        def _signal_handler(signum: int, frame: FrameType | None) -> None:  # noqa: ARG001
            LOG.warning("Initiate a controlled shutdown of the algorithm...")
            self.__state_machine.transition_to(States.SHUTDOWN_REQUESTED)

        for sig in (signal.SIGINT, signal.SIGTERM):
            signal.signal(sig, _signal_handler)

        self.__event_bus.publish(
            "notification",
            {"message": f"{self.__config.name} placed its grid!"},
        )

        try:
            while self.__state_machine.state not in {
                States.SHUTDOWN_REQUESTED,
                States.ERROR,
            }:
                self.__strategy.process()
                if not self.__strategy.tracked_order_ids:
                    LOG.info("No more orders to monitor.")
                    self.__state_machine.transition_to(States.SHUTDOWN_REQUESTED)
                    break
                self.__wait(self.__config.poll_interval)
        except GridBotError as exc:
            LOG.error("Exception while polling orders.", exc_info=exc)
            self.__state_machine.transition_to(States.ERROR)

        if self.__state_machine.state == States.ERROR:
            self.terminate("The algorithm was shut down due to an error!")
        self.terminate("The algorithm was shut down successfully!", exception=False)

    def __wait(self: Self, seconds: float) -> None:
        """Sleep, but return early once a shutdown was requested."""
        until = monotonic() + seconds
        while (
            self.__state_machine.state == States.MONITORING
            and (remaining := until - monotonic()) > 0
        ):
            sleep(min(1.0, remaining))

    def terminate(
        self: Self,
        reason: str = "",
        *,
        exception: bool = True,
    ) -> None:
        """
        Handle the termination of the algorithm.

        1. Notifies the user about the termination.
        2. Exits the algorithm.

        Open orders are left on the exchange, use the ``cancel`` command to
        remove them.
        """
        LOG.info(reason)
        self.__event_bus.publish(
            "notification",
            {"message": f"{self.__config.name} terminated.\nReason: {reason}"},
        )
        sys.exit(exception)
