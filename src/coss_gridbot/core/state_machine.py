# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

from enum import Enum, auto
from logging import getLogger
from typing import Callable, Self

LOG = getLogger(__name__)


class States(Enum):
    """Lifecycle of a single grid run"""

    UNINITIALIZED = auto()
    VALIDATING = auto()
    PRICED_AND_BALANCED = auto()
    ORDERS_PLACED = auto()
    MONITORING = auto()
    SHUTDOWN_REQUESTED = auto()
    ERROR = auto()


class StateMachine:
    """Keeps track of the current state and validates transitions."""

    def __init__(self: Self, initial_state: States = States.UNINITIALIZED) -> None:
        self._state: States = initial_state
        self._transitions = self._define_transitions()
        self._callbacks: dict[States, list[Callable[[], None]]] = {}

    def _define_transitions(self: Self) -> dict[States, list[States]]:
        return {
            States.UNINITIALIZED: [
                States.VALIDATING,
                States.SHUTDOWN_REQUESTED,
                States.ERROR,
            ],
            States.VALIDATING: [
                States.PRICED_AND_BALANCED,
                States.SHUTDOWN_REQUESTED,
                States.ERROR,
            ],
            States.PRICED_AND_BALANCED: [
                States.ORDERS_PLACED,
                States.SHUTDOWN_REQUESTED,
                States.ERROR,
            ],
            States.ORDERS_PLACED: [
                States.MONITORING,
                States.SHUTDOWN_REQUESTED,
                States.ERROR,
            ],
            States.MONITORING: [
                States.SHUTDOWN_REQUESTED,
                States.ERROR,
            ],
            States.SHUTDOWN_REQUESTED: [States.ERROR],
            States.ERROR: [States.SHUTDOWN_REQUESTED],
        }

    def transition_to(self: Self, new_state: States) -> None:
        """Attempt to transition to a new state"""
        if new_state == self._state:
            return

        if new_state not in self._transitions[self._state]:
            raise ValueError(
                f"Invalid state transition from {self._state} to {new_state}",
            )

        LOG.debug("Transition from %s to %s", self._state.name, new_state.name)
        self._state = new_state

        for callback in self._callbacks.get(new_state, []):
            callback()

    @property
    def state(self: Self) -> States:
        return self._state

    def register_callback(
        self: Self,
        state: States,
        callback: Callable[[], None],
    ) -> None:
        """Register a callback to be executed when entering a state"""
        if state not in self._callbacks:
            self._callbacks[state] = []
        self._callbacks[state].append(callback)
