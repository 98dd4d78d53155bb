# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

"""Exceptions raised by the COSS grid bot."""


class GridBotError(Exception):
    """Base class for all errors of this package."""


class ApiError(GridBotError):
    """Raised when a request against the exchange API failed."""


class TransportError(ApiError):
    """The request could not be executed or returned a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(ApiError):
    """The response body does not match the expected schema."""


class GridValidationError(GridBotError):
    """A configuration value or trading precondition is violated."""


class GridBotStateError(GridBotError):
    """The bot entered a state it cannot recover from."""


class OrderStateError(GridBotError):
    """The exchange reported an inconsistent order lifecycle."""
