# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

from logging import getLogger
from typing import Self

import requests

from coss_gridbot.exceptions import TransportError
from coss_gridbot.interfaces.exchange import HTTPResponse, IHttpTransport

LOG = getLogger(__name__)


class RequestsHTTPTransport(IHttpTransport):
    """HTTP transport based on a ``requests.Session``."""

    def __init__(
        self: Self,
        session: requests.Session | None = None,
        timeout: float = 10,
    ) -> None:
        self.__session = session or requests.Session()
        self.__timeout = timeout

    def request(
        self: Self,
        method: str,
        url: str,
        headers: dict[str, str],
        data: str | None = None,
    ) -> HTTPResponse:
        LOG.debug("%s %s", method, url)
        try:
            return self.__session.request(
                method=method,
                url=url,
                headers=headers,
                data=data.encode("utf-8") if data is not None else None,
                timeout=self.__timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

    def close(self: Self) -> None:
        self.__session.close()
