# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

from logging import getLogger
from typing import Self

import requests

from coss_gridbot.interfaces import INotificationChannel

LOG = getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"


class TelegramNotificationChannelAdapter(INotificationChannel):
    """
    Posts messages to a Telegram chat via the Bot API.

    Messages are sent as plain text since pair symbols like ETH_USDT are not
    valid Markdown.
    """

    def __init__(
        self: Self,
        token: str,
        chat_id: str,
        session: requests.Session | None = None,
        timeout: float = 10,
    ) -> None:
        self.__url = f"{TELEGRAM_API_URL}/bot{token}/sendMessage"
        self.__chat_id = chat_id
        self.__session = session or requests.Session()
        self.__timeout = timeout

    def send(self: Self, message: str) -> bool:
        try:
            response = self.__session.post(
                self.__url,
                json={
                    "chat_id": self.__chat_id,
                    "text": message,
                    "disable_web_page_preview": True,
                },
                timeout=self.__timeout,
            )
        except requests.RequestException as exc:
            LOG.error("Could not reach Telegram: %s", exc)
            return False

        if response.status_code != 200:  # noqa: PLR2004
            LOG.error(
                "Telegram rejected the message (status %d): %s",
                response.status_code,
                response.text,
            )
            return False
        return True
