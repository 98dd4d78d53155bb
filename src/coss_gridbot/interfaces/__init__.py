# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

from coss_gridbot.interfaces.exchange import IExchangeRESTService, IHttpTransport
from coss_gridbot.interfaces.notification import INotificationChannel

__all__ = [
    "IExchangeRESTService",
    "IHttpTransport",
    "INotificationChannel",
]
