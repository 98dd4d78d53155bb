# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

from coss_gridbot.adapters.exchanges.coss import CossExchangeRESTServiceAdapter

__all__ = ["CossExchangeRESTServiceAdapter"]
