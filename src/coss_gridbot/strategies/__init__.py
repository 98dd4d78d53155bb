# -*- mode: python; coding: utf-8 -*-
#
# Copyright (C) 2025 Benjamin Thomas Schwertfeger
# All rights reserved.
# https://github.com/btschwertfeger
#

from coss_gridbot.strategies.grid import GridLadder, GridStrategy

__all__ = ["GridLadder", "GridStrategy"]
