#!/usr/bin/env python3
# Copyright (C) 2026 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import enum


class State(enum.IntEnum):
    """Service states as understood by the monitoring plug-in API

    The value is the exit code of the plug-in. Note that it does not reflect the
    order of severity, which is OK -> WARNING -> UNKNOWN -> CRITICAL.
    """

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3
