#!/usr/bin/env python3
# Copyright (C) 2026 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_prometheus_metric - Check a single Prometheus metric against thresholds

The check is executed by a monitoring agent: it runs one instant query, compares the
single resulting sample against a warning and a critical level and reports the state
via its exit code."""
