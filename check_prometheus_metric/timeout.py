#!/usr/bin/env python3
# Copyright (C) 2026 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from __future__ import annotations

import signal
from collections.abc import Iterator
from contextlib import contextmanager
from types import FrameType
from typing import NoReturn

from check_prometheus_metric.exceptions import QueryTimeout


@contextmanager
def query_deadline(seconds: int) -> Iterator[None]:
    """Abort the block with QueryTimeout once `seconds` of wall-clock time have passed

    The HTTP client only bounds single socket operations, a server trickling its
    response byte by byte would keep it waiting. Uses SIGALRM, so it only works in
    the main thread. The SIGALRM handler installed before is restored on exit.
    """

    def _expired(signum: int, frame: FrameType | None) -> NoReturn:
        raise QueryTimeout(f"query timed out after {seconds}s")

    previous_handler = signal.signal(signal.SIGALRM, _expired)
    signal.alarm(seconds)
    try:
        yield
    finally:
        signal.alarm(0)
        # None: the handler was not installed from Python
        signal.signal(
            signal.SIGALRM, signal.SIG_DFL if previous_handler is None else previous_handler
        )
