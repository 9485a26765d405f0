#!/usr/bin/env python3
# Copyright (C) 2026 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import signal
import time
from collections.abc import Iterator
from types import FrameType

import pytest

from check_prometheus_metric.exceptions import QueryError, QueryTimeout
from check_prometheus_metric.state import State
from check_prometheus_metric.timeout import query_deadline


def _custom_handler(signum: int, frame: FrameType | None) -> None:
    pass


@pytest.fixture(name="custom_alarm_handler")
def fixture_custom_alarm_handler() -> Iterator[None]:
    previous = signal.signal(signal.SIGALRM, _custom_handler)
    yield
    signal.signal(signal.SIGALRM, previous)


def test_deadline_interrupts_the_block() -> None:
    with pytest.raises(QueryTimeout, match="^query timed out after 1s$") as e:
        with query_deadline(1):
            time.sleep(5)
    assert isinstance(e.value, QueryError)
    assert e.value.state is State.CRITICAL


@pytest.mark.usefixtures("custom_alarm_handler")
def test_previous_handler_is_restored() -> None:
    with query_deadline(10):
        assert signal.getsignal(signal.SIGALRM) is not _custom_handler
    assert signal.getsignal(signal.SIGALRM) is _custom_handler
    assert signal.alarm(0) == 0


@pytest.mark.usefixtures("custom_alarm_handler")
def test_previous_handler_is_restored_after_timeout() -> None:
    with pytest.raises(QueryTimeout):
        with query_deadline(1):
            time.sleep(5)
    assert signal.getsignal(signal.SIGALRM) is _custom_handler


def test_exceptions_of_the_block_pass_through() -> None:
    with pytest.raises(QueryError, match="^refused$"):
        with query_deadline(10):
            raise QueryError("refused")
    assert signal.alarm(0) == 0
