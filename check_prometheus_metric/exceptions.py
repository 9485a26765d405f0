#!/usr/bin/env python3
# Copyright (C) 2026 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""User-defined exceptions of the check and the service state each of them maps to."""

from typing import ClassVar

from check_prometheus_metric.state import State

__all__ = [
    "BackendWarning",
    "ConfigurationError",
    "PromCheckError",
    "QueryError",
    "QueryTimeout",
    "ResultShapeError",
]


# never used directly in the code. Just some wrapper to make all of our
# exceptions handleable with one call
class PromCheckError(Exception):
    state: ClassVar[State] = State.UNKNOWN


class ConfigurationError(PromCheckError):
    """A required option is missing or has an invalid value."""

    state = State.WARNING


class QueryError(PromCheckError):
    """The query could not be executed or the backend answered with an error."""

    state = State.CRITICAL


class QueryTimeout(QueryError):
    """Raised when the deadline of the query is reached.

    See also:
        `check_prometheus_metric.timeout.query_deadline` raises it.
    """


class ResultShapeError(PromCheckError):
    """The query succeeded but its result cannot be evaluated against the thresholds."""

    state = State.CRITICAL


class BackendWarning(PromCheckError):
    """The query succeeded but the backend attached warnings to the result."""

    state = State.WARNING

    def __init__(self, warnings: tuple[str, ...]) -> None:
        super().__init__("warnings: [%s]" % " ".join(warnings))
        self.warnings = warnings
