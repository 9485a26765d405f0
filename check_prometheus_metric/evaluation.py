#!/usr/bin/env python3
# Copyright (C) 2026 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from __future__ import annotations

import math
from dataclasses import dataclass

from check_prometheus_metric.config import Config
from check_prometheus_metric.exceptions import BackendWarning, ResultShapeError
from check_prometheus_metric.prometheus import QueryResult, ResultType, Sample
from check_prometheus_metric.state import State

SUMMARY_PREFIX = "CheckPrometheusMetric"


@dataclass(frozen=True)
class CheckResult:
    state: State
    summary: str


def check_query_result(result: QueryResult, config: Config) -> CheckResult:
    sample = extract_single_sample(result)
    state = evaluate_levels(sample.value, warning=config.warning, critical=config.critical)
    return CheckResult(
        state=state,
        summary=f"{SUMMARY_PREFIX} {state.name}: {config.query} is {format_value(sample.value)}",
    )


def format_value(value: float) -> str:
    """Six decimals, special values spelled the way Prometheus spells them

    >>> format_value(95.0)
    '95.000000'
    >>> format_value(float("nan"))
    'NaN'
    >>> format_value(float("inf")), format_value(float("-inf"))
    ('+Inf', '-Inf')
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:f}"


def extract_single_sample(result: QueryResult) -> Sample:
    """Return the one sample the query is expected to resolve to

    Raises:
        BackendWarning: the backend attached warnings, the value is not trusted
        ResultShapeError: not a vector, or not exactly one sample in it
    """
    if result.warnings:
        raise BackendWarning(tuple(result.warnings))

    if result.result_type is not ResultType.VECTOR:
        raise ResultShapeError(f"unexpected result type {result.result_type.value}")

    if not result.samples:
        raise ResultShapeError("no metrics returned")

    # The query has to be written such that it selects exactly one series.
    if len(result.samples) > 1:
        raise ResultShapeError("more than one metric returned")

    return result.samples[0]


def evaluate_levels(value: float, *, warning: float, critical: float) -> State:
    """Map the value to a state, checking the critical level first

    Both comparisons are strict, a value equal to a level does not trigger it.

    >>> evaluate_levels(95.0, warning=80.0, critical=90.0)
    <State.CRITICAL: 2>
    >>> evaluate_levels(85.0, warning=80.0, critical=90.0)
    <State.WARNING: 1>
    >>> evaluate_levels(80.0, warning=80.0, critical=90.0)
    <State.OK: 0>
    """
    if value > critical:
        return State.CRITICAL
    if value > warning:
        return State.WARNING
    return State.OK
