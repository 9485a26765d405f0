#!/usr/bin/env python3
# Copyright (C) 2026 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

# Runs one PromQL instant query and compares the single resulting sample
# against a warning and a critical level:
#
#   check_prometheus_metric -H prometheus -p 9090 -q 'node_load1{instance="web01"}' -w 4 -c 8
#   CheckPrometheusMetric WARNING: node_load1{instance="web01"} is 5.120000
#
# The exit code is the state (0 OK, 1 WARNING, 2 CRITICAL, 3 UNKNOWN).

from __future__ import annotations

import os
import sys
import time
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

import requests

from check_prometheus_metric.config import build_config, Config, parse_arguments, PROG
from check_prometheus_metric.evaluation import check_query_result, CheckResult
from check_prometheus_metric.exceptions import ConfigurationError, PromCheckError
from check_prometheus_metric.log import logger, setup_logging
from check_prometheus_metric.prometheus import PrometheusAPI, QueryResult
from check_prometheus_metric.state import State
from check_prometheus_metric.timeout import query_deadline


class QueryAPIProto(Protocol):
    def query(self, promql: str, timestamp: float) -> QueryResult: ...


APIFactory = Callable[[Config], AbstractContextManager[QueryAPIProto]]


def main(
    argv: Sequence[str] | None = None,
    api_factory: APIFactory | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    try:
        args = parse_arguments(sys.argv[1:] if argv is None else argv)
    except ConfigurationError as e:
        _output_error("error validating input", str(e))
        return int(e.state)

    setup_logging(args.verbose)

    try:
        config = build_config(args, os.environ if environ is None else environ)
    except ConfigurationError as e:
        if args.debug:
            raise
        _output_error("error validating input", str(e))
        return int(e.state)

    _warn_about_inverted_levels(config)

    try:
        result = _execute_check(config, api_factory or _prometheus_api)
    except PromCheckError as e:
        if config.debug:
            raise
        _output_error("error executing check", str(e))
        return int(e.state)
    except Exception as e:
        if config.debug:
            raise
        _output_error("error executing check", f"Unhandled exception: {e}")
        return int(State.UNKNOWN)

    _output_check_result(result.summary)
    return int(result.state)


def _execute_check(config: Config, api_factory: APIFactory) -> CheckResult:
    with api_factory(config) as api:
        with query_deadline(config.timeout):
            result = api.query(config.query, time.time())
    return check_query_result(result, config)


@contextmanager
def _prometheus_api(config: Config) -> Iterator[PrometheusAPI]:
    with requests.Session() as session:
        session.headers["User-Agent"] = PROG
        yield PrometheusAPI(session, config.base_url, config.timeout)


def _warn_about_inverted_levels(config: Config) -> None:
    if config.warning >= config.critical:
        # every value above the warning level is above the critical level as well
        logger.warning(
            "Warning level %s is not below critical level %s, WARNING cannot be reported",
            config.warning,
            config.critical,
        )


def _output_check_result(s: str) -> None:
    sys.stdout.write("%s\n" % s)


def _output_error(context: str, message: str) -> None:
    sys.stderr.write(f"{context}: {message}\n")
