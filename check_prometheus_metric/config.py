#!/usr/bin/env python3
# Copyright (C) 2026 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Command line and environment binding of the check

Every option can be given as a flag or as an environment variable, the flag takes
precedence. An empty environment variable counts as not set.
"""

from __future__ import annotations

import argparse
from collections.abc import Mapping, Sequence
from typing import Any, Final, NoReturn

from pydantic import BaseModel, ConfigDict, Field, field_validator, ValidationError

from check_prometheus_metric.exceptions import ConfigurationError

PROG: Final = "check_prometheus_metric"
ENV_PREFIX: Final = "SENSU_CHECK_PROMETHEUS_METRIC_"
DEFAULT_TIMEOUT: Final = 10

# options that can also be set from the environment, in the order they are validated
ENV_BOUND_OPTIONS: Final = ("host", "port", "query", "critical", "warning", "timeout")

_EXPECTED_VALUE: Final = {
    "critical": "a number",
    "warning": "a number",
    "timeout": "a positive integer",
}


def environment_variable(option: str) -> str:
    """
    >>> environment_variable("critical")
    'SENSU_CHECK_PROMETHEUS_METRIC_CRITICAL'
    """
    return f"{ENV_PREFIX}{option.upper()}"


class Config(BaseModel):
    """The validated configuration of one check execution"""

    model_config = ConfigDict(frozen=True)

    host: str = Field(min_length=1)
    port: str = Field(min_length=1)
    query: str = Field(min_length=1)
    critical: float
    warning: float
    timeout: int = Field(default=DEFAULT_TIMEOUT, gt=0)
    debug: bool = False
    verbose: int = 0

    @field_validator("critical", "warning")
    @classmethod
    def _validate_threshold_is_set(cls, value: float) -> float:
        # A threshold of 0 is indistinguishable from "not configured" for the
        # monitoring agents feeding this check, so it is rejected like a missing one.
        if value == 0:
            raise ValueError("threshold must not be zero")
        return value

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


class _ArgumentParser(argparse.ArgumentParser):
    # argparse would exit with 2, which is CRITICAL for the monitoring core
    def error(self, message: str) -> NoReturn:
        raise ConfigurationError(message)


def parse_arguments(argv: Sequence[str]) -> argparse.Namespace:
    """
    Raises:
        ConfigurationError: the command line cannot be parsed
    """
    parser = _ArgumentParser(
        prog=PROG,
        description="Evaluate the result of a single Prometheus instant query against "
        "warning and critical thresholds.",
    )
    parser.add_argument(
        "-H",
        "--host",
        metavar="HOST",
        help=f"Prometheus host (environment: {environment_variable('host')})",
    )
    parser.add_argument(
        "-p",
        "--port",
        metavar="PORT",
        help=f"Prometheus port (environment: {environment_variable('port')})",
    )
    parser.add_argument(
        "-q",
        "--query",
        metavar="PROMQL",
        help="Prometheus query, it has to resolve to exactly one series "
        f"(environment: {environment_variable('query')})",
    )
    parser.add_argument(
        "-c",
        "--critical",
        metavar="FLOAT",
        help=f"Critical threshold (environment: {environment_variable('critical')})",
    )
    parser.add_argument(
        "-w",
        "--warning",
        metavar="FLOAT",
        help=f"Warning threshold (environment: {environment_variable('warning')})",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        metavar="SECONDS",
        help=f"Timeout of the query in seconds, default {DEFAULT_TIMEOUT} "
        f"(environment: {environment_variable('timeout')})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Verbose mode, log to stderr (for even more output use -vvv)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug mode: let Python exceptions come through",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace, environ: Mapping[str, str]) -> Config:
    """Merge flags and environment and validate the result

    Raises:
        ConfigurationError: naming the first option that is missing or invalid
    """
    raw = {
        option: value
        for option in ENV_BOUND_OPTIONS
        if (value := _lookup(option, args, environ)) is not None
    }
    try:
        return Config.model_validate({**raw, "debug": args.debug, "verbose": args.verbose})
    except ValidationError as e:
        raise ConfigurationError(_describe_error(e.errors()[0])) from e


def _lookup(option: str, args: argparse.Namespace, environ: Mapping[str, str]) -> str | None:
    if (value := getattr(args, option)) is not None:
        return value
    return environ.get(environment_variable(option)) or None


def _describe_error(error: Mapping[str, Any]) -> str:
    option = str(error["loc"][0])
    names = f"--{option} or {environment_variable(option)}"
    if error["type"] in ("missing", "string_too_short", "value_error"):
        return f"{names} environment variable is required"
    return f"{names} must be {_EXPECTED_VALUE.get(option, 'valid')}, got {error['input']!r}"
