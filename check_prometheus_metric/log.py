#!/usr/bin/env python3
# Copyright (C) 2026 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import logging
import sys
from typing import TextIO

# The plug-in API reserves standard output for the single status line. Log
# messages only ever go to the stream given to setup_logging (stderr by default).

logger = logging.getLogger("check_prometheus_metric")


def get_formatter(format_str: str = "%(asctime)s %(levelname)s %(message)s") -> logging.Formatter:
    return logging.Formatter(format_str)


def clear_console_logging() -> None:
    logger.handlers[:] = []
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.CRITICAL)


# Set default logging handler to avoid "No handler found" warnings.
clear_console_logging()


def verbosity_to_log_level(verbosity: int) -> int:
    """Values for "verbosity":

      0: only CRITICAL (nothing in practice)
      1: enables WARNING and above
      2: enables INFO and above
      3: enables DEBUG and above (ALL messages)

    >>> verbosity_to_log_level(0) == logging.CRITICAL
    True
    >>> verbosity_to_log_level(7) == logging.DEBUG
    True
    """
    if verbosity >= 3:
        return logging.DEBUG
    if verbosity == 2:
        return logging.INFO
    if verbosity == 1:
        return logging.WARNING
    return logging.CRITICAL


def setup_logging(verbosity: int, stream: TextIO | None = None) -> None:
    handler = logging.StreamHandler(stream=sys.stderr if stream is None else stream)
    handler.setFormatter(get_formatter())

    del logger.handlers[:]  # Remove all previously existing handlers
    logger.addHandler(handler)
    logger.setLevel(verbosity_to_log_level(verbosity))
    logger.propagate = False
