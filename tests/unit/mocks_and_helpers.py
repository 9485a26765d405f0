#!/usr/bin/env python3
# Copyright (C) 2026 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import json
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import requests

from check_prometheus_metric.config import Config
from check_prometheus_metric.prometheus import QueryResult


def make_response(status_code: int, body: object) -> requests.Response:
    """A real response object, so `.json()` behaves like the one of the library"""
    response = requests.Response()
    response.status_code = status_code
    response._content = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
    response.encoding = "utf-8"
    return response


def vector_body(*values: str, warnings: Sequence[str] = ()) -> dict[str, Any]:
    body: dict[str, Any] = {
        "status": "success",
        "data": {
            "resultType": "vector",
            "result": [
                {
                    "metric": {"__name__": "up", "instance": f"node{index}:9100"},
                    "value": [1700000000.5, value],
                }
                for index, value in enumerate(values)
            ],
        },
    }
    if warnings:
        body["warnings"] = list(warnings)
    return body


class FakeQueryAPI:
    """Records the queries and answers them with a canned result or exception"""

    def __init__(self, answer: QueryResult | Exception) -> None:
        self.answer = answer
        self.queries: list[tuple[str, float]] = []

    def query(self, promql: str, timestamp: float) -> QueryResult:
        self.queries.append((promql, timestamp))
        if isinstance(self.answer, Exception):
            raise self.answer
        return self.answer


class FakeAPIFactory:
    def __init__(self, api: FakeQueryAPI) -> None:
        self.api = api
        self.configs: list[Config] = []

    @contextmanager
    def __call__(self, config: Config) -> Iterator[FakeQueryAPI]:
        self.configs.append(config)
        yield self.api
