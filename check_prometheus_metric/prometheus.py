#!/usr/bin/env python3
# Copyright (C) 2026 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Instant queries against the Prometheus HTTP API

Reference: https://prometheus.io/docs/prometheus/latest/querying/api/

A successful response looks like this:

    {"status": "success",
     "data": {"resultType": "vector",
              "result": [{"metric": {"job": "node", "instance": "localhost:9100"},
                          "value": [1700000000.123, "0.42"]}]},
     "warnings": ["..."]}

and a failed one like this (HTTP 400, 422 or 503):

    {"status": "error", "errorType": "bad_data", "error": "parse error ..."}
"""

from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Final

import requests

from check_prometheus_metric.exceptions import QueryError, QueryTimeout
from check_prometheus_metric.log import logger

QUERY_ENDPOINT: Final = "/api/v1/query"

# Status codes for which the API answers with a JSON error envelope
_API_ERROR_CODES: Final = frozenset(
    {
        HTTPStatus.BAD_REQUEST,
        HTTPStatus.UNPROCESSABLE_ENTITY,
        HTTPStatus.SERVICE_UNAVAILABLE,
    }
)


class ResultType(enum.Enum):
    VECTOR = "vector"
    SCALAR = "scalar"
    MATRIX = "matrix"
    STRING = "string"


@dataclass(frozen=True)
class Sample:
    labels: Mapping[str, str]
    timestamp: float
    value: float


@dataclass(frozen=True)
class QueryResult:
    """The decoded `data` section of an instant query response

    Samples are only decoded for vector results, the other result types are never
    evaluated.
    """

    result_type: ResultType
    samples: Sequence[Sample] = ()
    warnings: Sequence[str] = ()


class PrometheusAPI:
    """
    Realizes communication with the instant query endpoint of the Prometheus API
    """

    def __init__(self, session: requests.Session, base_url: str, timeout: int) -> None:
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def query(self, promql: str, timestamp: float) -> QueryResult:
        """Evaluate the PromQL expression at the given point in time

        Raises:
            QueryTimeout: the server did not answer within the timeout
            QueryError: the request failed or the server answered with an error
        """
        fields = {
            "query": promql,
            "time": format_time(timestamp),
            "timeout": f"{self.timeout}s",
        }
        response = self._request(f"{self.base_url}{QUERY_ENDPOINT}", fields)
        data, warnings = self._decode_envelope(response)
        result = parse_query_data(data, warnings)
        logger.debug(
            "Query returned result type %s with %d sample(s) and %d warning(s)",
            result.result_type.value,
            len(result.samples),
            len(result.warnings),
        )
        return result

    def _request(self, url: str, fields: Mapping[str, str]) -> requests.Response:
        # POST avoids URL length limits for long expressions. Servers that do
        # not accept it for this endpoint get the same request as GET.
        logger.debug("Querying %s with %r", url, fields)
        try:
            response = self.session.post(url, data=fields, timeout=self.timeout)
            if response.status_code == HTTPStatus.METHOD_NOT_ALLOWED:
                logger.info("POST not allowed by %s, retrying with GET", url)
                response = self.session.get(url, params=fields, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise QueryTimeout(f"query timed out after {self.timeout}s: {e}") from e
        except requests.exceptions.RequestException as e:
            raise QueryError(str(e)) from e
        return response

    @staticmethod
    def _decode_envelope(response: requests.Response) -> tuple[Any, Sequence[str]]:
        code = response.status_code
        if code // 100 != 2 and code not in _API_ERROR_CODES:
            raise QueryError(_error_for_status(code))

        try:
            envelope = response.json()
        except ValueError as e:
            raise QueryError(f"bad_response: {e}") from e
        if not isinstance(envelope, dict):
            raise QueryError("bad_response: response is not a JSON object")

        if envelope.get("status") == "error":
            raise QueryError(f"{envelope.get('errorType', '')}: {envelope.get('error', '')}")
        if code in _API_ERROR_CODES:
            raise QueryError("bad_response: inconsistent body for response code")

        return envelope.get("data"), tuple(envelope.get("warnings") or ())


def format_time(timestamp: float) -> str:
    """
    >>> format_time(1700000000.0)
    '1700000000.000'
    >>> format_time(1700000000.12345)
    '1700000000.123'
    """
    return f"{timestamp:.3f}"


def _error_for_status(code: int) -> str:
    """
    >>> _error_for_status(404)
    'client_error: client error: 404'
    >>> _error_for_status(502)
    'server_error: server error: 502'
    """
    if code // 100 == 4:
        return f"client_error: client error: {code}"
    if code // 100 == 5:
        return f"server_error: server error: {code}"
    return f"bad_response: unexpected status code: {code}"


def parse_query_data(data: Any, warnings: Sequence[str] = ()) -> QueryResult:
    try:
        raw_type = data["resultType"]
        result_type = ResultType(raw_type)
    except (KeyError, TypeError) as e:
        raise QueryError(f"bad_response: missing result type: {e}") from e
    except ValueError as e:
        raise QueryError(f"bad_response: unexpected value type {raw_type!r}") from e

    if result_type is not ResultType.VECTOR:
        return QueryResult(result_type=result_type, warnings=warnings)

    try:
        samples = tuple(_parse_sample(raw) for raw in data["result"] or ())
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise QueryError(f"bad_response: malformed vector sample: {e}") from e
    return QueryResult(result_type=result_type, samples=samples, warnings=warnings)


def _parse_sample(raw: Mapping[str, Any]) -> Sample:
    timestamp, value = raw["value"]
    return Sample(
        labels=dict(raw.get("metric") or {}),
        timestamp=float(timestamp),
        # Prometheus encodes sample values as strings ("NaN" and "+Inf" included)
        value=float(value),
    )
