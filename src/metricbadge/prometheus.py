"""Prometheus instant-query client.

Executes a PromQL query at a single instant through the HTTP API
(``GET /api/v1/query``) and normalises the payload into a QueryResult.

Failures raise QueryError. A successful query that matched nothing is not a
failure: it comes back as an EMPTY result. Backend warnings are returned to
the caller, which logs them.

Date/Time: Uses `whenever` library (UTC-first, Rust-backed).
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from whenever import Instant

from metricbadge.errors import QueryError
from metricbadge.models import QueryResponse, QueryResult, Series

logger = logging.getLogger("metricbadge.prometheus")

QUERY_PATH = "/api/v1/query"


class QueryBackend(Protocol):
    async def query(self, query: str, at: Instant | None = None) -> QueryResponse: ...


def _parse_sample_value(pair: Any) -> float:
    """Parse a ``[timestamp, "value"]`` pair. Prometheus encodes values as strings."""
    _, value = pair
    return float(value)


def _parse_labels(metric: Any) -> dict[str, str]:
    if not isinstance(metric, dict):
        raise TypeError(f"expected a label object, got {type(metric).__name__}")
    return {str(k): str(v) for k, v in metric.items()}


def _parse_vector(result: list[dict]) -> QueryResult:
    return QueryResult.vector(
        [
            Series(
                labels=_parse_labels(sample.get("metric", {})),
                value=_parse_sample_value(sample["value"]),
            )
            for sample in result
        ]
    )


def _parse_matrix(result: list[dict]) -> QueryResult:
    series = []
    for stream in result:
        values = stream.get("values") or []
        if not values:
            continue
        # Most recent point of each stream
        series.append(
            Series(
                labels=_parse_labels(stream.get("metric", {})),
                value=_parse_sample_value(values[-1]),
            )
        )
    return QueryResult.matrix(series)


def _parse_scalar(result: list) -> QueryResult:
    return QueryResult.scalar(_parse_sample_value(result))


_PARSERS = {
    "vector": _parse_vector,
    "matrix": _parse_matrix,
    "scalar": _parse_scalar,
}


def parse_query_response(payload: Any) -> QueryResponse:
    """Build a QueryResponse from a decoded ``/api/v1/query`` body."""
    if not isinstance(payload, dict):
        raise QueryError("query response is not a JSON object")

    status = payload.get("status")
    if status != "success":
        raise QueryError(
            f"query failed with status={status!r}: "
            f"{payload.get('errorType', 'unknown')}: {payload.get('error', '')}"
        )

    data = payload.get("data") or {}
    if not isinstance(data, dict):
        raise QueryError("query response data is not a JSON object")
    result_type = data.get("resultType")
    result = data.get("result")

    parser = _PARSERS.get(result_type)
    if parser is None:
        raise QueryError(f"unsupported result type {result_type!r}")

    try:
        parsed = parser(result or [])
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise QueryError(f"malformed {result_type} result: {e}") from e

    return QueryResponse(
        result=parsed,
        warnings=tuple(str(w) for w in payload.get("warnings") or ()),
        raw_result=result if result is not None else [],
    )


def _format_time(at: Instant) -> str:
    """Unix seconds with millisecond precision, as the HTTP API accepts."""
    millis = at.timestamp_millis()
    return f"{millis // 1000}.{millis % 1000:03d}"


class PrometheusClient:
    """Async client for the Prometheus HTTP API.

    One pooled httpx client is kept for the lifetime of the process. Cancelling
    the awaiting task aborts the in-flight request.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            base_url: Prometheus server URL, e.g. http://prometheus:9090
            timeout: Request timeout in seconds
            transport: Optional transport override (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> PrometheusClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def query(self, query: str, at: Instant | None = None) -> QueryResponse:
        """Execute an instant query at ``at`` (default: now)."""
        at = at or Instant.now()
        logger.debug("Executing query: %s", query)
        client = self._get_client()
        try:
            response = await client.get(
                QUERY_PATH,
                params={"query": query, "time": _format_time(at)},
            )
        except httpx.TimeoutException as e:
            raise QueryError(f"query timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise QueryError(f"query request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise QueryError(
                f"query returned HTTP {response.status_code} with a non-JSON body"
            ) from e

        backend_error = isinstance(payload, dict) and payload.get("status") == "error"
        if response.is_error and not backend_error:
            raise QueryError(f"query returned HTTP {response.status_code}")

        return parse_query_response(payload)
