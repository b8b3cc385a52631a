"""Response renderer: endpoint JSON, raw query JSON and SVG badges.

Display value resolution, later steps win:
1. The first series' value, or NO_DATA_MESSAGE when there are no series
2. The configured label's value, if the metric displays a label
3. The matched range's value override, if non-empty
Then prefix and suffix are wrapped around it.

JSON is serialised compactly in a fixed key order, so equal inputs always give
byte-identical bodies.
"""

from __future__ import annotations

import json
import math
from decimal import Decimal
from typing import TYPE_CHECKING

from metricbadge.colors import resolve_hex
from metricbadge.errors import BadgeRenderError, MetricBadgeError, ResultSerializationError
from metricbadge.extract import extract_label, extract_scalar
from metricbadge.models import (
    JSON_MEDIA_TYPE,
    SVG_MEDIA_TYPE,
    BadgeStyle,
    EndpointResponse,
    ErrorResponse,
    MetricDefinition,
    QueryResult,
    RenderedResponse,
)
from metricbadge.thresholds import match_color

if TYPE_CHECKING:
    from metricbadge.badges import BadgeRenderer

NO_DATA_MESSAGE = "metric returned no data"


def format_value(value: float) -> str:
    """Shortest decimal string that round-trips, without exponent notation.

    42.0 -> "42", 0.25 -> "0.25", 1e-07 -> "0.0000001"
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def resolve_message(metric: MetricDefinition, result: QueryResult) -> tuple[str, str]:
    """Return ``(message, color)`` for a query result.

    ``color`` is empty when the value matched no range or there was no value.
    Raises LabelNotFoundError when the metric displays a label that the first
    series does not carry.
    """
    value = extract_scalar(result)
    matched = None
    if value is None:
        display = NO_DATA_MESSAGE
    else:
        display = format_value(value)
        matched = match_color(metric.colors, value)

    if metric.label:
        display = extract_label(result, metric.label)

    if matched is not None and matched.value_override:
        display = matched.value_override

    color = matched.color if matched is not None else ""
    return metric.prefix + display + metric.suffix, color


def render_endpoint(title: str, message: str, color: str = "") -> RenderedResponse:
    body = EndpointResponse(label=title, message=message, color=color or None)
    return RenderedResponse(
        media_type=JSON_MEDIA_TYPE,
        body=body.model_dump_json(by_alias=True, exclude_none=True).encode(),
    )


def render_raw(raw_result: object) -> RenderedResponse:
    """Serialise the backend's result verbatim."""
    try:
        body = json.dumps(raw_result, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as e:
        raise ResultSerializationError(f"could not convert query result to JSON: {e}") from e
    return RenderedResponse(media_type=JSON_MEDIA_TYPE, body=body.encode())


def render_badge(
    renderer: BadgeRenderer | None,
    title: str,
    message: str,
    color: str,
    style: BadgeStyle,
) -> RenderedResponse:
    if renderer is None:
        raise BadgeRenderError("badge rendering is not configured")
    svg = renderer.render(title, message, resolve_hex(color), style)
    return RenderedResponse(media_type=SVG_MEDIA_TYPE, body=svg)


def render_error(label: str, error: MetricBadgeError, status_code: int) -> RenderedResponse:
    """Structured error body. Only the error's public reason is included."""
    body = ErrorResponse(label=label, message=error.reason)
    return RenderedResponse(
        status_code=status_code,
        media_type=JSON_MEDIA_TYPE,
        body=body.model_dump_json(by_alias=True).encode(),
    )
