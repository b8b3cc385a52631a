"""Pydantic models for metricbadge.

- config: metric definitions, color ranges, file and process settings
- query: typed Prometheus query results
- requests: inbound metric requests
- responses: output formats and response bodies
"""

from .config import (
    BadgeConfig,
    ColorRange,
    DuplicateMetricPolicy,
    MetricBadgeConfig,
    MetricDefinition,
    ServerSettings,
)
from .query import QueryResponse, QueryResult, ResultType, Series
from .requests import MetricRequest, parse_format, parse_style
from .responses import (
    JSON_MEDIA_TYPE,
    SVG_MEDIA_TYPE,
    BadgeStyle,
    EndpointResponse,
    ErrorResponse,
    OutputFormat,
    RenderedResponse,
)

__all__ = [
    "JSON_MEDIA_TYPE",
    "SVG_MEDIA_TYPE",
    "BadgeConfig",
    "BadgeStyle",
    "ColorRange",
    "DuplicateMetricPolicy",
    "EndpointResponse",
    "ErrorResponse",
    "MetricBadgeConfig",
    "MetricDefinition",
    "MetricRequest",
    "OutputFormat",
    "QueryResponse",
    "QueryResult",
    "RenderedResponse",
    "ResultType",
    "Series",
    "ServerSettings",
    "parse_format",
    "parse_style",
]
