"""Inbound metric request.

Query-string values arrive as free text. Empty or unrecognised values select
the defaults (endpoint format, flat style) rather than failing the request.
"""

from pydantic import BaseModel

from .responses import BadgeStyle, OutputFormat


def parse_format(value: str | None) -> OutputFormat:
    try:
        return OutputFormat(value or OutputFormat.ENDPOINT)
    except ValueError:
        return OutputFormat.ENDPOINT


def parse_style(value: str | None) -> BadgeStyle:
    try:
        return BadgeStyle(value or BadgeStyle.FLAT)
    except ValueError:
        return BadgeStyle.FLAT


class MetricRequest(BaseModel):
    metric: str
    format: OutputFormat = OutputFormat.ENDPOINT
    style: BadgeStyle = BadgeStyle.FLAT
    method: str = "GET"
    path: str = ""

    model_config = {"frozen": True}

    @classmethod
    def from_params(
        cls,
        metric: str,
        format: str | None = None,
        style: str | None = None,
        *,
        method: str = "GET",
        path: str = "",
    ) -> "MetricRequest":
        return cls(
            metric=metric,
            format=parse_format(format),
            style=parse_style(style),
            method=method,
            path=path or f"/{metric}",
        )

    def log_context(self) -> str:
        return (
            f"method={self.method} path={self.path} "
            f"metric={self.metric} format={self.format.value}"
        )
