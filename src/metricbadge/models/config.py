"""Configuration models for metricbadge.

Two layers:
- ServerSettings: process settings read from the environment (METRICBADGE_*).
- MetricBadgeConfig: the YAML file declaring the servable metrics.

Metric definitions are frozen after validation. The catalog built from them is
shared by every request and never mutated.
"""

from enum import StrEnum

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings

DEFAULT_CONFIG_PATH = "/metricbadge/config.yaml"


class DuplicateMetricPolicy(StrEnum):
    """What to do when two configured metrics share a name."""

    WARN = "warn"  # Keep the last definition, log a warning
    REJECT = "reject"  # Refuse to start


class ColorRange(BaseModel):
    """An inclusive numeric interval mapped to a color and optional value override."""

    min: float
    max: float
    color: str = Field(default="", description="Symbolic color name or #RRGGBB literal")
    value_override: str = Field(
        default="",
        alias="valueOverride",
        description="Replaces the displayed value when non-empty",
    )

    model_config = {"frozen": True, "populate_by_name": True}

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


class MetricDefinition(BaseModel):
    """A named, pre-declared query servable by this service."""

    name: str = Field(min_length=1, description="Catalog key, used in the request path")
    title: str = Field(default="", description="Display label, falls back to name")
    query: str = Field(min_length=1, description="PromQL query, opaque to the service")
    label: str = Field(default="", description="Series label to display instead of the value")
    prefix: str = ""
    suffix: str = ""
    colors: tuple[ColorRange, ...] = ()

    model_config = {"frozen": True}

    @property
    def display_title(self) -> str:
        return self.title or self.name


class BadgeConfig(BaseModel):
    """Badge rendering capability."""

    enabled: bool = True
    font_family: str = Field(
        default="DejaVu Sans,Verdana,Geneva,sans-serif",
        alias="fontFamily",
    )
    font_size: int = Field(default=11, ge=6, le=32, alias="fontSize")

    model_config = {"frozen": True, "populate_by_name": True}


class MetricBadgeConfig(BaseModel):
    """Contents of the YAML configuration file."""

    prometheus: str | None = Field(default=None, description="Prometheus base URL")
    duplicate_metrics: DuplicateMetricPolicy = Field(
        default=DuplicateMetricPolicy.WARN,
        alias="duplicateMetrics",
    )
    badge: BadgeConfig = Field(default_factory=BadgeConfig)
    metrics: tuple[MetricDefinition, ...] = ()

    model_config = {"frozen": True, "populate_by_name": True}


class ServerSettings(BaseSettings):
    """Process settings, read from METRICBADGE_* environment variables."""

    config_path: str = Field(default=DEFAULT_CONFIG_PATH, description="Path to the YAML file")
    host: str = Field(default="0.0.0.0", description="Listen address")
    port: int = Field(default=8080, description="Listen port")
    log_level: str = Field(default="INFO", description="Root log level")
    access_log: bool = Field(default=False, description="Log every request")
    query_timeout: float = Field(default=10.0, gt=0, description="Prometheus request timeout (s)")

    # PROMETHEUS_URL wins over the value in the config file
    prometheus_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("PROMETHEUS_URL", "METRICBADGE_PROMETHEUS_URL"),
    )

    model_config = {"env_prefix": "METRICBADGE_"}
