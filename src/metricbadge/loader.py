"""Load the YAML configuration file.

Any read, parse or validation failure raises ConfigError; the process is not
expected to start without a valid file.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from metricbadge.catalog import MetricCatalog
from metricbadge.errors import ConfigError
from metricbadge.models import MetricBadgeConfig, ServerSettings

logger = logging.getLogger("metricbadge.loader")


def parse_config(text: str) -> MetricBadgeConfig:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"error parsing config yaml: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("config file must contain a mapping at the top level")

    try:
        return MetricBadgeConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid config: {e}") from e


def load_config(path: str | Path) -> MetricBadgeConfig:
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigError(f"error reading config file {path}: {e}") from e

    config = parse_config(text)
    logger.info("Loaded %d metric(s) from %s", len(config.metrics), path)
    return config


def build_catalog(config: MetricBadgeConfig) -> MetricCatalog:
    return MetricCatalog.from_metrics(config.metrics, duplicates=config.duplicate_metrics)


def resolve_prometheus_url(config: MetricBadgeConfig, settings: ServerSettings) -> str:
    """PROMETHEUS_URL from the environment wins over the config file."""
    url = settings.prometheus_url or config.prometheus
    if not url:
        raise ConfigError("no url pointing to a prometheus instance was provided")
    return url
