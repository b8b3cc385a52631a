"""Configuration loading and Prometheus URL resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from metricbadge.errors import ConfigError, DuplicateMetricError
from metricbadge.loader import build_catalog, load_config, parse_config, resolve_prometheus_url
from metricbadge.models import DuplicateMetricPolicy, MetricBadgeConfig, ServerSettings

CONFIG = """
prometheus: http://prometheus:9090
badge:
  fontSize: 12
metrics:
  - name: cpu
    title: CPU
    query: avg(cpu_usage)
    suffix: "%"
    colors:
      - {min: 0, max: 50, color: green}
      - {min: 51, max: 100, color: red, valueOverride: hot}
  - name: version
    query: build_info
    label: version
"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("PROMETHEUS_URL", raising=False)
    monkeypatch.delenv("METRICBADGE_PROMETHEUS_URL", raising=False)


class TestParseConfig:
    def test_full_config(self):
        config = parse_config(CONFIG)
        assert config.prometheus == "http://prometheus:9090"
        assert config.badge.enabled
        assert config.badge.font_size == 12
        assert config.duplicate_metrics == DuplicateMetricPolicy.WARN

        cpu, version = config.metrics
        assert cpu.display_title == "CPU"
        assert cpu.suffix == "%"
        assert [c.color for c in cpu.colors] == ["green", "red"]
        assert cpu.colors[1].value_override == "hot"
        assert version.label == "version"
        assert version.display_title == "version"

    def test_empty_file_is_an_empty_config(self):
        config = parse_config("")
        assert config.metrics == ()
        assert config.prometheus is None

    @pytest.mark.parametrize(
        "text",
        [
            "metrics: [",
            "- just\n- a list\n",
            "metrics:\n  - name: cpu\n",
            "metrics:\n  - name: ''\n    query: up\n",
            "metrics:\n  - name: cpu\n    query: up\n    colors: [{min: low, max: 1}]\n",
            "duplicateMetrics: sometimes\n",
            "badge:\n  fontSize: 100\n",
        ],
        ids=[
            "bad-yaml",
            "not-mapping",
            "missing-query",
            "empty-name",
            "bad-range",
            "bad-policy",
            "font-too-large",
        ],
    )
    def test_invalid_config(self, text: str):
        with pytest.raises(ConfigError):
            parse_config(text)


class TestLoadConfig:
    def test_reads_file(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG)
        assert len(load_config(path).metrics) == 2

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="error reading config file"):
            load_config(tmp_path / "absent.yaml")


class TestBuildCatalog:
    def test_catalog_from_config(self):
        catalog = build_catalog(parse_config(CONFIG))
        assert list(catalog) == ["cpu", "version"]

    def test_duplicates_follow_policy(self):
        text = (
            "duplicateMetrics: reject\n"
            "metrics:\n  - {name: a, query: up}\n  - {name: a, query: up}\n"
        )
        with pytest.raises(DuplicateMetricError):
            build_catalog(parse_config(text))


class TestResolvePrometheusUrl:
    def test_file_value(self):
        config = parse_config(CONFIG)
        assert resolve_prometheus_url(config, ServerSettings()) == "http://prometheus:9090"

    def test_environment_wins(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PROMETHEUS_URL", "http://override:9090")
        config = parse_config(CONFIG)
        assert resolve_prometheus_url(config, ServerSettings()) == "http://override:9090"

    def test_prefixed_environment_variable(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("METRICBADGE_PROMETHEUS_URL", "http://prefixed:9090")
        assert resolve_prometheus_url(MetricBadgeConfig(), ServerSettings()) == (
            "http://prefixed:9090"
        )

    def test_missing_url(self):
        with pytest.raises(ConfigError, match="prometheus"):
            resolve_prometheus_url(MetricBadgeConfig(), ServerSettings())


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("METRICBADGE_CONFIG_PATH", "/etc/metricbadge.yaml")
    monkeypatch.setenv("METRICBADGE_PORT", "9999")
    settings = ServerSettings()
    assert settings.config_path == "/etc/metricbadge.yaml"
    assert settings.port == 9999
    assert settings.query_timeout == 10.0
