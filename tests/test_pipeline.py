"""Request pipeline: end-to-end scenarios and the error taxonomy."""

from __future__ import annotations

import json
import logging
import math

import pytest
from prometheus_client import REGISTRY

from metricbadge.badges import SvgBadgeRenderer
from metricbadge.catalog import MetricCatalog
from metricbadge.errors import BadgeRenderError
from metricbadge.models import (
    ColorRange,
    MetricDefinition,
    MetricRequest,
    QueryResponse,
    QueryResult,
    Series,
)
from metricbadge.pipeline import MetricPipeline
from metricbadge.render import NO_DATA_MESSAGE

from .fakes import FakeBackend, empty_response, vector_response

pytestmark = pytest.mark.anyio


class BrokenRenderer:
    def render(self, title, message, color, style) -> bytes:
        raise BadgeRenderError("font missing")


def _pipeline(catalog: MetricCatalog, response: QueryResponse | None = None, **kwargs):
    return MetricPipeline(catalog, FakeBackend(response), **kwargs)


def _errors(metric: str, reason: str) -> float:
    value = REGISTRY.get_sample_value(
        "metricbadge_metric_errors_total", {"metric": metric, "error": reason}
    )
    return value or 0.0


class TestScenarios:
    async def test_value_in_range_gets_range_color(self, catalog: MetricCatalog):
        pipeline = _pipeline(catalog, vector_response(42.0))
        rendered = await pipeline.handle(MetricRequest.from_params("cpu"))
        assert rendered.status_code == 200
        assert rendered.media_type == "application/json"
        assert rendered.body == b'{"schemaVersion":1,"label":"cpu","message":"42","color":"green"}'

    async def test_value_override_replaces_message(self):
        metric = MetricDefinition(
            name="cpu",
            query="avg(cpu_usage)",
            colors=(ColorRange(min=0, max=50, color="green", valueOverride="ok"),),
        )
        pipeline = _pipeline(MetricCatalog.from_metrics([metric]), vector_response(42.0))
        rendered = await pipeline.handle(MetricRequest.from_params("cpu"))
        assert json.loads(rendered.body)["message"] == "ok"

    async def test_no_data_is_success(self, catalog: MetricCatalog):
        pipeline = _pipeline(catalog, empty_response())
        rendered = await pipeline.handle(MetricRequest.from_params("cpu"))
        assert rendered.status_code == 200
        body = json.loads(rendered.body)
        assert body["message"] == NO_DATA_MESSAGE
        assert "color" not in body
        assert "isError" not in body

    async def test_unknown_metric_is_not_found(self, catalog: MetricCatalog):
        backend = FakeBackend(vector_response(1.0))
        pipeline = MetricPipeline(catalog, backend)
        rendered = await pipeline.handle(MetricRequest.from_params("nope"))
        assert rendered.status_code == 404
        assert rendered.body == (
            b'{"schemaVersion":1,"label":"nope","message":"Not Found","isError":true}'
        )
        assert backend.queries == []

    async def test_plastic_badge(self, catalog: MetricCatalog):
        pipeline = _pipeline(catalog, vector_response(42.0), badge_renderer=SvgBadgeRenderer())
        rendered = await pipeline.handle(MetricRequest.from_params("cpu", "badge", "plastic"))
        assert rendered.status_code == 200
        assert rendered.media_type == "image/svg+xml"
        assert b'fill="#97ca00"' in rendered.body
        assert b"<svg" in rendered.body


class TestFormats:
    async def test_raw_returns_backend_result(self, catalog: MetricCatalog):
        pipeline = _pipeline(catalog, vector_response(42.0, {"node": "a"}))
        rendered = await pipeline.handle(MetricRequest.from_params("cpu", "raw"))
        assert rendered.status_code == 200
        assert rendered.media_type == "application/json"
        assert json.loads(rendered.body) == [
            {"metric": {"node": "a"}, "value": [1760000000.0, "42.0"]}
        ]

    async def test_raw_for_empty_result(self, catalog: MetricCatalog):
        pipeline = _pipeline(catalog, empty_response())
        rendered = await pipeline.handle(MetricRequest.from_params("cpu", "raw"))
        assert rendered.body == b"[]"

    async def test_unknown_format_falls_back_to_endpoint(self, catalog: MetricCatalog):
        pipeline = _pipeline(catalog, vector_response(42.0))
        rendered = await pipeline.handle(MetricRequest.from_params("cpu", "xml"))
        assert json.loads(rendered.body)["message"] == "42"

    async def test_unmatched_value_has_no_color(self, catalog: MetricCatalog):
        pipeline = _pipeline(catalog, vector_response(50.5))
        rendered = await pipeline.handle(MetricRequest.from_params("cpu"))
        assert rendered.body == b'{"schemaVersion":1,"label":"cpu","message":"50.5"}'

    async def test_unmatched_value_badge_uses_default_color(self, catalog: MetricCatalog):
        pipeline = _pipeline(catalog, vector_response(500.0), badge_renderer=SvgBadgeRenderer())
        rendered = await pipeline.handle(MetricRequest.from_params("cpu", "badge"))
        assert b'fill="#9f9f9f"' in rendered.body

    async def test_title_prefix_and_suffix(self):
        metric = MetricDefinition(
            name="cpu", title="CPU", query="avg(cpu_usage)", prefix="~", suffix="%"
        )
        pipeline = _pipeline(MetricCatalog.from_metrics([metric]), vector_response(12.5))
        rendered = await pipeline.handle(MetricRequest.from_params("cpu"))
        assert json.loads(rendered.body) == {"schemaVersion": 1, "label": "CPU", "message": "~12.5%"}

    async def test_label_value_is_displayed_with_value_color(self):
        metric = MetricDefinition(
            name="version",
            query="build_info",
            label="version",
            colors=(ColorRange(min=1, max=1, color="blue"),),
        )
        pipeline = _pipeline(
            MetricCatalog.from_metrics([metric]), vector_response(1.0, {"version": "2.4.1"})
        )
        rendered = await pipeline.handle(MetricRequest.from_params("version"))
        body = json.loads(rendered.body)
        assert body["message"] == "2.4.1"
        assert body["color"] == "blue"

    async def test_missing_label_is_success_without_color(self):
        metric = MetricDefinition(
            name="version",
            query="build_info",
            label="version",
            colors=(ColorRange(min=0, max=10, color="blue"),),
        )
        pipeline = _pipeline(MetricCatalog.from_metrics([metric]), vector_response(1.0))
        rendered = await pipeline.handle(MetricRequest.from_params("version"))
        assert rendered.status_code == 200
        assert rendered.body == b'{"schemaVersion":1,"label":"version","message":"label not found"}'


class TestErrors:
    async def test_backend_failure(self, catalog: MetricCatalog, failing_backend: FakeBackend):
        before = _errors("cpu", "Query Error")
        pipeline = MetricPipeline(catalog, failing_backend)
        rendered = await pipeline.handle(MetricRequest.from_params("cpu"))
        assert rendered.status_code == 500
        assert rendered.body == (
            b'{"schemaVersion":1,"label":"cpu","message":"Query Error","isError":true}'
        )
        assert failing_backend.queries == ["avg(cpu_usage)"]
        assert _errors("cpu", "Query Error") == before + 1

    async def test_backend_detail_is_not_leaked(
        self, catalog: MetricCatalog, failing_backend: FakeBackend
    ):
        pipeline = MetricPipeline(catalog, failing_backend)
        rendered = await pipeline.handle(MetricRequest.from_params("cpu", "badge"))
        assert b"connection refused" not in rendered.body
        assert rendered.media_type == "application/json"

    async def test_unserialisable_raw_result(self, catalog: MetricCatalog):
        response = QueryResponse(
            result=QueryResult.vector([Series(value=1.0)]),
            raw_result=[{"value": math.nan}],
        )
        pipeline = _pipeline(catalog, response)
        rendered = await pipeline.handle(MetricRequest.from_params("cpu", "raw"))
        assert rendered.status_code == 500
        assert json.loads(rendered.body) == {
            "schemaVersion": 1,
            "label": "cpu",
            "message": "Processing Error",
            "isError": True,
        }

    async def test_badge_without_renderer(self, catalog: MetricCatalog):
        pipeline = _pipeline(catalog, vector_response(42.0))
        rendered = await pipeline.handle(MetricRequest.from_params("cpu", "badge"))
        assert rendered.status_code == 500
        assert json.loads(rendered.body)["message"] == "Badge Generation Error"

    async def test_badge_renderer_failure(self, catalog: MetricCatalog):
        pipeline = _pipeline(catalog, vector_response(42.0), badge_renderer=BrokenRenderer())
        rendered = await pipeline.handle(MetricRequest.from_params("cpu", "badge"))
        assert rendered.status_code == 500
        assert rendered.media_type == "application/json"
        assert json.loads(rendered.body)["isError"] is True

    async def test_not_found_is_counted_separately(self, catalog: MetricCatalog):
        before = REGISTRY.get_sample_value("metricbadge_metrics_not_found_total") or 0.0
        pipeline = _pipeline(catalog)
        await pipeline.handle(MetricRequest.from_params("missing"))
        after = REGISTRY.get_sample_value("metricbadge_metrics_not_found_total")
        assert after == before + 1
        assert _errors("missing", "Not Found") == 0.0


class TestLogging:
    async def test_backend_warnings_are_logged(self, catalog: MetricCatalog, caplog):
        response = vector_response(42.0, warnings=("query may be slow",))
        pipeline = _pipeline(catalog, response)
        with caplog.at_level(logging.WARNING, logger="metricbadge.pipeline"):
            rendered = await pipeline.handle(MetricRequest.from_params("cpu"))
        assert rendered.status_code == 200
        assert "query may be slow" in caplog.text
        assert "metric=cpu" in caplog.text

    async def test_errors_are_logged_with_request_context(
        self, catalog: MetricCatalog, failing_backend: FakeBackend, caplog
    ):
        pipeline = MetricPipeline(catalog, failing_backend)
        with caplog.at_level(logging.ERROR, logger="metricbadge.pipeline"):
            await pipeline.handle(MetricRequest.from_params("cpu", "raw"))
        assert "connection refused" in caplog.text
        assert "path=/cpu" in caplog.text
        assert "format=raw" in caplog.text
