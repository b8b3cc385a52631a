"""Pytest configuration and fixtures for the metricbadge tests."""

from __future__ import annotations

import pytest

from metricbadge.catalog import MetricCatalog
from metricbadge.errors import QueryError
from metricbadge.models import ColorRange, MetricDefinition

from .fakes import FakeBackend


@pytest.fixture
def cpu_metric() -> MetricDefinition:
    """The cpu metric: green up to 50, red from 51 to 100."""
    return MetricDefinition(
        name="cpu",
        query="avg(cpu_usage)",
        colors=(
            ColorRange(min=0, max=50, color="green"),
            ColorRange(min=51, max=100, color="red"),
        ),
    )


@pytest.fixture
def catalog(cpu_metric: MetricDefinition) -> MetricCatalog:
    return MetricCatalog.from_metrics([cpu_metric])


@pytest.fixture
def failing_backend() -> FakeBackend:
    return FakeBackend(error=QueryError("connection refused"))


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
