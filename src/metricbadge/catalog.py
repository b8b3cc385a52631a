"""Metric catalog: immutable lookup from metric name to definition.

Built once at startup and injected into the pipeline. Requests only read it,
so no locking is needed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from metricbadge.errors import DuplicateMetricError
from metricbadge.models import DuplicateMetricPolicy, MetricDefinition

logger = logging.getLogger("metricbadge.catalog")


class MetricCatalog(Mapping[str, MetricDefinition]):
    """Read-only mapping of configured metrics.

    An empty catalog is valid: every lookup misses and requests get a 404.
    """

    __slots__ = ("_metrics",)

    def __init__(self, metrics: Mapping[str, MetricDefinition] | None = None):
        self._metrics = MappingProxyType(dict(metrics or {}))

    @classmethod
    def from_metrics(
        cls,
        metrics: Iterable[MetricDefinition],
        *,
        duplicates: DuplicateMetricPolicy = DuplicateMetricPolicy.WARN,
    ) -> MetricCatalog:
        """Index definitions by name.

        With ``WARN`` the last definition of a repeated name wins; with
        ``REJECT`` a repeated name raises DuplicateMetricError.
        """
        indexed: dict[str, MetricDefinition] = {}
        for metric in metrics:
            if metric.name in indexed:
                if duplicates == DuplicateMetricPolicy.REJECT:
                    raise DuplicateMetricError(f"metric {metric.name!r} is defined more than once")
                logger.warning(
                    "Metric %r is defined more than once, keeping the last definition",
                    metric.name,
                )
            indexed[metric.name] = metric
        return cls(indexed)

    def lookup(self, name: str) -> MetricDefinition | None:
        return self._metrics.get(name)

    def __getitem__(self, name: str) -> MetricDefinition:
        return self._metrics[name]

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._metrics))

    def __len__(self) -> int:
        return len(self._metrics)

    def __repr__(self) -> str:
        return f"MetricCatalog({sorted(self._metrics)!r})"
