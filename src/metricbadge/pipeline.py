"""Request pipeline: resolve, query, extract, classify, render.

    ResolveMetric -> ExecuteQuery -> ExtractValue -> MatchColor -> Render -> Respond

Any step may end in the error state instead. One backend call per request and
no retries. Every failure is logged with the request context and downgraded to
a structured response:

- metric not configured      -> 404 error body ("Not Found")
- backend query failed       -> 500 error body ("Query Error")
- result not serialisable    -> 500 error body ("Processing Error")
- badge rendering failed     -> 500 error body ("Badge Generation Error")
- zero series                -> 200, "metric returned no data"
- label missing from result  -> 200, "label not found"

Nothing here is mutated after construction, so one pipeline serves all
concurrent requests.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from metricbadge import telemetry
from metricbadge.errors import (
    BadgeRenderError,
    LabelNotFoundError,
    MetricBadgeError,
    MetricNotConfiguredError,
    QueryError,
    ResultSerializationError,
)
from metricbadge.models import MetricDefinition, MetricRequest, OutputFormat, RenderedResponse
from metricbadge.render import (
    render_badge,
    render_endpoint,
    render_error,
    render_raw,
    resolve_message,
)

if TYPE_CHECKING:
    from metricbadge.badges import BadgeRenderer
    from metricbadge.catalog import MetricCatalog
    from metricbadge.prometheus import QueryBackend

logger = logging.getLogger("metricbadge.pipeline")


class MetricPipeline:
    def __init__(
        self,
        catalog: MetricCatalog,
        backend: QueryBackend,
        badge_renderer: BadgeRenderer | None = None,
    ):
        self.catalog = catalog
        self.backend = backend
        self.badge_renderer = badge_renderer

    async def handle(self, request: MetricRequest) -> RenderedResponse:
        metric = self.catalog.lookup(request.metric)
        if metric is None:
            logger.error("Metric not found [%s]", request.log_context())
            telemetry.record_not_found()
            return self._error(request, MetricNotConfiguredError(request.metric), 404)

        try:
            response = await self.backend.query(metric.query)
        except QueryError as e:
            logger.error("Error executing metric query [%s]: %s", request.log_context(), e)
            return self._error(request, e, 500)

        for warning in response.warnings:
            logger.warning(
                "Encountered warning while executing metric query [%s]: %s",
                request.log_context(),
                warning,
            )
        logger.debug("Query result [%s]: %s", request.log_context(), response.result)

        if request.format == OutputFormat.RAW:
            try:
                return render_raw(response.raw_result)
            except ResultSerializationError as e:
                logger.error("Could not serialise query result [%s]: %s", request.log_context(), e)
                return self._error(request, e, 500)

        try:
            message, color = resolve_message(metric, response.result)
        except LabelNotFoundError as e:
            logger.warning("Label not found in query result [%s]: %s", request.log_context(), e)
            message, color = e.reason, ""

        return self._render(request, metric, message, color)

    def _render(
        self,
        request: MetricRequest,
        metric: MetricDefinition,
        message: str,
        color: str,
    ) -> RenderedResponse:
        if request.format != OutputFormat.BADGE:
            return render_endpoint(metric.display_title, message, color)
        try:
            return render_badge(
                self.badge_renderer, metric.display_title, message, color, request.style
            )
        except BadgeRenderError as e:
            logger.error("Error generating badge [%s]: %s", request.log_context(), e)
            return self._error(request, e, 500)

    def _error(
        self, request: MetricRequest, error: MetricBadgeError, status_code: int
    ) -> RenderedResponse:
        if not isinstance(error, MetricNotConfiguredError):
            telemetry.record_error(request.metric, error.reason)
        return render_error(request.metric, error, status_code)
