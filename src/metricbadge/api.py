"""FastAPI service exposing configured metrics as endpoints, raw JSON and badges.

Routes:
  GET /{metric}?format=&style=         - one resource per configured metric
  GET /query?metric=&format=&style=    - same, metric name read from the query string
  GET /-/health, GET /-/ready          - liveness and readiness
  GET /-/metrics                       - Prometheus metrics about this service

The pipeline is built once in the lifespan (or injected by the caller) and
kept on ``app.state``; request handlers only read it.
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from metricbadge import __version__, telemetry
from metricbadge.badges import SvgBadgeRenderer
from metricbadge.loader import build_catalog, load_config, resolve_prometheus_url
from metricbadge.models import MetricRequest, ServerSettings, parse_format, parse_style
from metricbadge.pipeline import MetricPipeline
from metricbadge.prometheus import PrometheusClient

logger = logging.getLogger("metricbadge.api")

# Path segment that reads the metric name from the query string instead
QUERY_ALIAS = "query"
# Operational routes live under this prefix so they never shadow a metric name
OPS_PREFIX = "/-/"


def _metric_name(segment: str, request: Request) -> str:
    if segment == QUERY_ALIAS:
        return request.query_params.get("metric", "")
    return segment


def _route_path(request: Request) -> str:
    """Request path below the mount point."""
    path = request.url.path
    root_path = request.scope.get("root_path", "")
    if root_path and path.startswith(root_path):
        path = path[len(root_path) :]
    return path


def _telemetry_metric(request: Request) -> str:
    """Catalog name of the requested metric, or "unknown" for anything else."""
    pipeline: MetricPipeline | None = request.app.state.pipeline
    name = _metric_name(_route_path(request).strip("/"), request)
    if pipeline is None or name not in pipeline.catalog:
        return "unknown"
    return name


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the pipeline from configuration on startup, close the client on shutdown."""
    if getattr(app.state, "pipeline", None) is not None:
        yield
        return

    settings: ServerSettings = app.state.settings
    config = load_config(settings.config_path)
    client = PrometheusClient(
        resolve_prometheus_url(config, settings),
        timeout=settings.query_timeout,
    )
    app.state.pipeline = MetricPipeline(
        catalog=build_catalog(config),
        backend=client,
        badge_renderer=SvgBadgeRenderer.from_config(config.badge),
    )
    logger.info("Serving %d metric(s) from %s", len(app.state.pipeline.catalog), client.base_url)
    try:
        yield
    finally:
        await client.close()
        app.state.pipeline = None


def create_app(
    settings: ServerSettings | None = None,
    *,
    pipeline: MetricPipeline | None = None,
) -> FastAPI:
    """Create the application.

    Args:
        settings: Process settings, read from the environment when omitted
        pipeline: Prebuilt pipeline; skips loading configuration at startup
    """
    app = FastAPI(
        title="metricbadge",
        description="Pre-configured Prometheus queries as shields.io endpoints and badges.",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings or ServerSettings()
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]  # Starlette middleware typing
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def record_metric_requests(request: Request, call_next):
        if _route_path(request).startswith(OPS_PREFIX):
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        telemetry.record_request(
            metric=_telemetry_metric(request),
            format=parse_format(request.query_params.get("format")).value,
            style=parse_style(request.query_params.get("style")).value,
            status=response.status_code,
            duration=time.perf_counter() - start,
        )
        return response

    @app.get("/-/health", response_class=PlainTextResponse)
    async def health() -> str:
        return "OK"

    @app.get("/-/ready", response_class=PlainTextResponse)
    async def ready(request: Request) -> Response:
        if request.app.state.pipeline is None:
            return PlainTextResponse("NOT READY", status_code=503)
        return PlainTextResponse("OK")

    @app.get("/-/metrics")
    async def metrics() -> Response:
        body, content_type = telemetry.exposition()
        return Response(content=body, media_type=content_type)

    @app.get("/{metric}")
    async def serve_metric(metric: str, request: Request) -> Response:
        pipeline: MetricPipeline | None = request.app.state.pipeline
        if pipeline is None:
            return PlainTextResponse("NOT READY", status_code=503)

        metric_request = MetricRequest.from_params(
            _metric_name(metric, request),
            request.query_params.get("format"),
            request.query_params.get("style"),
            method=request.method,
            path=request.url.path,
        )
        rendered = await pipeline.handle(metric_request)
        headers = {} if rendered.is_error else {"Cache-Control": "no-cache"}
        return Response(
            content=rendered.body,
            status_code=rendered.status_code,
            media_type=rendered.media_type,
            headers=headers,
        )

    return app
