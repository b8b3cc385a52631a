"""metricbadge CLI."""

import logging
from pathlib import Path  # noqa: TC003 — typer needs runtime Path
from typing import Annotated

import typer
import uvicorn
from rich.console import Console

from metricbadge.cli.config import app as config_app
from metricbadge.cli.config import validate_config
from metricbadge.errors import ConfigError
from metricbadge.models import ServerSettings

app = typer.Typer(
    name="metricbadge",
    help="metricbadge - Prometheus queries as shields.io endpoints and badges",
    no_args_is_help=True,
)

app.add_typer(config_app, name="config", help="Configuration file operations")

console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.callback()
def main() -> None:
    """metricbadge CLI."""
    pass


@app.command()
def serve(
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to the YAML config file"),
    ] = None,
    host: Annotated[str | None, typer.Option("--host", help="Listen address")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Listen port")] = None,
) -> None:
    """Serve configured metrics over HTTP."""
    from metricbadge.api import create_app

    overrides: dict = {}
    if config is not None:
        overrides["config_path"] = str(config)
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    settings = ServerSettings(**overrides)

    configure_logging(settings.log_level)

    # Fail before binding the port if the configuration is unusable
    try:
        _, catalog, prometheus_url = validate_config(settings)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    console.print(
        f"[bold]metricbadge[/bold] serving [cyan]{len(catalog)}[/cyan] metric(s) "
        f"from [cyan]{prometheus_url}[/cyan] on {settings.host}:{settings.port}"
    )
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        access_log=settings.access_log,
        log_config=None,
    )


if __name__ == "__main__":
    app()
