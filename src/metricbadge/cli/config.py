"""Configuration CLI commands: validate a config file, dump its JSON schema."""

import json
from pathlib import Path  # noqa: TC003 — typer needs runtime Path
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from metricbadge.catalog import MetricCatalog
from metricbadge.errors import ConfigError
from metricbadge.loader import build_catalog, load_config, resolve_prometheus_url
from metricbadge.models import MetricBadgeConfig, ServerSettings

app = typer.Typer(no_args_is_help=True)
console = Console()


def validate_config(settings: ServerSettings) -> tuple[MetricBadgeConfig, MetricCatalog, str]:
    """Load the file named by ``settings`` and check everything serving needs.

    Raises ConfigError on the first problem.
    """
    config = load_config(settings.config_path)
    catalog = build_catalog(config)
    prometheus_url = resolve_prometheus_url(config, settings)
    return config, catalog, prometheus_url


@app.command()
def check(
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to the YAML config file"),
    ] = None,
) -> None:
    """Validate a config file and list the metrics it declares."""
    settings = ServerSettings(config_path=str(config)) if config else ServerSettings()
    console.print(Panel.fit(f"Checking {settings.config_path}", style="bold blue"))

    try:
        loaded, catalog, prometheus_url = validate_config(settings)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    console.print(f"  Prometheus: [cyan]{prometheus_url}[/cyan]")
    console.print(f"  Badges:     [cyan]{'enabled' if loaded.badge.enabled else 'disabled'}[/cyan]")
    console.print()

    if not catalog:
        console.print("[yellow]No metrics configured[/yellow]")
        return

    table = Table(title="Metrics")
    table.add_column("Name", style="cyan")
    table.add_column("Title")
    table.add_column("Label")
    table.add_column("Colors", justify="right")
    table.add_column("Query", overflow="fold")
    for name, metric in catalog.items():
        table.add_row(
            name, metric.display_title, metric.label or "-", str(len(metric.colors)), metric.query
        )
    console.print(table)


@app.command()
def schema() -> None:
    """Print the JSON schema of the config file."""
    print(json.dumps(MetricBadgeConfig.model_json_schema(by_alias=True), indent=2))
