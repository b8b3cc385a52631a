"""metricbadge - Prometheus queries served as shields.io endpoints and SVG badges.

Quick Start:
    from metricbadge.api import create_app
    from metricbadge.models import ServerSettings

    # Reads METRICBADGE_* / PROMETHEUS_URL from the environment
    app = create_app(ServerSettings(config_path="config.yaml"))

Or from the command line:
    metricbadge serve --config config.yaml
"""

__version__ = "0.1.0"
