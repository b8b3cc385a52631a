"""Exception hierarchy.

Each request-time error maps to one response in the pipeline's error
taxonomy. ``reason`` is the text shown to callers; exception messages are for
logs only and never reach a response body.
"""


class MetricBadgeError(Exception):
    reason = "Processing Error"


class ConfigError(MetricBadgeError):
    """The configuration file could not be read or validated."""


class DuplicateMetricError(ConfigError):
    """Two metrics share a name and the duplicate policy is ``reject``."""


class MetricNotConfiguredError(MetricBadgeError):
    reason = "Not Found"


class QueryError(MetricBadgeError):
    """The backend query failed (transport, HTTP status or payload)."""

    reason = "Query Error"


class ResultSerializationError(MetricBadgeError):
    reason = "Processing Error"


class LabelNotFoundError(MetricBadgeError):
    reason = "label not found"

    def __init__(self, label: str):
        super().__init__(f"label {label!r} not found in the query result")
        self.label = label


class BadgeRenderError(MetricBadgeError):
    """Badge rendering is unavailable or failed."""

    reason = "Badge Generation Error"
