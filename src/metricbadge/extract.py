"""Turn a query result into a display value.

Only the first series is ever read. Queries returning several series must
aggregate in PromQL; nothing is summed or averaged here.
"""

from metricbadge.errors import LabelNotFoundError
from metricbadge.models import QueryResult


def extract_scalar(result: QueryResult) -> float | None:
    """Return the first series' value, or None if the result has no series."""
    if result.is_empty:
        return None
    return result.series[0].value


def extract_label(result: QueryResult, label_name: str) -> str:
    """Return ``label_name`` from the first series.

    Raises LabelNotFoundError if there is no series or the first series lacks
    the label. An empty label value is returned as-is.
    """
    if result.is_empty:
        raise LabelNotFoundError(label_name)
    labels = result.series[0].labels
    if label_name not in labels:
        raise LabelNotFoundError(label_name)
    return labels[label_name]
