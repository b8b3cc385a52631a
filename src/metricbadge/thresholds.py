"""Threshold matcher: classify a value against ordered color ranges.

First match wins in declaration order, even when a later range is narrower.
An unmatched value gets a synthetic range with no color and no override; its
empty color tells the renderer to omit the color field.
"""

from collections.abc import Sequence

from metricbadge.models import ColorRange


def match_color(ranges: Sequence[ColorRange], value: float) -> ColorRange:
    for color_range in ranges:
        if color_range.contains(value):
            return color_range
    return ColorRange(min=value, max=value)
