"""Symbolic color names for badge rendering.

Names follow the shields.io palette. Literal hex colors pass through; unknown
or empty names fall back to DEFAULT_COLOR.
"""

import re
from types import MappingProxyType

DEFAULT_COLOR = "#9f9f9f"

COLOR_HEX = MappingProxyType(
    {
        "brightgreen": "#44cc11",
        "green": "#97ca00",
        "yellowgreen": "#a4a61d",
        "yellow": "#dfb317",
        "orange": "#fe7d37",
        "red": "#e05d44",
        "blue": "#007ec6",
        "lightgrey": "#9f9f9f",
        "lightgray": "#9f9f9f",
        "grey": "#555555",
        "gray": "#555555",
        "blueviolet": "#8a2be2",
        # Semantic aliases
        "success": "#44cc11",
        "important": "#fe7d37",
        "critical": "#e05d44",
        "informational": "#007ec6",
        "inactive": "#9f9f9f",
    }
)

_HEX_LITERAL = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def resolve_hex(color: str) -> str:
    """Map a configured color to the hex value used in SVG fills."""
    if _HEX_LITERAL.match(color):
        return color
    return COLOR_HEX.get(color.strip().lower(), DEFAULT_COLOR)
