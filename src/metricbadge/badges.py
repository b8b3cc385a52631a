"""SVG badge rendering.

The pipeline only sees the BadgeRenderer protocol: (title, message, hex color,
style) in, SVG bytes out. SvgBadgeRenderer draws shields-style two-part badges
from a Jinja2 template and sizes them by measuring text with Pillow's default
scalable font at the configured size.
"""

from __future__ import annotations

from typing import Protocol

import jinja2
from PIL import ImageFont

from metricbadge.errors import BadgeRenderError
from metricbadge.models import BadgeConfig, BadgeStyle

LABEL_COLOR = "#555"

# Horizontal padding on each side of a text segment
_PADDING = 5

_STYLE_GEOMETRY = {
    BadgeStyle.FLAT: {"height": 20, "radius": 3, "text_y": 14},
    BadgeStyle.PLASTIC: {"height": 18, "radius": 4, "text_y": 13},
    BadgeStyle.FLAT_SQUARE: {"height": 20, "radius": 0, "text_y": 14},
}


class BadgeRenderer(Protocol):
    def render(self, title: str, message: str, color: str, style: BadgeStyle) -> bytes: ...


class SvgBadgeRenderer:
    """Shields-style badges in the flat, plastic and flat-square styles."""

    def __init__(
        self,
        font_family: str = "DejaVu Sans,Verdana,Geneva,sans-serif",
        font_size: int = 11,
    ):
        self.font_family = font_family
        self.font_size = font_size
        self._font = ImageFont.load_default(size=font_size)
        self._env = jinja2.Environment(
            loader=jinja2.PackageLoader("metricbadge", "templates"),
            autoescape=jinja2.select_autoescape(["svg"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @classmethod
    def from_config(cls, config: BadgeConfig) -> SvgBadgeRenderer | None:
        """Build the renderer, or None when badges are disabled."""
        if not config.enabled:
            return None
        return cls(font_family=config.font_family, font_size=config.font_size)

    def _segment_width(self, text: str) -> int:
        return round(self._font.getlength(text)) + 2 * _PADDING

    def render(self, title: str, message: str, color: str, style: BadgeStyle) -> bytes:
        label_width = self._segment_width(title)
        message_width = self._segment_width(message)
        geometry = _STYLE_GEOMETRY[style]
        try:
            svg = self._env.get_template("badge.svg").render(
                style=style.value,
                title=title,
                message=message,
                label_color=LABEL_COLOR,
                color=color,
                label_width=label_width,
                message_width=message_width,
                width=label_width + message_width,
                label_x=label_width / 2,
                message_x=label_width + message_width / 2,
                font_family=self.font_family,
                font_size=self.font_size,
                **geometry,
            )
        except jinja2.TemplateError as e:
            raise BadgeRenderError(f"badge template failed: {e}") from e
        return svg.encode()
