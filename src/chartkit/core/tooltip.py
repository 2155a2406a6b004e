"""Tooltip style shared by every chart family and tooltip box layout."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ..design.colors import BLACK, GREY, WHITE, Color, parse_color
from .geometry import Point, Rect
from .scene import RectItem, SceneItem, TextItem, TextStyle, estimate_text_size

__all__ = ["TooltipStyle", "build_tooltip"]

TOOLTIP_OFFSET = 10.0


@dataclass(frozen=True)
class TooltipStyle:
    background_color: Color = WHITE
    border_color: Color = GREY
    border_radius: float = 5.0
    text_style: TextStyle = TextStyle(color=BLACK, size=12.0)
    padding: float = 8.0

    def to_json(self) -> dict:
        return {
            "backgroundColor": self.background_color.to_hex(),
            "borderColor": self.border_color.to_hex(),
            "borderRadius": self.border_radius,
            "textStyle": self.text_style.to_json(),
            "padding": self.padding,
        }

    @classmethod
    def from_json(cls, raw) -> "TooltipStyle":
        base = cls()
        if not isinstance(raw, dict):
            return base
        return cls(
            background_color=parse_color(raw.get("backgroundColor"), base.background_color),
            border_color=parse_color(raw.get("borderColor"), base.border_color),
            border_radius=float(raw.get("borderRadius", base.border_radius)),
            text_style=TextStyle.from_json(raw.get("textStyle"), base.text_style),
            padding=float(raw.get("padding", base.padding)),
        )


def build_tooltip(
    anchor: Point, lines: Sequence[str], style: TooltipStyle, bounds: Rect
) -> List[SceneItem]:
    """Lay out a tooltip box above and right of ``anchor``, kept inside ``bounds``."""
    if not lines:
        return []
    size = style.text_style.size
    dims = [estimate_text_size(line, size) for line in lines]
    text_w = max(w for w, _ in dims)
    line_h = dims[0][1]
    box_w = text_w + style.padding * 2
    box_h = line_h * len(lines) + style.padding * 2
    x = anchor[0] + TOOLTIP_OFFSET
    y = anchor[1] - TOOLTIP_OFFSET - box_h
    if x + box_w > bounds.right:
        x = anchor[0] - TOOLTIP_OFFSET - box_w
    x = max(bounds.left, x)
    if y < bounds.top:
        y = anchor[1] + TOOLTIP_OFFSET
    y = min(y, max(bounds.top, bounds.bottom - box_h))
    items: List[SceneItem] = [
        RectItem(
            Rect(x, y, box_w, box_h),
            style.background_color,
            corner_radius=style.border_radius,
            stroke=style.border_color,
        )
    ]
    for i, line in enumerate(lines):
        items.append(TextItem((x + style.padding, y + style.padding + i * line_h), line, style.text_style))
    return items
