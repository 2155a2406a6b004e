"""Hollow semicircle meter geometry and scene.

The meter is the upper half of a ring whose center sits on the bottom
edge of the canvas. The arc starts at 9 o'clock and sweeps clockwise over
the top: ``percentage / 100 * 180`` degrees are active, the rest inactive.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..core.geometry import Point, Rect, distance
from ..core.scene import CircleItem, RectItem, Scene, TextItem, TextStyle, WedgeItem, estimate_text_size
from ..design.colors import BLACK
from .models import MeterReading, SemicircleStyle

__all__ = ["MeterLayout", "LEGEND_BAND", "meter_layout", "active_sweep", "hit_test", "build_scene"]

LEGEND_BAND = 40.0
LEGEND_ICON = 16.0
LEGEND_GAP = 24.0

ACTIVE = 0
INACTIVE = 1


@dataclass(frozen=True)
class MeterLayout:
    center: Point
    outer_radius: float
    inner_radius: float


def meter_layout(style: SemicircleStyle, width: float, height: float) -> MeterLayout:
    band = LEGEND_BAND if style.show_legend else 0.0
    outer = max(0.0, min(width / 2, height - band))
    return MeterLayout((width / 2, height), outer, outer * style.hollow_radius)


def active_sweep(percentage: float) -> float:
    return percentage / 100.0 * math.pi


def hit_test(
    reading: MeterReading, style: SemicircleStyle, width: float, height: float, x: float, y: float
) -> Optional[int]:
    """``0`` over the active arc, ``1`` over the inactive arc, else ``None``."""
    layout = meter_layout(style, width, height)
    d = distance(layout.center, (x, y))
    if y > layout.center[1] or d < layout.inner_radius or d > layout.outer_radius:
        return None
    # 0 at 9 o'clock, pi at 3 o'clock, across the top
    angle = math.atan2(y - layout.center[1], x - layout.center[0]) + math.pi
    return ACTIVE if angle <= active_sweep(reading.percentage) else INACTIVE


def _legend_items(reading: MeterReading, style: SemicircleStyle, width: float) -> list:
    text_style = style.legend_style or TextStyle(color=BLACK.with_alpha(0.87), size=12.0)
    active_label, inactive_label = style.legend_labels
    entries = [
        (style.active_color, style.format_legend(active_label, reading.percentage)),
        (style.inactive_color, style.format_legend(inactive_label, 100.0 - reading.percentage)),
    ]
    widths = [LEGEND_ICON + 8 + estimate_text_size(text, text_style.size)[0] for _, text in entries]
    x = (width - sum(widths) - LEGEND_GAP) / 2
    y = (LEGEND_BAND - LEGEND_ICON) / 2
    items: list = []
    for (color, text), w in zip(entries, widths):
        items.append(RectItem(Rect(x, y, LEGEND_ICON, LEGEND_ICON), color, corner_radius=2.0))
        items.append(TextItem((x + LEGEND_ICON + 8, y + LEGEND_ICON / 2), text, text_style, valign="middle"))
        x += w + LEGEND_GAP
    return items


def build_scene(
    reading: MeterReading,
    style: SemicircleStyle,
    progress: float,
    hovered: Optional[int],
    width: float,
    height: float,
) -> Scene:
    scene = Scene(width, height, style.background_color)
    layout = meter_layout(style, width, height)
    value = reading.displayed(progress)
    inactive = style.inactive_color.lighten(0.05) if hovered == INACTIVE else style.inactive_color
    active = style.active_color.lighten(0.1) if hovered == ACTIVE else style.active_color
    scene.add(WedgeItem(layout.center, layout.outer_radius, math.pi, math.pi, inactive, index=INACTIVE))
    if value > 0:
        scene.add(WedgeItem(layout.center, layout.outer_radius, math.pi, active_sweep(value), active, index=ACTIVE))
    scene.add(CircleItem(layout.center, layout.inner_radius, style.background_color))
    if style.show_percentage_text:
        base = style.percentage_style or TextStyle(size=width / 8, bold=True)
        text_style = TextStyle(style.text_color or base.color, base.size, base.bold)
        scene.add(TextItem(layout.center, style.format_percentage(value), text_style, align="center", valign="bottom"))
    if style.show_legend:
        scene.extend(_legend_items(reading, style, width))
    return scene
