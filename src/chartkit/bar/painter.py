"""Bar chart geometry, hit-testing and scene building.

Bars occupy equal slots across the chart area; each bar takes
``1 - bar_spacing`` of its slot and is centered in it. Height scales
linearly with ``value / max`` and with the animation progress.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.geometry import Rect
from ..core.scene import Fill, PathItem, RectItem, Scene, TextItem, TextStyle
from ..design.gradients import LinearGradient, even_stops
from .models import BarChartData, BarChartStyle

__all__ = ["BarGeometry", "chart_area", "slot_metrics", "bar_geometry", "hit_test", "build_scene"]

HOVER_ALPHA = 0.8
VALUE_GAP = 4.0


@dataclass(frozen=True)
class BarGeometry:
    index: int
    rect: Rect
    fill: Fill


def chart_area(style: BarChartStyle, width: float, height: float) -> Rect:
    return Rect(0, 0, width, height).deflate(style.padding)


def slot_metrics(count: int, area: Rect, style: BarChartStyle) -> tuple[float, float]:
    """Return ``(bar_width, spacing)``; their sum is the slot width."""
    slot = area.width / count
    return slot * (1 - style.bar_spacing), slot * style.bar_spacing


def _fill_for(point: BarChartData, style: BarChartStyle, rect: Rect, hovered: bool) -> Fill:
    if point.color is not None:
        return point.color.with_alpha(HOVER_ALPHA) if hovered else point.color
    if style.uses_gradient:
        colors = list(style.gradient_colors or ())
        if hovered:
            colors = [c.with_alpha(HOVER_ALPHA) for c in colors]
        # bottom -> top
        return LinearGradient(rect.left, rect.bottom, rect.left, rect.top, even_stops(colors))
    return style.bar_color.with_alpha(HOVER_ALPHA) if hovered else style.bar_color


def bar_geometry(
    data: Sequence[BarChartData],
    style: BarChartStyle,
    progress: float,
    width: float,
    height: float,
    hovered: Optional[int] = None,
) -> List[BarGeometry]:
    if not data:
        return []
    area = chart_area(style, width, height)
    bar_w, spacing = slot_metrics(len(data), area, style)
    max_value = max(p.value for p in data)
    out: List[BarGeometry] = []
    for i, point in enumerate(data):
        ratio = point.value / max_value if max_value > 0 else 0.0
        bar_h = max(0.0, ratio * area.height * progress)
        x = area.left + i * (bar_w + spacing) + spacing / 2
        rect = Rect(x, area.bottom - bar_h, bar_w, bar_h)
        out.append(BarGeometry(i, rect, _fill_for(point, style, rect, hovered == i)))
    return out


def hit_test(
    data: Sequence[BarChartData], style: BarChartStyle, width: float, height: float, x: float, y: float
) -> Optional[int]:
    """Map a pointer position to the bar slot under it (``None`` outside)."""
    if not data:
        return None
    area = chart_area(style, width, height)
    bar_w, spacing = slot_metrics(len(data), area, style)
    slot = bar_w + spacing
    if slot <= 0:
        return None
    index = math.floor((x - area.left) / slot)
    if 0 <= index < len(data):
        return index
    return None


def build_scene(
    data: Sequence[BarChartData],
    style: BarChartStyle,
    progress: float,
    hovered: Optional[int],
    width: float,
    height: float,
) -> Scene:
    scene = Scene(width, height, style.background_color)
    if not data:
        return scene
    area = chart_area(style, width, height)
    if style.show_grid:
        grid = style.grid_color.with_alpha(0.2)
        for i in range(style.horizontal_grid_lines + 1):
            y = area.top + area.height / style.horizontal_grid_lines * i
            scene.add(PathItem(((area.left, y), (area.right, y)), stroke=grid, stroke_width=1.0))
    for bar in bar_geometry(data, style, progress, width, height, hovered):
        point = data[bar.index]
        base_color = point.color or style.bar_color
        if hovered == bar.index:
            scene.add(
                RectItem(bar.rect, None, corner_radius=style.corner_radius, stroke=base_color.with_alpha(0.2), stroke_width=2.0)
            )
        scene.add(RectItem(bar.rect, bar.fill, corner_radius=style.corner_radius))
        if style.show_values:
            value_style = style.value_style or TextStyle(color=base_color, size=12.0, bold=True)
            scene.add(
                TextItem(
                    (bar.rect.left + bar.rect.width / 2, bar.rect.top - VALUE_GAP),
                    f"{point.value:.1f}",
                    value_style,
                    align="center",
                    valign="bottom",
                )
            )
        if style.show_labels:
            label_style = style.label_style or TextStyle(color=style.bar_color, size=12.0)
            scene.add(
                TextItem(
                    (bar.rect.left + bar.rect.width / 2, area.bottom + style.padding.bottom / 2),
                    point.label,
                    label_style,
                    align="center",
                )
            )
    return scene
