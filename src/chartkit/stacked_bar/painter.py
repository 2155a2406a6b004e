"""Stacked bar geometry and scene building.

Each bar's segments are stacked from the baseline upward in order. The
value scale runs from the y-axis minimum (0 by default) to its maximum
(the largest bar total by default); every segment is scaled by the same
factor so heights stay proportional across bars.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..core.geometry import Rect
from ..core.scene import PathItem, RectItem, Scene, TextItem, TextStyle, estimate_text_size
from ..design.colors import BLACK, WHITE
from .models import StackedBarChartStyle, StackedBarData, YAxisConfig

__all__ = ["SegmentGeometry", "chart_area", "value_range", "segment_geometry", "hit_test", "build_scene"]

HOVER_ALPHA = 0.8
LABEL_FIT = 1.2

_DEFAULT_VALUE_STYLE = TextStyle(color=WHITE, size=12.0, bold=True)


@dataclass(frozen=True)
class SegmentGeometry:
    bar: int
    segment: int
    rect: Rect


def chart_area(style: StackedBarChartStyle, width: float, height: float) -> Rect:
    axis = style.y_axis.axis_width if style.y_axis is not None else 0.0
    pad = style.padding
    return Rect(pad.left + axis, pad.top, max(0.0, width - pad.horizontal - axis), max(0.0, height - pad.vertical))


def value_range(data: Sequence[StackedBarData], style: StackedBarChartStyle) -> Tuple[float, float]:
    axis = style.y_axis or YAxisConfig()
    lo = axis.min_value if axis.min_value is not None else 0.0
    hi = axis.max_value if axis.max_value is not None else max((bar.total for bar in data), default=0.0)
    return lo, hi


def _slot(data: Sequence[StackedBarData], area: Rect, style: StackedBarChartStyle) -> Tuple[float, float, float]:
    slot = area.width / len(data)
    return slot, slot * (1 - style.bar_spacing), slot * style.bar_spacing


def segment_geometry(
    data: Sequence[StackedBarData], style: StackedBarChartStyle, progress: float, width: float, height: float
) -> List[SegmentGeometry]:
    if not data:
        return []
    area = chart_area(style, width, height)
    lo, hi = value_range(data, style)
    span = hi - lo
    slot, bar_w, spacing = _slot(data, area, style)
    out: List[SegmentGeometry] = []
    for i, bar in enumerate(data):
        x = area.left + i * slot + spacing / 2
        stacked = 0.0
        for j, segment in enumerate(bar.segments):
            h = segment.value / span * area.height * progress if span > 0 else 0.0
            out.append(SegmentGeometry(i, j, Rect(x, area.bottom - stacked - h, bar_w, h)))
            stacked += h
    return out


def hit_test(
    data: Sequence[StackedBarData], style: StackedBarChartStyle, width: float, height: float, x: float, y: float
) -> Optional[int]:
    if not data:
        return None
    area = chart_area(style, width, height)
    if area.width <= 0 or x < area.left or x > area.right:
        return None
    index = math.floor((x - area.left) / (area.width / len(data)))
    return index if 0 <= index < len(data) else None


def _y_axis_items(data: Sequence[StackedBarData], style: StackedBarChartStyle, area: Rect) -> list:
    axis = style.y_axis
    lo, hi = value_range(data, style)
    label_style = axis.label_style or TextStyle(color=style.grid_color, size=12.0)
    items: list = []
    if axis.show_axis_line:
        items.append(PathItem(((area.left, area.top), (area.left, area.bottom)), stroke=style.grid_color))
    for i in range(axis.divisions + 1):
        frac = i / axis.divisions
        y = area.bottom - frac * area.height
        items.append(TextItem((area.left - 8, y), axis.format(lo + frac * (hi - lo)), label_style, align="right", valign="middle"))
        if axis.show_grid_lines and 0 < i < axis.divisions:
            items.append(PathItem(((area.left, y), (area.right, y)), stroke=style.grid_color.with_alpha(0.2)))
    return items


def build_scene(
    data: Sequence[StackedBarData],
    style: StackedBarChartStyle,
    progress: float,
    hovered: Optional[int],
    width: float,
    height: float,
) -> Scene:
    scene = Scene(width, height, style.background_color)
    if not data:
        return scene
    area = chart_area(style, width, height)
    if style.y_axis is not None:
        scene.extend(_y_axis_items(data, style, area))
    if style.show_grid:
        grid = style.grid_color.with_alpha(0.2)
        for i in range(style.horizontal_grid_lines + 1):
            y = area.top + area.height / style.horizontal_grid_lines * i
            scene.add(PathItem(((area.left, y), (area.right, y)), stroke=grid))
    value_style = style.value_style or _DEFAULT_VALUE_STYLE
    tops = {}
    for geo in segment_geometry(data, style, progress, width, height):
        segment = data[geo.bar].segments[geo.segment]
        color = segment.color.with_alpha(HOVER_ALPHA) if hovered == geo.bar else segment.color
        scene.add(RectItem(geo.rect, color, corner_radius=style.corner_radius))
        tops[geo.bar] = geo.rect
        if style.show_values:
            text = f"{segment.value:.1f}"
            _, text_h = estimate_text_size(text, value_style.size)
            if geo.rect.height > text_h * LABEL_FIT:
                scene.add(TextItem(geo.rect.center, text, value_style, align="center", valign="middle"))
    if hovered is not None and hovered in tops:
        top = tops[hovered]
        outline = Rect(top.left, top.top, top.width, area.bottom - top.top)
        scene.add(RectItem(outline, None, corner_radius=style.corner_radius, stroke=WHITE.with_alpha(0.3), stroke_width=2.0))
    label_style = style.label_style or TextStyle(color=BLACK.with_alpha(0.87), size=12.0)
    slot, bar_w, spacing = _slot(data, area, style)
    for i, bar in enumerate(data):
        x = area.left + i * slot + spacing / 2 + bar_w / 2
        scene.add(TextItem((x, area.bottom + style.padding.bottom / 2), bar.label, label_style, align="center"))
    return scene
