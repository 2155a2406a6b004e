"""Multi-series line chart scene building.

All series share one value scale. The legend reserves a fixed band of the
canvas (40px tall when horizontal, 100px wide when vertical) before the
plot area is laid out. Hover state is the pointer position plus the
nearest point within ``tooltip_threshold``; the crosshair follows the
pointer itself.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..core.geometry import (
    Point,
    Rect,
    distance,
    evenly_spaced_x,
    flatten_cubic,
    map_values_y,
    polyline_length,
    polyline_prefix,
)
from ..core.scene import CircleItem, PathItem, RectItem, Scene, TextItem, TextStyle, estimate_text_size
from ..core.tooltip import build_tooltip
from .models import ChartSeries, LegendPosition, MultiLineChartStyle

__all__ = [
    "MultiLineHover",
    "chart_area",
    "value_bounds",
    "series_points",
    "smooth_path",
    "value_at",
    "hit_test",
    "build_scene",
]

LEGEND_BAND_HEIGHT = 40.0
LEGEND_BAND_WIDTH = 100.0
LEGEND_ITEM = 20.0
LEGEND_SPACING = 20.0


@dataclass(frozen=True)
class MultiLineHover:
    pointer: Point
    nearest: Optional[Tuple[int, int]] = None


def chart_area(style: MultiLineChartStyle, width: float, height: float) -> Rect:
    pad = style.padding
    band_h = band_w = 0.0
    if style.show_legend:
        if style.legend_position.horizontal:
            band_h = LEGEND_BAND_HEIGHT
        else:
            band_w = LEGEND_BAND_WIDTH
    left = pad.left + (band_w if style.legend_position is LegendPosition.LEFT else 0.0)
    top = pad.top + (band_h if style.legend_position is LegendPosition.TOP else 0.0)
    return Rect(left, top, max(0.0, width - pad.horizontal - band_w), max(0.0, height - pad.vertical - band_h))


def value_bounds(series: Sequence[ChartSeries], style: MultiLineChartStyle) -> Tuple[float, float]:
    values = [p.value for s in series for p in s.points]
    if not values:
        return 0.0, 0.0
    lo = 0.0 if style.force_y_axis_from_zero else min(values)
    return lo, max(values)


def series_points(series: Sequence[ChartSeries], style: MultiLineChartStyle, area: Rect) -> List[List[Point]]:
    lo, hi = value_bounds(series, style)
    out: List[List[Point]] = []
    for s in series:
        xs = evenly_spaced_x(len(s.points), area.left, area.width)
        ys = map_values_y([p.value for p in s.points], lo, hi, area.top, area.height)
        out.append(list(zip(xs, ys)))
    return out


def smooth_path(points: Sequence[Point]) -> List[Point]:
    """Cubic segments with both controls at the horizontal midpoint."""
    if len(points) < 2:
        return list(points)
    path: List[Point] = [points[0]]
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        mid = x0 + (x1 - x0) / 2
        path.extend(flatten_cubic((x0, y0), (mid, y0), (mid, y1), (x1, y1)))
    return path


def value_at(series: Sequence[ChartSeries], style: MultiLineChartStyle, area: Rect, y: float) -> float:
    lo, hi = value_bounds(series, style)
    if area.height <= 0:
        return lo
    return lo + (hi - lo) * (area.bottom - y) / area.height


def hit_test(
    series: Sequence[ChartSeries], style: MultiLineChartStyle, width: float, height: float, x: float, y: float
) -> Optional[MultiLineHover]:
    """Pointer plus the nearest point within the threshold; ``None`` outside the plot area."""
    area = chart_area(style, width, height)
    if not area.contains(x, y):
        return None
    nearest: Optional[Tuple[int, int]] = None
    best = math.inf
    for si, pts in enumerate(series_points(series, style, area)):
        for pi, pt in enumerate(pts):
            d = distance(pt, (x, y))
            if d < style.tooltip_threshold and d < best:
                nearest, best = (si, pi), d
    return MultiLineHover((x, y), nearest)


def _grid_items(series: Sequence[ChartSeries], style: MultiLineChartStyle, area: Rect) -> list:
    grid = style.grid_color.with_alpha(0.2)
    label_style = style.label_style or TextStyle(color=style.grid_color, size=10.0)
    lo, hi = value_bounds(series, style)
    items: list = []
    for i in range(style.grid_lines + 1):
        y = area.top + area.height / style.grid_lines * i
        items.append(PathItem(((area.left, y), (area.right, y)), stroke=grid))
        if series:
            items.append(
                TextItem((area.left - 5, y), f"{hi - (hi - lo) / style.grid_lines * i:.1f}", label_style,
                         align="right", valign="middle")
            )
    if series and series[0].points:
        first = series[0].points
        for x, point in zip(evenly_spaced_x(len(first), area.left, area.width), first):
            items.append(PathItem(((x, area.top), (x, area.bottom)), stroke=grid))
            if point.label is not None:
                items.append(TextItem((x, area.bottom + 5), point.label, label_style, align="center"))
    return items


def _legend_items(series: Sequence[ChartSeries], style: MultiLineChartStyle, area: Rect, width: float, height: float) -> list:
    text_style = style.legend_style or TextStyle(color=style.grid_color, size=12.0)
    pad = style.padding
    items: list = []
    if style.legend_position.horizontal:
        x = area.left
        y = pad.top if style.legend_position is LegendPosition.TOP else height - LEGEND_ITEM - pad.bottom
        for i, s in enumerate(series):
            items.append(CircleItem((x + LEGEND_ITEM / 2, y + LEGEND_ITEM / 2), LEGEND_ITEM / 4, style.color_for(i, s)))
            items.append(TextItem((x + LEGEND_ITEM + 5, y + LEGEND_ITEM / 2), s.name, text_style, valign="middle"))
            x += LEGEND_ITEM + estimate_text_size(s.name, text_style.size)[0] + LEGEND_SPACING
    else:
        x = pad.left if style.legend_position is LegendPosition.LEFT else width - LEGEND_BAND_WIDTH - pad.right
        y = area.top
        for i, s in enumerate(series):
            items.append(CircleItem((x + LEGEND_ITEM / 2, y + LEGEND_ITEM / 2), LEGEND_ITEM / 4, style.color_for(i, s)))
            items.append(TextItem((x + LEGEND_ITEM + 5, y + LEGEND_ITEM / 2), s.name, text_style, valign="middle"))
            y += LEGEND_ITEM + LEGEND_SPACING
    return items


def _crosshair_items(
    series: Sequence[ChartSeries], style: MultiLineChartStyle, area: Rect, pointer: Point
) -> list:
    cfg = style.crosshair
    px, py = pointer
    items: list = [
        PathItem(((px, area.top), (px, area.bottom)), stroke=cfg.line_color, stroke_width=cfg.line_width),
        PathItem(((area.left, py), (area.right, py)), stroke=cfg.line_color, stroke_width=cfg.line_width),
    ]
    if cfg.show_label:
        label_style = cfg.label_style or TextStyle(color=cfg.line_color, size=10.0)
        text = f"{value_at(series, style, area, py):.1f}"
        w, h = estimate_text_size(text, label_style.size)
        items.append(RectItem(Rect(area.left - w - 25, py - h / 2, w + 10, h), style.background_color))
        items.append(TextItem((area.left - w - 20, py), text, label_style, valign="middle"))
    return items


def build_scene(
    series: Sequence[ChartSeries],
    style: MultiLineChartStyle,
    progress: float,
    hover: Optional[MultiLineHover],
    width: float,
    height: float,
) -> Scene:
    scene = Scene(width, height, style.background_color)
    area = chart_area(style, width, height)
    if style.show_grid:
        scene.extend(_grid_items(series, style, area))
    all_points = series_points(series, style, area)
    for si, (s, pts) in enumerate(zip(series, all_points)):
        if not pts:
            continue
        color = style.color_for(si, s)
        smooth = s.smooth_line if s.smooth_line is not None else style.smooth_lines
        path = smooth_path(pts) if smooth else pts
        revealed = polyline_prefix(path, polyline_length(path) * progress)
        if len(revealed) >= 2:
            scene.add(PathItem(tuple(revealed), stroke=color, stroke_width=s.line_width or style.line_width))
        show_points = s.show_points if s.show_points is not None else style.show_points
        if show_points:
            size = s.point_size or style.point_size
            for pt in pts[: math.floor(len(pts) * progress)]:
                scene.add(CircleItem(pt, size, color, stroke=style.background_color, stroke_width=2.0))
    if style.show_legend:
        scene.extend(_legend_items(series, style, area, width, height))
    if hover is not None:
        if style.crosshair is not None and style.crosshair.enabled:
            scene.extend(_crosshair_items(series, style, area, hover.pointer))
        if hover.nearest is not None:
            si, pi = hover.nearest
            s = series[si]
            point = s.points[pi]
            value = f"{point.value:.1f}"
            lines = [s.name, value if point.label is None else f"{point.label}: {value}"]
            scene.extend(build_tooltip(all_points[si][pi], lines, style.tooltip_style, area))
    return scene
