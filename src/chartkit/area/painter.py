"""Area chart geometry and scene building.

Every series is mapped onto a shared value scale (all series' min/max,
optionally anchored at zero). The entry animation reveals each series by
path length: the line is cut to ``length * progress`` and the filled
region follows the revealed prefix down to the baseline.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from ..core.geometry import Point, Rect, distance, evenly_spaced_x, map_values_y, polyline_length, polyline_prefix
from ..core.scene import CircleItem, PathItem, Scene, TextItem, TextStyle
from ..core.tooltip import TooltipStyle, build_tooltip
from ..design.gradients import vertical_gradient
from .models import AreaChartStyle, AreaSeries, TooltipConfig

__all__ = [
    "chart_area",
    "value_bounds",
    "series_points",
    "revealed_path",
    "hit_test",
    "build_scene",
]

HoverKey = Tuple[int, int]

_DEFAULT_TOOLTIP = TooltipConfig()


def chart_area(style: AreaChartStyle, width: float, height: float) -> Rect:
    return Rect(0, 0, width, height).deflate(style.padding)


def value_bounds(series: Sequence[AreaSeries], style: AreaChartStyle) -> Tuple[float, float]:
    values = [p.value for s in series for p in s.points]
    if not values:
        return 0.0, 0.0
    lo, hi = min(values), max(values)
    if style.force_y_axis_from_zero:
        lo = min(0.0, lo)
    return lo, hi


def series_points(series: Sequence[AreaSeries], style: AreaChartStyle, area: Rect) -> List[List[Point]]:
    lo, hi = value_bounds(series, style)
    out: List[List[Point]] = []
    for s in series:
        xs = evenly_spaced_x(len(s.points), area.left, area.width)
        ys = map_values_y([p.value for p in s.points], lo, hi, area.top, area.height)
        out.append(list(zip(xs, ys)))
    return out


def revealed_path(points: Sequence[Point], progress: float) -> List[Point]:
    return polyline_prefix(points, polyline_length(points) * progress)


def _tooltip_for(series: AreaSeries, index: int) -> TooltipConfig:
    return series.points[index].tooltip or series.tooltip or _DEFAULT_TOOLTIP


def hit_test(
    series: Sequence[AreaSeries], style: AreaChartStyle, width: float, height: float, x: float, y: float
) -> Optional[HoverKey]:
    """Nearest ``(series, point)`` within that point's tooltip hover radius."""
    area = chart_area(style, width, height)
    best: Optional[HoverKey] = None
    best_dist = math.inf
    for si, pts in enumerate(series_points(series, style, area)):
        for pi, pt in enumerate(pts):
            cfg = _tooltip_for(series[si], pi)
            if not cfg.enabled:
                continue
            d = distance(pt, (x, y))
            if d <= cfg.hover_radius and d < best_dist:
                best, best_dist = (si, pi), d
    return best


def _grid_items(series: Sequence[AreaSeries], style: AreaChartStyle, area: Rect) -> list:
    grid = style.grid_color.with_alpha(0.2)
    label_style = style.label_style or TextStyle(color=style.grid_color, size=10.0)
    lo, hi = value_bounds(series, style)
    items: list = []
    for i in range(style.grid_lines + 1):
        y = area.top + area.height / style.grid_lines * i
        items.append(PathItem(((area.left, y), (area.right, y)), stroke=grid))
        if series:
            value = hi - (hi - lo) / style.grid_lines * i
            items.append(TextItem((area.left - 5, y), f"{value:.1f}", label_style, align="right", valign="middle"))
    if series and series[0].points:
        first = series[0]
        for x, point in zip(evenly_spaced_x(len(first.points), area.left, area.width), first.points):
            items.append(PathItem(((x, area.top), (x, area.bottom)), stroke=grid))
            if point.label is not None:
                items.append(TextItem((x, area.bottom + 5), point.label, label_style, align="center"))
    return items


def _title_items(style: AreaChartStyle, area: Rect, width: float, height: float) -> list:
    items: list = []
    title_style = TextStyle(color=style.grid_color, size=14.0, bold=True)
    axis_style = style.label_style or TextStyle(color=style.grid_color, size=11.0)
    if style.title:
        items.append(TextItem((width / 2, area.top / 2), style.title, title_style, align="center", valign="middle"))
    if style.x_axis_title:
        items.append(TextItem((area.left + area.width / 2, height - 2), style.x_axis_title, axis_style, align="center", valign="bottom"))
    if style.y_axis_title:
        items.append(TextItem((area.left, area.top - 4), style.y_axis_title, axis_style, valign="bottom"))
    return items


def build_scene(
    series: Sequence[AreaSeries],
    style: AreaChartStyle,
    progress: float,
    hovered: Optional[HoverKey],
    width: float,
    height: float,
) -> Scene:
    scene = Scene(width, height, style.background_color)
    area = chart_area(style, width, height)
    if style.show_grid:
        scene.extend(_grid_items(series, style, area))
    scene.extend(_title_items(style, area, width, height))
    all_points = series_points(series, style, area)
    tooltip_items: list = []
    for si, (s, pts) in enumerate(zip(series, all_points)):
        if not pts:
            continue
        color = style.color_for(si, s)
        gradient_color = s.gradient_color or color.with_alpha(0.2)
        revealed = revealed_path(pts, progress)
        if len(revealed) >= 2:
            region = [(revealed[0][0], area.bottom), *revealed, (revealed[-1][0], area.bottom)]
            fill = vertical_gradient(area.top, area.bottom, [color, gradient_color])
            scene.add(PathItem(tuple(region), fill=fill, closed=True))
            scene.add(PathItem(tuple(revealed), stroke=color, stroke_width=s.line_width or style.line_width))
        show_points = s.show_points if s.show_points is not None else style.show_points
        if not show_points:
            continue
        shown = math.floor(len(pts) * progress)
        size = s.point_size or style.point_size
        for pi in range(shown):
            scene.add(CircleItem(pts[pi], size, color, stroke=style.background_color, stroke_width=2.0))
            if hovered == (si, pi):
                cfg = _tooltip_for(s, pi)
                text = cfg.text or f"{s.name}: {s.points[pi].value:.1f}"
                tip_style = TooltipStyle(
                    background_color=cfg.background_color,
                    border_color=cfg.background_color,
                    border_radius=cfg.border_radius,
                    text_style=cfg.text_style,
                    padding=cfg.padding,
                )
                tooltip_items = build_tooltip(pts[pi], [text], tip_style, area)
    # tooltip stays on top of every series
    scene.extend(tooltip_items)
    return scene
