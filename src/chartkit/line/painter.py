"""Line chart geometry and scene building.

Points are spread evenly across the chart area. With ``use_curved_lines``
each segment becomes a quadratic bezier whose control point leans along the
local direction of travel; the resulting curve is flattened so the
"drawing in" animation can cut it by length exactly like a straight line.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from ..core.geometry import (
    Point,
    Rect,
    dash_segments,
    distance,
    evenly_spaced_x,
    flatten_quadratic,
    map_values_y,
    polyline_length,
    polyline_prefix,
)
from ..core.scene import CircleItem, PathItem, RectItem, Scene, TextItem, TextStyle
from ..core.tooltip import build_tooltip
from .models import HoverLineStyle, LineChartData, LineChartStyle

__all__ = [
    "chart_area",
    "data_points",
    "curve_control_points",
    "line_path",
    "hit_test",
    "build_scene",
    "DASH_PATTERNS",
]

DASH_PATTERNS = {
    HoverLineStyle.DASHED: (6.0, 4.0),
    HoverLineStyle.DOTTED: (2.0, 3.0),
}


def chart_area(style: LineChartStyle, width: float, height: float) -> Rect:
    return Rect(0, 0, width, height).deflate(style.padding)


def data_points(data: Sequence[LineChartData], area: Rect) -> List[Point]:
    values = [d.value for d in data]
    if not values:
        return []
    xs = evenly_spaced_x(len(values), area.left, area.width)
    ys = map_values_y(values, min(values), max(values), area.top, area.height)
    return list(zip(xs, ys))


def _unit(a: Point, b: Point) -> Point:
    d = distance(a, b)
    if d == 0:
        return (0.0, 0.0)
    return ((b[0] - a[0]) / d, (b[1] - a[1]) / d)


def curve_control_points(points: Sequence[Point], intensity: float) -> List[Point]:
    """One quadratic control point per segment.

    The first segment leans along its own direction (a straight start),
    the last along the previous segment, and inner segments along the
    normalized average of the incoming and outgoing directions.
    """
    controls: List[Point] = []
    last = len(points) - 2
    for i in range(len(points) - 1):
        start, end = points[i], points[i + 1]
        if i == 0:
            direction = _unit(start, end)
        elif i == last:
            direction = _unit(points[i - 1], start)
        else:
            a = _unit(points[i - 1], start)
            b = _unit(start, end)
            direction = _unit((0.0, 0.0), (a[0] + b[0], a[1] + b[1]))
        reach = distance(start, end) * intensity
        controls.append((start[0] + direction[0] * reach, start[1] + direction[1] * reach))
    return controls


def line_path(points: Sequence[Point], style: LineChartStyle) -> List[Point]:
    if len(points) < 2 or not style.use_curved_lines:
        return list(points)
    path: List[Point] = [points[0]]
    for (start, end), control in zip(zip(points, points[1:]), curve_control_points(points, style.curve_intensity)):
        path.extend(flatten_quadratic(start, control, end))
    return path


def hit_test(
    data: Sequence[LineChartData], style: LineChartStyle, width: float, height: float, x: float, y: float
) -> Optional[int]:
    """Index of the point nearest the pointer horizontally, within ``hover_max_distance``."""
    area = chart_area(style, width, height)
    best: Optional[int] = None
    best_dist = math.inf
    for i, (px, _) in enumerate(data_points(data, area)):
        d = abs(px - x)
        if d <= style.hover_max_distance and d < best_dist:
            best, best_dist = i, d
    return best


def _grid_items(style: LineChartStyle, area: Rect, points: Sequence[Point]) -> list:
    grid = style.grid_color.with_alpha(0.2)
    items: list = []
    for i in range(style.grid_lines + 1):
        y = area.top + area.height / style.grid_lines * i
        items.append(PathItem(((area.left, y), (area.right, y)), stroke=grid))
    for x, _ in points:
        items.append(PathItem(((x, area.top), (x, area.bottom)), stroke=grid))
    return items


def _hover_line(style: LineChartStyle, area: Rect, x: float) -> list:
    top, bottom = (x, area.top), (x, area.bottom)
    if style.hover_line_style is HoverLineStyle.SOLID:
        return [PathItem((top, bottom), stroke=style.hover_line_color)]
    on, off = DASH_PATTERNS[style.hover_line_style]
    return [PathItem(seg, stroke=style.hover_line_color) for seg in dash_segments(top, bottom, on, off)]


def build_scene(
    data: Sequence[LineChartData],
    style: LineChartStyle,
    progress: float,
    hovered: Optional[int],
    width: float,
    height: float,
) -> Scene:
    scene = Scene(width, height, style.background_color)
    area = chart_area(style, width, height)
    points = data_points(data, area)
    if style.show_grid:
        scene.extend(_grid_items(style, area, points))
    if hovered is not None and 0 <= hovered < len(points):
        scene.extend(_hover_line(style, area, points[hovered][0]))
    path = line_path(points, style)
    revealed = polyline_prefix(path, polyline_length(path) * progress)
    if len(revealed) >= 2:
        scene.add(PathItem(tuple(revealed), stroke=style.line_color, stroke_width=style.stroke_width))
    if style.show_points:
        r = style.point_radius
        for i in range(math.floor(len(points) * progress)):
            px, py = points[i]
            radius = r * 1.5 if hovered == i else r
            if style.rounded_points:
                scene.add(CircleItem(points[i], radius, style.point_color))
            else:
                scene.add(RectItem(Rect(px - radius, py - radius, radius * 2, radius * 2), style.point_color))
    label_style = style.label_style or TextStyle(color=style.line_color, size=12.0)
    label_y = area.bottom + style.padding.bottom / 2
    for (x, _), point in zip(points, data):
        scene.add(TextItem((x, label_y), point.label, label_style, align="center", valign="middle"))
    if hovered is not None and 0 <= hovered < len(points):
        point = data[hovered]
        scene.extend(build_tooltip(points[hovered], [f"{point.label}: {point.value:.1f}"], style.tooltip_style, area))
    return scene
