"""Gantt timeline geometry, hit-testing and scene building.

Tasks are laid out one per row. A task's horizontal extent maps its dates
onto the padded time range; the animation stretches every x offset from
the left edge by ``progress``. Task markers sit at the final (unanimated)
start position and scale up with progress, so pointer targets never move.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from ..core.geometry import Point, Rect, distance, flatten_cubic
from ..core.scene import CircleItem, PathItem, Scene, TextItem, TextStyle, estimate_text_size
from ..core.tooltip import TooltipStyle, build_tooltip
from ..design.colors import WHITE
from .models import GanttChartStyle, GanttTask
from .timeline import time_range

__all__ = [
    "TaskGeometry",
    "GRID_DIVISIONS",
    "HIT_SLOP",
    "chart_area",
    "x_for",
    "row_y",
    "task_geometry",
    "marker_position",
    "hit_test",
    "build_scene",
]

GRID_DIVISIONS = 6
HIT_SLOP = 6.0

_TOOLTIP = TooltipStyle()


@dataclass(frozen=True)
class TaskGeometry:
    index: int
    start: Point
    end: Point


def chart_area(style: GanttChartStyle, width: float, height: float) -> Rect:
    pad = style.horizontal_padding
    return Rect(pad, pad, max(0.0, width - pad * 2), max(0.0, height - pad * 2))


def x_for(moment: datetime, rng: Tuple[datetime, datetime], area: Rect, progress: float = 1.0) -> float:
    start, end = rng
    total = (end - start).total_seconds()
    return area.left + (moment - start).total_seconds() / total * area.width * progress


def row_y(index: int, style: GanttChartStyle, area: Rect) -> float:
    return area.top + style.timeline_y_offset + index * style.vertical_spacing


def task_geometry(
    tasks: Sequence[GanttTask], style: GanttChartStyle, progress: float, width: float, height: float
) -> List[TaskGeometry]:
    if not tasks:
        return []
    area = chart_area(style, width, height)
    rng = time_range(tasks)
    out: List[TaskGeometry] = []
    for i, task in enumerate(tasks):
        y = row_y(i, style, area)
        out.append(TaskGeometry(i, (x_for(task.start, rng, area, progress), y), (x_for(task.end, rng, area, progress), y)))
    return out


def marker_position(tasks: Sequence[GanttTask], style: GanttChartStyle, index: int, width: float, height: float) -> Point:
    area = chart_area(style, width, height)
    return x_for(tasks[index].start, time_range(tasks), area), row_y(index, style, area)


def hit_test(
    tasks: Sequence[GanttTask], style: GanttChartStyle, width: float, height: float, x: float, y: float
) -> Optional[int]:
    """Index of the task marker within ``point_radius + 6`` of the pointer."""
    best: Optional[int] = None
    best_dist = math.inf
    reach = style.point_radius + HIT_SLOP
    for i in range(len(tasks)):
        d = distance(marker_position(tasks, style, i, width, height), (x, y))
        if d <= reach and d < best_dist:
            best, best_dist = i, d
    return best


def _grid_items(tasks: Sequence[GanttTask], style: GanttChartStyle, area: Rect) -> list:
    start, end = time_range(tasks)
    step = (end - start) / GRID_DIVISIONS
    stroke = style.connection_line_color.with_alpha(0.5)
    date_style = style.date_style or TextStyle(color=style.connection_line_color, size=10.0)
    items: list = []
    for i in range(GRID_DIVISIONS + 1):
        x = area.left + area.width / GRID_DIVISIONS * i
        items.append(PathItem(((x, area.top + style.timeline_y_offset - 20), (x, area.bottom)), stroke=stroke, stroke_width=0.3))
        text = (start + step * i).strftime(style.date_format)
        _, text_h = estimate_text_size(text, date_style.size)
        items.append(TextItem((x, area.bottom - text_h - 10), text, date_style, align="center"))
    return items


def _tooltip_lines(task: GanttTask, style: GanttChartStyle) -> List[str]:
    lines = [task.label, f"{task.start.strftime(style.date_format)} - {task.end.strftime(style.date_format)}"]
    if task.description:
        lines.append(task.description)
    return lines


def build_scene(
    tasks: Sequence[GanttTask],
    style: GanttChartStyle,
    progress: float,
    hovered: Optional[int],
    width: float,
    height: float,
) -> Scene:
    scene = Scene(width, height, style.background_color)
    if not tasks:
        return scene
    area = chart_area(style, width, height)
    scene.extend(_grid_items(tasks, style, area))
    geometry = task_geometry(tasks, style, progress, width, height)
    line = style.line_color.with_alpha(0.8)
    for geo in geometry:
        scene.add(PathItem((geo.start, geo.end), stroke=line, stroke_width=style.line_width))
    if style.show_connections:
        stroke = style.connection_line_color.with_alpha(0.5)
        for a, b in zip(geometry, geometry[1:]):
            (x1, y1), (x2, y2) = a.start, b.start
            mid = x1 + (x2 - x1) / 2
            curve = [a.start, *flatten_cubic(a.start, (mid, y1), (mid, y2), b.start)]
            scene.add(PathItem(tuple(curve), stroke=stroke, stroke_width=style.connection_line_width))
    for geo, task in zip(geometry, tasks):
        label_style = style.label_style or TextStyle(color=task.color or style.point_color, size=14.0, bold=True)
        x, y = geo.start
        scene.add(TextItem((x, y - style.label_offset), task.label, label_style, align="center", valign="bottom"))
    scale = 0.2 + 0.8 * progress
    for i, task in enumerate(tasks):
        center = marker_position(tasks, style, i, width, height)
        radius = style.point_radius * scale * (1.5 if hovered == i else 1.0)
        scene.add(CircleItem(center, radius, task.color or style.point_color, stroke=WHITE, stroke_width=1.5))
    if hovered is not None and 0 <= hovered < len(tasks):
        center = marker_position(tasks, style, hovered, width, height)
        scene.extend(build_tooltip(center, _tooltip_lines(tasks[hovered], style), _TOOLTIP, Rect(0, 0, width, height)))
    return scene
