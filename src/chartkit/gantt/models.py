"""Gantt task model, style and JSON parsing.

Task documents come from many tools, so field names and date formats are
read leniently: ``startDate``/``start``/``Start``/``x``/``start_date`` for the
start, ``endDate``/``end``/``Finish``/``finish``/``end_date`` for the end, and
dates as ISO strings, ``YYYY-MM-DD``, ``MM/DD/YYYY``, ``DD/MM/YYYY``,
``DD.MM.YYYY`` or epoch milliseconds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from config import settings

from ..core.jsonio import as_bool, as_float, as_int, first_present, get_path, load_document, to_datetime
from ..core.scene import TextStyle
from ..design.colors import BLUE, GREY, WHITE, Color, parse_color
from ..design.easing import CURVES, Curve, curve_from_json, curve_from_plotly_easing
from ..errors import ChartDataError, GanttChartError

__all__ = [
    "GanttTask",
    "GanttChartStyle",
    "GanttChartConfig",
    "parse_date",
    "parse_gantt_json",
    "DEFAULT_DATE_FORMAT",
]

log = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%b %d, %Y"

_START_KEYS = ("startDate", "start", "Start", "x", "start_date")
_END_KEYS = ("endDate", "end", "Finish", "finish", "end_date")
_LABEL_KEYS = ("label", "name", "Task", "task", "y", "title")
_DESCRIPTION_KEYS = ("description", "text", "hover_text", "Resource", "resource")


def parse_date(value: Any) -> datetime:
    """Coerce a JSON date value to a naive (UTC) ``datetime``."""
    return to_datetime(value, error=GanttChartError)


@dataclass(frozen=True)
class GanttTask:
    start: datetime
    end: datetime
    label: str
    description: Optional[str] = None
    color: Optional[Color] = None
    icon: Optional[str] = None
    tap_content: Optional[str] = None

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise GanttChartError(
                f"End date ({self.end.isoformat()}) cannot be before start date ({self.start.isoformat()})",
                context={"start": self.start.isoformat(), "end": self.end.isoformat(), "label": self.label},
            )

    @property
    def duration_days(self) -> float:
        return (self.end - self.start).total_seconds() / 86400.0

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "startDate": self.start.isoformat(),
            "endDate": self.end.isoformat(),
            "label": self.label,
        }
        if self.description is not None:
            out["description"] = self.description
        if self.color is not None:
            out["color"] = self.color.to_hex()
        if self.icon is not None:
            out["icon"] = self.icon
        if self.tap_content is not None:
            out["tapContent"] = self.tap_content
        return out

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "GanttTask":
        start = first_present(raw, *_START_KEYS)
        end = first_present(raw, *_END_KEYS)
        if start is None or end is None:
            raise GanttChartError("Task requires a start and an end date", context={"keys": sorted(raw)})
        description = first_present(raw, *_DESCRIPTION_KEYS)
        tap = first_present(raw, "tapContent", "hover_text")
        return cls(
            start=parse_date(start),
            end=parse_date(end),
            label=str(first_present(raw, *_LABEL_KEYS, default="Task")),
            description=None if description is None else str(description),
            color=parse_color(first_present(raw, "color", "marker.color")),
            icon=raw.get("icon"),
            tap_content=None if tap is None else str(tap),
        )


@dataclass(frozen=True)
class GanttChartStyle:
    line_color: Color = BLUE
    point_color: Color = BLUE
    connection_line_color: Color = GREY
    background_color: Color = WHITE
    label_style: Optional[TextStyle] = None
    date_style: Optional[TextStyle] = None
    description_style: Optional[TextStyle] = None
    line_width: float = 2.0
    point_radius: float = 4.0
    connection_line_width: float = 1.0
    animation_duration_ms: int = settings.DEFAULT_ANIMATION_MS
    animation_curve: Curve = CURVES[settings.DEFAULT_CURVE]
    show_connections: bool = True
    date_format: str = DEFAULT_DATE_FORMAT
    vertical_spacing: float = 120.0
    horizontal_padding: float = 32.0
    label_offset: float = 25.0
    timeline_y_offset: float = 60.0

    def to_json(self) -> Dict[str, Any]:
        return {
            "lineColor": self.line_color.to_hex(),
            "pointColor": self.point_color.to_hex(),
            "connectionLineColor": self.connection_line_color.to_hex(),
            "backgroundColor": self.background_color.to_hex(),
            "lineWidth": self.line_width,
            "pointRadius": self.point_radius,
            "connectionLineWidth": self.connection_line_width,
            "animationDuration": self.animation_duration_ms,
            "animationCurve": self.animation_curve.to_json(),
            "showConnections": self.show_connections,
            "dateFormat": self.date_format,
            "verticalSpacing": self.vertical_spacing,
            "horizontalPadding": self.horizontal_padding,
            "labelOffset": self.label_offset,
            "timelineYOffset": self.timeline_y_offset,
        }

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "GanttChartStyle":
        base = cls()
        label_raw = first_present(raw, "labelStyle", "font")
        date_raw = first_present(raw, "dateStyle", "xaxis.tickfont")
        desc_raw = raw.get("descriptionStyle")
        curve = raw.get("animationCurve")
        return cls(
            line_color=parse_color(first_present(raw, "lineColor", "line.color"), base.line_color),
            point_color=parse_color(first_present(raw, "pointColor", "marker.color"), base.point_color),
            connection_line_color=parse_color(
                first_present(raw, "connectionLineColor", "connector.line.color"), base.connection_line_color
            ),
            background_color=parse_color(
                first_present(raw, "backgroundColor", "plot_bgcolor", "paper_bgcolor"), base.background_color
            ),
            label_style=TextStyle.from_json(label_raw, TextStyle(size=14.0, bold=True)) if isinstance(label_raw, Mapping) else None,
            date_style=TextStyle.from_json(date_raw, TextStyle(size=10.0)) if isinstance(date_raw, Mapping) else None,
            description_style=TextStyle.from_json(desc_raw, TextStyle()) if isinstance(desc_raw, Mapping) else None,
            line_width=as_float(first_present(raw, "lineWidth", "line.width"), base.line_width),
            point_radius=as_float(first_present(raw, "pointRadius", "marker.size"), base.point_radius),
            connection_line_width=as_float(raw.get("connectionLineWidth"), base.connection_line_width),
            animation_duration_ms=as_int(
                first_present(raw, "animationDuration", "transition.duration"), base.animation_duration_ms
            ),
            animation_curve=(
                curve_from_json(curve, base.animation_curve)
                if curve is not None
                else curve_from_plotly_easing(get_path(raw, "transition.easing"), base.animation_curve)
            ),
            show_connections=as_bool(raw.get("showConnections"), True),
            date_format=str(raw.get("dateFormat") or DEFAULT_DATE_FORMAT),
            vertical_spacing=as_float(raw.get("verticalSpacing"), base.vertical_spacing),
            horizontal_padding=as_float(raw.get("horizontalPadding"), base.horizontal_padding),
            label_offset=as_float(raw.get("labelOffset"), base.label_offset),
            timeline_y_offset=as_float(raw.get("timelineYOffset"), base.timeline_y_offset),
        )


@dataclass(frozen=True)
class GanttChartConfig:
    tasks: Tuple[GanttTask, ...]
    style: GanttChartStyle = field(default_factory=GanttChartStyle)
    width: float = 800.0
    height: float = 600.0
    interactive: bool = True

    def to_json(self) -> Dict[str, Any]:
        return {
            "data": [t.to_json() for t in self.tasks],
            "layout": {
                **self.style.to_json(),
                "width": self.width,
                "height": self.height,
                "interactive": self.interactive,
            },
        }


def _tasks_from_trace(trace: Mapping[str, Any]) -> List[GanttTask]:
    """A timeline trace lists ``(x=date, y=task)`` pairs; each task spans its first to last date."""
    dates: Dict[str, List[datetime]] = {}
    for x, y in zip(trace["x"], trace["y"]):
        dates.setdefault(str(y), []).append(parse_date(x))
    color = parse_color(first_present(trace, "line.color", "marker.color"))
    tasks: List[GanttTask] = []
    for name, points in dates.items():
        if len(points) < 2:
            log.debug("Skipping task %r with a single date", name)
            continue
        points.sort()
        tasks.append(GanttTask(points[0], points[-1], name, color=color))
    return tasks


def _task_records(doc: Any) -> Tuple[List[Any], Mapping[str, Any]]:
    if isinstance(doc, list):
        return doc, {}
    if not isinstance(doc, Mapping):
        raise ChartDataError("Gantt JSON must be a task list or an object")
    layout = first_present(doc, "layout", "style", default={})
    if isinstance(doc.get("tasks"), list):
        return doc["tasks"], layout
    data = doc.get("data")
    if not isinstance(data, list):
        raise ChartDataError("Gantt JSON requires a 'tasks' or 'data' array")
    return data, layout


def parse_gantt_json(source: Any) -> GanttChartConfig:
    doc = load_document(source)
    records, layout = _task_records(doc)
    first = records[0] if records else None
    if isinstance(first, Mapping) and isinstance(first.get("x"), list) and isinstance(first.get("y"), list):
        tasks = _tasks_from_trace(first)
    else:
        tasks = [GanttTask.from_json(r) for r in records if isinstance(r, Mapping)]
    return GanttChartConfig(
        tasks=tuple(tasks),
        style=GanttChartStyle.from_json(layout),
        width=as_float(layout.get("width"), 800.0),
        height=as_float(layout.get("height"), 600.0),
        interactive=as_bool(layout.get("interactive"), True),
    )
