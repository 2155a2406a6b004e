"""Area chart series, tooltip config, style and Plotly parsing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from config import settings

from ..core.geometry import Padding
from ..core.jsonio import get_path, load_document, to_number
from ..core.scene import TextStyle
from ..design.colors import BLUE, GREEN, GREY, RED, WHITE, Color, parse_color
from ..design.easing import CURVES, Curve
from ..errors import ChartConfigError, ChartDataError

__all__ = [
    "AreaPoint",
    "TooltipConfig",
    "AreaSeries",
    "AreaChartStyle",
    "AreaChartConfig",
    "parse_area_json",
    "plotly_title",
]

log = logging.getLogger(__name__)

_FILL_MODES = {"tozeroy", "tonexty", "toself"}


@dataclass(frozen=True)
class TooltipConfig:
    text: Optional[str] = None
    text_style: TextStyle = TextStyle(color=Color(0, 0, 0, 222), size=12.0)
    background_color: Color = WHITE
    border_radius: float = 4.0
    padding: float = 8.0
    hover_radius: float = 10.0
    enabled: bool = True


@dataclass(frozen=True)
class AreaPoint:
    value: float
    label: Optional[str] = None
    tooltip: Optional[TooltipConfig] = None


@dataclass(frozen=True)
class AreaSeries:
    name: str
    points: Tuple[AreaPoint, ...]
    color: Optional[Color] = None
    gradient_color: Optional[Color] = None
    line_width: Optional[float] = None
    show_points: Optional[bool] = None
    point_size: Optional[float] = None
    tooltip: Optional[TooltipConfig] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))

    @classmethod
    def from_plotly_trace(cls, trace: Mapping[str, Any], *, default_name: str = "Series") -> "AreaSeries":
        xs = trace.get("x") if isinstance(trace.get("x"), list) else []
        ys = trace.get("y") if isinstance(trace.get("y"), list) else []
        count = min(len(xs), len(ys)) if xs else len(ys)
        points: List[AreaPoint] = []
        for i in range(count):
            value = to_number(ys[i])
            if value is None:
                raise ChartDataError(f"Invalid y-value at index {i}", context={"index": i, "value": ys[i]})
            label = str(xs[i]) if xs and xs[i] is not None else None
            points.append(AreaPoint(value, label))
        line_color = parse_color(get_path(trace, "line.color"))
        width = to_number(get_path(trace, "line.width"))
        marker = trace.get("marker")
        point_size = to_number(marker.get("size")) if isinstance(marker, Mapping) else None
        gradient: Optional[Color] = None
        if str(trace.get("fill")) in _FILL_MODES and line_color is not None:
            gradient = line_color.with_alpha(0.2)
        fill_color = parse_color(trace.get("fillcolor"))
        if fill_color is not None:
            gradient = fill_color
        return cls(
            name=str(trace.get("name") or default_name),
            points=tuple(points),
            color=line_color,
            gradient_color=gradient,
            line_width=width,
            show_points=True if isinstance(marker, Mapping) else None,
            point_size=point_size,
        )


@dataclass(frozen=True)
class AreaChartStyle:
    colors: Tuple[Color, ...] = (BLUE, GREEN, RED)
    grid_color: Color = GREY
    background_color: Color = WHITE
    label_style: Optional[TextStyle] = None
    line_width: float = 2.0
    point_size: float = 4.0
    show_points: bool = True
    show_grid: bool = True
    animation_duration_ms: int = settings.DEFAULT_ANIMATION_MS
    animation_curve: Curve = CURVES[settings.DEFAULT_CURVE]
    padding: Padding = Padding.all(settings.DEFAULT_PADDING)
    grid_lines: int = settings.DEFAULT_GRID_LINES
    force_y_axis_from_zero: bool = True
    title: Optional[str] = None
    x_axis_title: Optional[str] = None
    y_axis_title: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.colors:
            raise ChartConfigError("colors must not be empty")
        if self.grid_lines < 1:
            raise ChartConfigError("grid_lines must be >= 1")

    def color_for(self, index: int, series: AreaSeries) -> Color:
        return series.color or self.colors[index % len(self.colors)]

    @classmethod
    def from_plotly_layout(cls, layout: Mapping[str, Any]) -> "AreaChartStyle":
        base = cls()
        return cls(
            title=plotly_title(layout.get("title")),
            x_axis_title=plotly_title(get_path(layout, "xaxis.title")),
            y_axis_title=plotly_title(get_path(layout, "yaxis.title")),
            background_color=parse_color(layout.get("plot_bgcolor"), base.background_color),
            grid_color=parse_color(get_path(layout, "xaxis.gridcolor"), base.grid_color),
        )


@dataclass(frozen=True)
class AreaChartConfig:
    series: Tuple[AreaSeries, ...]
    style: AreaChartStyle = field(default_factory=AreaChartStyle)


def plotly_title(raw: Any) -> Optional[str]:
    """Plotly titles are either plain strings or ``{"text": ...}`` objects."""
    if isinstance(raw, Mapping):
        raw = raw.get("text")
    return None if raw is None else str(raw)


def _is_area_trace(trace: Mapping[str, Any]) -> bool:
    kind = trace.get("type")
    return (kind == "scatter" and trace.get("fill") is not None) or kind == "area" or kind is None


def parse_area_json(source: Any) -> AreaChartConfig:
    """Parse a Plotly figure into area series.

    Only filled scatter traces, ``area`` traces and untyped traces are kept;
    everything else is skipped (and logged).
    """
    doc = load_document(source)
    if not isinstance(doc, Mapping):
        raise ChartDataError("Area chart JSON must be an object with a 'data' array")
    traces = doc.get("data")
    if not isinstance(traces, list):
        raise ChartDataError("Area chart JSON requires a 'data' array")
    layout = doc.get("layout")
    series: List[AreaSeries] = []
    for i, trace in enumerate(traces):
        if not isinstance(trace, Mapping) or not _is_area_trace(trace):
            log.debug("Skipping non-area trace %d", i)
            continue
        series.append(AreaSeries.from_plotly_trace(trace, default_name=f"Series {len(series) + 1}"))
    style = AreaChartStyle.from_plotly_layout(layout) if isinstance(layout, Mapping) and layout else AreaChartStyle()
    return AreaChartConfig(series=tuple(series), style=style)
