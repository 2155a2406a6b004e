"""Multi-series line chart models and Plotly parsing."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from config import settings

from ..core.geometry import Padding
from ..core.jsonio import as_bool, get_path, load_document, to_number
from ..core.scene import TextStyle
from ..core.tooltip import TooltipStyle
from ..design.colors import BLACK, BLUE, GREEN, GREY, ORANGE, PURPLE, RED, WHITE, Color, parse_color
from ..design.easing import CURVES, Curve, curve_from_plotly_easing
from ..errors import ChartConfigError, ChartDataError

__all__ = [
    "MultiLinePoint",
    "ChartSeries",
    "LegendPosition",
    "CrosshairConfig",
    "MultiLineChartStyle",
    "MultiLineChartConfig",
    "parse_multi_line_json",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MultiLinePoint:
    value: float
    label: Optional[str] = None


@dataclass(frozen=True)
class ChartSeries:
    name: str
    points: Tuple[MultiLinePoint, ...]
    color: Optional[Color] = None
    line_width: Optional[float] = None
    point_size: Optional[float] = None
    show_points: Optional[bool] = None
    smooth_line: Optional[bool] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))


class LegendPosition(str, enum.Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def horizontal(self) -> bool:
        return self in (LegendPosition.TOP, LegendPosition.BOTTOM)


@dataclass(frozen=True)
class CrosshairConfig:
    line_color: Color = GREY
    line_width: float = 1.0
    enabled: bool = True
    show_label: bool = True
    label_style: Optional[TextStyle] = None


@dataclass(frozen=True)
class MultiLineChartStyle:
    colors: Tuple[Color, ...] = (BLUE, RED, GREEN, ORANGE, PURPLE)
    line_width: float = 2.0
    point_size: float = 4.0
    grid_color: Color = GREY
    background_color: Color = WHITE
    label_style: Optional[TextStyle] = None
    legend_style: Optional[TextStyle] = None
    smooth_lines: bool = False
    padding: Padding = Padding.all(settings.DEFAULT_PADDING)
    show_points: bool = True
    show_grid: bool = True
    show_legend: bool = True
    grid_lines: int = settings.DEFAULT_GRID_LINES
    legend_position: LegendPosition = LegendPosition.BOTTOM
    crosshair: Optional[CrosshairConfig] = CrosshairConfig()
    force_y_axis_from_zero: bool = False
    tooltip_threshold: float = 20.0
    tooltip_style: TooltipStyle = TooltipStyle(
        background_color=BLACK.with_alpha(0.8), border_color=BLACK, border_radius=4.0,
        text_style=TextStyle(color=WHITE, size=12.0),
    )
    animation_duration_ms: int = settings.DEFAULT_ANIMATION_MS
    animation_curve: Curve = CURVES[settings.DEFAULT_CURVE]

    def __post_init__(self) -> None:
        if not self.colors:
            raise ChartConfigError("colors must not be empty")
        if self.grid_lines < 1:
            raise ChartConfigError("grid_lines must be >= 1")

    def color_for(self, index: int, series: ChartSeries) -> Color:
        return series.color or self.colors[index % len(self.colors)]


@dataclass(frozen=True)
class MultiLineChartConfig:
    series: Tuple[ChartSeries, ...]
    style: MultiLineChartStyle = field(default_factory=MultiLineChartStyle)


def _series_from_trace(trace: Mapping[str, Any], index: int) -> ChartSeries:
    ys = trace.get("y")
    if not isinstance(ys, list):
        raise ChartDataError(f"Trace {index} requires a 'y' array", context={"trace": index})
    xs = trace.get("x") if isinstance(trace.get("x"), list) else None
    points: List[MultiLinePoint] = []
    for i, y in enumerate(ys if xs is None else ys[: len(xs)]):
        value = to_number(y)
        if value is None:
            raise ChartDataError(f"Invalid y-value at index {i}", context={"trace": index, "index": i})
        points.append(MultiLinePoint(value, None if xs is None else str(xs[i])))
    mode = trace.get("mode")
    return ChartSeries(
        name=str(trace.get("name") or f"Series {index + 1}"),
        points=tuple(points),
        color=parse_color(get_path(trace, "line.color")),
        line_width=to_number(get_path(trace, "line.width")),
        point_size=to_number(get_path(trace, "marker.size")),
        show_points=None if mode is None else "markers" in str(mode),
        smooth_line=True if get_path(trace, "line.shape") == "spline" else None,
    )


def parse_multi_line_json(source: Any) -> MultiLineChartConfig:
    """Every scatter (or untyped) trace of a Plotly figure becomes a series."""
    doc = load_document(source)
    traces = doc.get("data") if isinstance(doc, Mapping) else None
    if not isinstance(traces, list):
        raise ChartDataError("Multi-line chart JSON requires a 'data' array")
    series: List[ChartSeries] = []
    for i, trace in enumerate(traces):
        if not isinstance(trace, Mapping) or trace.get("type", "scatter") != "scatter":
            log.debug("Skipping non-scatter trace %d", i)
            continue
        series.append(_series_from_trace(trace, len(series)))
    layout = doc.get("layout") if isinstance(doc.get("layout"), Mapping) else {}
    base = MultiLineChartStyle()
    orientation = get_path(layout, "legend.orientation")
    style = MultiLineChartStyle(
        background_color=parse_color(layout.get("plot_bgcolor"), base.background_color),
        grid_color=parse_color(get_path(layout, "xaxis.gridcolor"), base.grid_color),
        show_legend=as_bool(layout.get("showlegend"), base.show_legend),
        legend_position=LegendPosition.BOTTOM if orientation == "h" else (
            LegendPosition.RIGHT if orientation == "v" else base.legend_position
        ),
        force_y_axis_from_zero=get_path(layout, "yaxis.rangemode") == "tozero",
        animation_curve=curve_from_plotly_easing(get_path(layout, "transition.easing"), base.animation_curve),
    )
    return MultiLineChartConfig(series=tuple(series), style=style)
