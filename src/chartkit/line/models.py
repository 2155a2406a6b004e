"""Line chart data, style and Plotly parsing."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from config import settings

from ..core.geometry import Padding
from ..core.jsonio import as_float, get_path, load_document, to_number
from ..core.scene import TextStyle
from ..core.tooltip import TooltipStyle
from ..design.colors import BLUE, GREY, WHITE, Color, parse_color
from ..design.easing import CURVES, Curve, curve_from_plotly_easing
from ..errors import ChartConfigError, ChartDataError

__all__ = ["LineChartData", "HoverLineStyle", "LineChartStyle", "LineChartConfig", "parse_line_json"]


@dataclass(frozen=True)
class LineChartData:
    value: float
    label: str


class HoverLineStyle(str, enum.Enum):
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


@dataclass(frozen=True)
class LineChartStyle:
    line_color: Color = BLUE
    grid_color: Color = GREY
    point_color: Color = BLUE
    background_color: Color = WHITE
    label_style: Optional[TextStyle] = None
    stroke_width: float = 2.0
    point_radius: float = 4.0
    animation_duration_ms: int = settings.DEFAULT_ANIMATION_MS
    animation_curve: Curve = CURVES[settings.DEFAULT_CURVE]
    use_curved_lines: bool = False
    curve_intensity: float = 0.3
    rounded_points: bool = True
    show_points: bool = True
    show_grid: bool = True
    grid_lines: int = settings.DEFAULT_GRID_LINES
    padding: Padding = Padding.all(settings.DEFAULT_PADDING)
    hover_line_style: HoverLineStyle = HoverLineStyle.DASHED
    hover_line_color: Color = GREY
    hover_max_distance: float = 24.0
    tooltip_style: TooltipStyle = TooltipStyle()

    def __post_init__(self) -> None:
        if not (0.0 <= self.curve_intensity <= 1.0):
            raise ChartConfigError(f"curve_intensity must be in [0, 1]: {self.curve_intensity}")
        if self.grid_lines < 1:
            raise ChartConfigError("grid_lines must be >= 1")


@dataclass(frozen=True)
class LineChartConfig:
    data: Tuple[LineChartData, ...]
    style: LineChartStyle = field(default_factory=LineChartStyle)
    title: Optional[str] = None


def parse_line_json(source: Any) -> LineChartConfig:
    """Parse the first trace of a Plotly scatter/line figure.

    ``line.shape == "spline"`` turns on curved lines with ``line.smoothing``
    (Plotly's 0..1.3 range, clamped to 1) as the curve intensity.
    """
    doc = load_document(source)
    traces = doc.get("data") if isinstance(doc, Mapping) else None
    if not isinstance(traces, list) or not traces or not isinstance(traces[0], Mapping):
        raise ChartDataError("Line chart JSON requires a 'data' array with at least one trace")
    trace = traces[0]
    xs, ys = trace.get("x"), trace.get("y")
    if not isinstance(ys, list):
        raise ChartDataError("Line trace requires a 'y' array")
    if not isinstance(xs, list):
        xs = [str(i) for i in range(len(ys))]
    points: List[LineChartData] = []
    for i, (x, y) in enumerate(zip(xs, ys)):
        value = to_number(y)
        if value is None:
            raise ChartDataError(f"Invalid y-value at index {i}", context={"index": i, "value": y})
        points.append(LineChartData(value, str(x)))
    layout = doc.get("layout") if isinstance(doc.get("layout"), Mapping) else {}
    base = LineChartStyle()
    line_color = parse_color(get_path(trace, "line.color"), base.line_color)
    smoothing = to_number(get_path(trace, "line.smoothing"))
    style = LineChartStyle(
        line_color=line_color,
        point_color=parse_color(get_path(trace, "marker.color"), line_color),
        grid_color=parse_color(get_path(layout, "xaxis.gridcolor"), base.grid_color),
        background_color=parse_color(layout.get("plot_bgcolor"), base.background_color),
        stroke_width=as_float(get_path(trace, "line.width"), base.stroke_width),
        point_radius=as_float(get_path(trace, "marker.size"), base.point_radius),
        use_curved_lines=get_path(trace, "line.shape") == "spline",
        curve_intensity=min(1.0, max(0.0, smoothing)) if smoothing is not None else base.curve_intensity,
        show_points="markers" in str(trace.get("mode", "lines+markers")),
        animation_duration_ms=int(as_float(get_path(layout, "transition.duration"), base.animation_duration_ms)),
        animation_curve=curve_from_plotly_easing(get_path(layout, "transition.easing"), base.animation_curve),
    )
    title = layout.get("title")
    if isinstance(title, Mapping):
        title = title.get("text")
    return LineChartConfig(data=tuple(points), style=style, title=None if title is None else str(title))
