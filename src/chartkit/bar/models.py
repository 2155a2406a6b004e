"""Bar chart data, style and Plotly-format parsing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from config import settings

from ..core.geometry import Padding
from ..core.jsonio import as_bool, as_float, as_int, as_list, first_present, get_path, load_document, to_number
from ..core.scene import TextStyle
from ..design.colors import BLUE, GREY, WHITE, Color, parse_color
from ..design.easing import CURVES, Curve, curve_from_json, curve_from_plotly_easing
from ..errors import ChartConfigError, ChartDataError

__all__ = ["BarChartData", "BarChartStyle", "BarChartConfig", "parse_bar_json"]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BarChartData:
    value: float
    label: str
    color: Optional[Color] = None

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"x": self.label, "y": self.value}
        if self.color is not None:
            out["color"] = self.color.to_hex()
        return out

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "BarChartData":
        return cls(
            value=as_float(first_present(raw, "y", "value"), 0.0),
            label=str(first_present(raw, "x", "label", default="")),
            color=parse_color(first_present(raw, "color", "marker.color")),
        )


@dataclass(frozen=True)
class BarChartStyle:
    bar_color: Color = BLUE
    grid_color: Color = GREY
    background_color: Color = WHITE
    label_style: Optional[TextStyle] = None
    value_style: Optional[TextStyle] = None
    bar_spacing: float = 0.2
    corner_radius: float = 4.0
    animation_duration_ms: int = settings.DEFAULT_ANIMATION_MS
    animation_curve: Curve = CURVES[settings.DEFAULT_CURVE]
    gradient_effect: bool = False
    gradient_colors: Optional[Tuple[Color, ...]] = None
    padding: Padding = Padding.all(settings.DEFAULT_PADDING)
    horizontal_grid_lines: int = settings.DEFAULT_GRID_LINES
    show_grid: bool = True
    show_values: bool = True
    show_labels: bool = True

    def __post_init__(self) -> None:
        if not (0.0 <= self.bar_spacing < 1.0):
            raise ChartConfigError(f"bar_spacing must be in [0, 1): {self.bar_spacing}")
        if self.horizontal_grid_lines < 1:
            raise ChartConfigError("horizontal_grid_lines must be >= 1")

    @property
    def uses_gradient(self) -> bool:
        return self.gradient_effect and self.gradient_colors is not None and len(self.gradient_colors) >= 2

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "barColor": self.bar_color.to_hex(),
            "gridColor": self.grid_color.to_hex(),
            "backgroundColor": self.background_color.to_hex(),
            "barSpacing": self.bar_spacing,
            "cornerRadius": self.corner_radius,
            "animationDuration": self.animation_duration_ms,
            "animationCurve": self.animation_curve.to_json(),
            "gradientEffect": self.gradient_effect,
            "padding": self.padding.to_json(),
            "horizontalGridLines": self.horizontal_grid_lines,
            "showGrid": self.show_grid,
            "showValues": self.show_values,
            "showLabels": self.show_labels,
        }
        if self.gradient_colors is not None:
            out["gradientColors"] = [c.to_hex() for c in self.gradient_colors]
        if self.label_style is not None:
            out["labelStyle"] = self.label_style.to_json()
        if self.value_style is not None:
            out["valueStyle"] = self.value_style.to_json()
        return out

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "BarChartStyle":
        """Read native keys first, then their Plotly layout/marker equivalents."""
        base = cls()
        colorscale = [c for c in (parse_color(v) for v in as_list(first_present(raw, "colorscale", "marker.colorscale"))) if c]
        gradient_raw = raw.get("gradientColors")
        gradient: Optional[Tuple[Color, ...]] = None
        if isinstance(gradient_raw, list):
            gradient = tuple(parse_color(c, base.bar_color) for c in gradient_raw)
        elif colorscale:
            gradient = tuple(colorscale)
        marker_color = get_path(raw, "marker.color")
        bar_color = parse_color(raw.get("barColor"))
        if bar_color is None and isinstance(marker_color, str):
            bar_color = parse_color(marker_color)
        if bar_color is None and colorscale:
            bar_color = colorscale[0]
        label_raw = first_present(raw, "labelStyle", "xaxis.tickfont")
        value_raw = first_present(raw, "valueStyle", "font", "textfont")
        curve = raw.get("animationCurve", get_path(raw, "animation.curve"))
        return cls(
            bar_color=bar_color or base.bar_color,
            grid_color=parse_color(first_present(raw, "gridColor", "xaxis.gridcolor", "yaxis.gridcolor"), base.grid_color),
            background_color=parse_color(
                first_present(raw, "backgroundColor", "plot_bgcolor", "paper_bgcolor"), base.background_color
            ),
            label_style=TextStyle.from_json(label_raw, TextStyle()) if isinstance(label_raw, Mapping) else None,
            value_style=TextStyle.from_json(value_raw, TextStyle(bold=True)) if isinstance(value_raw, Mapping) else None,
            bar_spacing=min(0.95, max(0.0, as_float(first_present(raw, "barSpacing", "bargap"), base.bar_spacing))),
            corner_radius=as_float(first_present(raw, "cornerRadius", "marker.cornerradius"), base.corner_radius),
            animation_duration_ms=as_int(
                first_present(raw, "animationDuration", "animation.duration", "transition.duration"),
                base.animation_duration_ms,
            ),
            animation_curve=(
                curve_from_json(curve, base.animation_curve)
                if curve is not None
                else curve_from_plotly_easing(get_path(raw, "transition.easing"), base.animation_curve)
            ),
            gradient_effect=as_bool(raw.get("gradientEffect"), gradient is not None),
            gradient_colors=gradient,
            padding=Padding.from_json(first_present(raw, "padding", "margin"), base.padding),
            horizontal_grid_lines=max(1, as_int(first_present(raw, "horizontalGridLines", "yaxis.nticks"), 5)),
            show_grid=as_bool(first_present(raw, "showGrid", "yaxis.showgrid", "xaxis.showgrid"), True),
            show_values=as_bool(raw.get("showValues"), True),
            show_labels=as_bool(raw.get("showLabels"), True),
        )


@dataclass(frozen=True)
class BarChartConfig:
    """A parsed bar chart document: data, style and the requested canvas size."""

    data: Tuple[BarChartData, ...]
    style: BarChartStyle = field(default_factory=BarChartStyle)
    width: float = 800.0
    height: float = 400.0

    def to_json(self) -> Dict[str, Any]:
        return {
            "data": [d.to_json() for d in self.data],
            "style": {**self.style.to_json(), "width": self.width, "height": self.height},
        }


def _points_from_trace(trace: Mapping[str, Any]) -> List[BarChartData]:
    xs = trace.get("x")
    ys = trace.get("y")
    if not isinstance(xs, list) or not isinstance(ys, list):
        raise ChartDataError("Bar trace requires 'x' and 'y' arrays")
    if len(xs) != len(ys):
        log.warning("Bar trace x/y length mismatch (%d vs %d); truncating", len(xs), len(ys))
    colors = get_path(trace, "marker.color")
    out: List[BarChartData] = []
    for i, (x, y) in enumerate(zip(xs, ys)):
        value = to_number(y)
        if value is None:
            raise ChartDataError(f"Bar value at index {i} is not numeric: {y!r}", context={"index": i})
        color = parse_color(colors[i]) if isinstance(colors, list) and i < len(colors) else None
        out.append(BarChartData(value=value, label=str(x), color=color))
    return out


def parse_bar_json(source: Any) -> BarChartConfig:
    """Parse ``{"data": [...], "layout"|"style": {...}}`` into a :class:`BarChartConfig`.

    ``data`` is either one Plotly trace with ``x``/``y`` arrays or a list of
    ``{"x"|"label", "y"|"value", "color"}`` records.
    """
    doc = load_document(source)
    if not isinstance(doc, Mapping):
        raise ChartDataError("Bar chart JSON must be an object with a 'data' array")
    data = doc.get("data")
    if not isinstance(data, list):
        raise ChartDataError("Bar chart JSON requires a 'data' array")
    style_raw: Dict[str, Any] = dict(first_present(doc, "style", "layout", default={}))
    points: List[BarChartData] = []
    # A trace carries x and/or y as arrays; records carry scalars
    if data and isinstance(data[0], Mapping) and any(isinstance(data[0].get(k), list) for k in ("x", "y")):
        trace = data[0]
        points = _points_from_trace(trace)
        marker = trace.get("marker")
        if isinstance(marker, Mapping):
            style_raw.setdefault("marker", marker)
    else:
        points = [BarChartData.from_json(item) for item in data if isinstance(item, Mapping)]
    return BarChartConfig(
        data=tuple(points),
        style=BarChartStyle.from_json(style_raw),
        width=as_float(style_raw.get("width"), 800.0),
        height=as_float(style_raw.get("height"), 400.0),
    )
