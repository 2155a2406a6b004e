"""Pie/donut chart data, style and Plotly-format parsing."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from config import settings

from ..core.geometry import Padding
from ..core.jsonio import as_bool, as_float, as_int, as_list, first_present, get_path, load_document, to_number
from ..core.scene import TextStyle
from ..design.colors import BLUE, GREEN, ORANGE, PURPLE, RED, WHITE, YELLOW, Color, parse_color
from ..design.easing import CURVES, Curve, curve_from_json
from ..errors import ChartConfigError, ChartDataError

__all__ = [
    "PieChartData",
    "PieChartStyle",
    "PieChartConfig",
    "LabelPosition",
    "LegendPosition",
    "ChartAlignment",
    "DEFAULT_PIE_COLORS",
    "parse_pie_json",
]

log = logging.getLogger(__name__)

DEFAULT_PIE_COLORS: Tuple[Color, ...] = (BLUE, RED, GREEN, YELLOW, PURPLE, ORANGE)


class LabelPosition(str, enum.Enum):
    INSIDE = "inside"
    OUTSIDE = "outside"


class LegendPosition(str, enum.Enum):
    RIGHT = "right"
    BOTTOM = "bottom"


class ChartAlignment(enum.Enum):
    """3x3 placement grid as ``(vertical, horizontal)``."""

    TOP_LEFT = ("top", "left")
    TOP_CENTER = ("top", "center")
    TOP_RIGHT = ("top", "right")
    CENTER_LEFT = ("center", "left")
    CENTER = ("center", "center")
    CENTER_RIGHT = ("center", "right")
    BOTTOM_LEFT = ("bottom", "left")
    BOTTOM_CENTER = ("bottom", "center")
    BOTTOM_RIGHT = ("bottom", "right")

    @property
    def vertical(self) -> str:
        return self.value[0]

    @property
    def horizontal(self) -> str:
        return self.value[1]

    def to_json(self) -> str:
        # topLeft, center, bottomRight ...
        head, _, tail = self.name.lower().partition("_")
        return head + tail.capitalize()

    @classmethod
    def from_json(cls, raw: Any) -> "ChartAlignment":
        if isinstance(raw, str):
            key = raw.strip().lower().replace("_", "")
            for member in cls:
                if member.name.lower().replace("_", "") == key:
                    return member
        return cls.CENTER


@dataclass(frozen=True)
class PieChartData:
    value: float
    label: str
    color: Optional[Color] = None

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"value": self.value, "label": self.label}
        if self.color is not None:
            out["color"] = self.color.to_hex()
        return out

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "PieChartData":
        return cls(
            value=as_float(first_present(raw, "value", "y"), 0.0),
            label=str(first_present(raw, "label", "x", default="")),
            color=parse_color(raw.get("color")),
        )


@dataclass(frozen=True)
class PieChartStyle:
    default_colors: Tuple[Color, ...] = DEFAULT_PIE_COLORS
    background_color: Color = WHITE
    label_style: Optional[TextStyle] = None
    value_style: Optional[TextStyle] = None
    start_angle: float = -90.0  # degrees, clockwise from 3 o'clock
    hole_radius: float = 0.0  # fraction of the outer radius
    animation_duration_ms: int = settings.DEFAULT_ANIMATION_MS
    animation_curve: Curve = CURVES[settings.DEFAULT_CURVE]
    show_labels: bool = True
    show_values: bool = True
    label_offset: float = 20.0
    show_legend: bool = True
    label_position: LabelPosition = LabelPosition.OUTSIDE
    show_connector_lines: bool = True
    connector_line_color: Color = Color(0, 0, 0, 138)
    connector_line_width: float = 1.0
    chart_alignment: ChartAlignment = ChartAlignment.CENTER
    legend_position: LegendPosition = LegendPosition.RIGHT
    padding: Padding = Padding.all(settings.DEFAULT_PADDING)
    chart_radius: Optional[float] = None
    min_size_percent: float = 0.0
    show_label_only_on_hover: bool = False
    hover_scale: float = 1.05

    def __post_init__(self) -> None:
        if not self.default_colors:
            raise ChartConfigError("default_colors must not be empty")
        if not (0.0 <= self.hole_radius < 1.0):
            raise ChartConfigError(f"hole_radius must be in [0, 1): {self.hole_radius}")
        if not (0.0 <= self.min_size_percent <= 100.0):
            raise ChartConfigError(f"min_size_percent must be in [0, 100]: {self.min_size_percent}")
        if self.chart_radius is not None and self.chart_radius <= 0:
            raise ChartConfigError("chart_radius must be > 0")

    def color_for(self, index: int, point: PieChartData) -> Color:
        return point.color or self.default_colors[index % len(self.default_colors)]

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "defaultColors": [c.to_hex() for c in self.default_colors],
            "backgroundColor": self.background_color.to_hex(),
            "startAngle": self.start_angle,
            "holeRadius": self.hole_radius,
            "animationDuration": self.animation_duration_ms,
            "animationCurve": self.animation_curve.to_json(),
            "showLabels": self.show_labels,
            "showValues": self.show_values,
            "labelOffset": self.label_offset,
            "showLegend": self.show_legend,
            "labelPosition": self.label_position.value,
            "showConnectorLines": self.show_connector_lines,
            "connectorLineColor": self.connector_line_color.to_hex(),
            "connectorLineStrokeWidth": self.connector_line_width,
            "chartAlignment": self.chart_alignment.to_json(),
            "legendPosition": self.legend_position.value,
            "padding": self.padding.to_json(),
            "minSizePercent": self.min_size_percent,
            "showLabelOnlyOnHover": self.show_label_only_on_hover,
            "hoverScale": self.hover_scale,
        }
        if self.chart_radius is not None:
            out["chartRadius"] = self.chart_radius
        if self.label_style is not None:
            out["labelStyle"] = self.label_style.to_json()
        if self.value_style is not None:
            out["valueStyle"] = self.value_style.to_json()
        return out

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "PieChartStyle":
        """Read native keys, then the Plotly trace keys merged in by :func:`parse_pie_json`."""
        base = cls()
        colors = [c for c in (parse_color(v) for v in as_list(raw.get("defaultColors"))) if c]
        textinfo = raw.get("textinfo")
        show_labels = as_bool(raw.get("showLabels"), base.show_labels)
        show_values = as_bool(raw.get("showValues"), base.show_values)
        if isinstance(textinfo, str) and "showLabels" not in raw:
            parts = set(textinfo.split("+"))
            show_labels = "label" in parts
            show_values = bool(parts & {"percent", "value"})
        position_raw = first_present(raw, "labelPosition", "textposition", default="outside")
        label_position = (
            LabelPosition.INSIDE if str(position_raw).lower() in {"inside", "auto"} else LabelPosition.OUTSIDE
        )
        start_angle = to_number(raw.get("startAngle"))
        if start_angle is None:
            rotation = to_number(raw.get("rotation"))
            # Plotly rotation 0 starts at 12 o'clock
            start_angle = rotation - 90.0 if rotation is not None else base.start_angle
        legend_raw = str(first_present(raw, "legendPosition", "legend.orientation", default="right")).lower()
        chart_radius = to_number(raw.get("chartRadius"))
        label_raw = raw.get("labelStyle")
        value_raw = raw.get("valueStyle")
        return cls(
            default_colors=tuple(colors) or base.default_colors,
            background_color=parse_color(
                first_present(raw, "backgroundColor", "plot_bgcolor", "paper_bgcolor"), base.background_color
            ),
            label_style=TextStyle.from_json(label_raw, TextStyle()) if isinstance(label_raw, Mapping) else None,
            value_style=TextStyle.from_json(value_raw, TextStyle(bold=True)) if isinstance(value_raw, Mapping) else None,
            start_angle=start_angle,
            hole_radius=min(0.95, max(0.0, as_float(first_present(raw, "holeRadius", "hole"), base.hole_radius))),
            animation_duration_ms=as_int(
                first_present(raw, "animationDuration", "animation.duration", "transition.duration"),
                base.animation_duration_ms,
            ),
            animation_curve=curve_from_json(
                first_present(raw, "animationCurve", "animation.curve"), base.animation_curve
            ),
            show_labels=show_labels,
            show_values=show_values,
            label_offset=as_float(raw.get("labelOffset"), base.label_offset),
            show_legend=as_bool(first_present(raw, "showLegend", "showlegend"), base.show_legend),
            label_position=label_position,
            show_connector_lines=as_bool(raw.get("showConnectorLines"), base.show_connector_lines),
            connector_line_color=parse_color(raw.get("connectorLineColor"), base.connector_line_color),
            connector_line_width=as_float(raw.get("connectorLineStrokeWidth"), base.connector_line_width),
            chart_alignment=ChartAlignment.from_json(raw.get("chartAlignment")),
            legend_position=LegendPosition.BOTTOM if legend_raw in {"bottom", "h"} else LegendPosition.RIGHT,
            padding=Padding.from_json(first_present(raw, "padding", "margin"), base.padding),
            chart_radius=chart_radius if chart_radius is not None and chart_radius > 0 else None,
            min_size_percent=min(100.0, max(0.0, as_float(raw.get("minSizePercent"), 0.0))),
            show_label_only_on_hover=as_bool(raw.get("showLabelOnlyOnHover"), False),
            hover_scale=as_float(raw.get("hoverScale"), base.hover_scale),
        )


@dataclass(frozen=True)
class PieChartConfig:
    data: Tuple[PieChartData, ...]
    style: PieChartStyle = field(default_factory=PieChartStyle)
    width: float = 600.0
    height: float = 400.0

    def to_json(self) -> Dict[str, Any]:
        return {
            "data": [d.to_json() for d in self.data],
            "layout": {**self.style.to_json(), "width": self.width, "height": self.height},
        }


_TRACE_STYLE_KEYS = ("textinfo", "textposition", "rotation", "hole")


def parse_pie_json(source: Any) -> PieChartConfig:
    """Parse a Plotly pie figure (``values``/``labels`` trace) or a record list.

    Trace-level keys (textinfo, textposition, rotation, hole) are merged
    into the layout before the style is read.
    """
    doc = load_document(source)
    if not isinstance(doc, Mapping):
        raise ChartDataError("Pie chart JSON must be an object with a 'data' array")
    data = doc.get("data")
    if not isinstance(data, list):
        raise ChartDataError("Pie chart JSON requires a 'data' array")
    layout: Dict[str, Any] = dict(first_present(doc, "layout", "style", default={}))
    points: List[PieChartData] = []
    first = data[0] if data else None
    if isinstance(first, Mapping) and ("values" in first or "labels" in first):
        values, labels = first.get("values"), first.get("labels")
        if not isinstance(values, list) or not isinstance(labels, list):
            raise ChartDataError("Pie trace requires 'values' and 'labels' arrays")
        if len(values) != len(labels):
            log.warning("Pie trace values/labels length mismatch (%d vs %d); truncating", len(values), len(labels))
        colors = get_path(first, "marker.colors")
        for key in _TRACE_STYLE_KEYS:
            if key in first and key not in layout:
                layout[key] = first[key]
        for i, (value, label) in enumerate(zip(values, labels)):
            n = to_number(value)
            if n is None:
                raise ChartDataError(f"Pie value at index {i} is not numeric: {value!r}", context={"index": i})
            color = parse_color(colors[i]) if isinstance(colors, list) and i < len(colors) else None
            points.append(PieChartData(value=n, label=str(label), color=color))
    else:
        points = [PieChartData.from_json(item) for item in data if isinstance(item, Mapping)]
    return PieChartConfig(
        data=tuple(points),
        style=PieChartStyle.from_json(layout),
        width=as_float(layout.get("width"), 600.0),
        height=as_float(layout.get("height"), 400.0),
    )
