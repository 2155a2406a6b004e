"""Stacked bar chart models and JSON conversion.

Two document shapes are accepted and told apart before any field is read:

``plotly``
    ``{"data": [trace, ...], "layout": {...}}`` where every trace has ``x``
    (categories) and ``y`` (values). Values sharing a category are stacked
    in trace order; a per-point ``customdata`` entry labels the segment,
    falling back to the trace ``name``. ``xaxis.tickvals``/``ticktext``
    map category keys to the bar labels shown.
``simple``
    ``{"bars": [...]}`` (or ``{"data": [...]}`` / a bare list) of
    ``{"label": ..., "segments": [{"value", "color", "label"}, ...]}``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from config import settings

from ..core.geometry import Padding
from ..core.jsonio import as_bool, as_float, as_int, first_present, get_path, load_document, to_number
from ..core.scene import TextStyle
from ..design.colors import BLUE, GREY, WHITE, Color, parse_color
from ..design.easing import CURVES, Curve, curve_from_plotly_easing
from ..errors import ChartConfigError, ChartDataError

__all__ = [
    "StackedBarSegment",
    "StackedBarData",
    "YAxisConfig",
    "StackedBarChartStyle",
    "StackedBarChartConfig",
    "detect_format",
    "parse_stacked_bar_json",
    "to_plotly_json",
]

log = logging.getLogger(__name__)

PLOTLY_DEFAULT_COLOR = Color(0x1F, 0x77, 0xB4)

LabelFormatter = Callable[[float], str]


@dataclass(frozen=True)
class StackedBarSegment:
    value: float
    color: Color = BLUE
    label: Optional[str] = None

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ChartDataError(f"Stacked segment value must be non-negative: {self.value}", context={"value": self.value})

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"value": self.value, "color": self.color.to_hex()}
        if self.label is not None:
            out["label"] = self.label
        return out

    @classmethod
    def from_json(cls, raw: Mapping[str, Any], default_color: Color = PLOTLY_DEFAULT_COLOR) -> "StackedBarSegment":
        value = to_number(first_present(raw, "value", "y", default=0.0))
        if value is None:
            raise ChartDataError("Segment value is not numeric", context={"value": raw.get("value")})
        label = first_present(raw, "label", "name")
        return cls(
            value=value,
            color=parse_color(first_present(raw, "color", "marker.color"), default_color),
            label=None if label is None else str(label),
        )


@dataclass(frozen=True)
class StackedBarData:
    label: str
    segments: Tuple[StackedBarSegment, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "segments", tuple(self.segments))

    @property
    def total(self) -> float:
        return sum(s.value for s in self.segments)

    def to_json(self) -> Dict[str, Any]:
        return {"label": self.label, "segments": [s.to_json() for s in self.segments]}


def _tick_formatter(tickformat: Any) -> Optional[LabelFormatter]:
    if not isinstance(tickformat, str):
        return None
    digits = 1 if "." in tickformat else 0
    return lambda value: f"{value:.{digits}f}"


def _divisions(raw: Mapping[str, Any], lo: Optional[float], hi: Optional[float], default: int = 5) -> int:
    """``nticks`` counts divisions; ``dtick`` is a step and needs a closed range."""
    nticks = to_number(raw.get("nticks"))
    if nticks is not None:
        return max(1, int(nticks))
    step = to_number(raw.get("dtick"))
    if step is not None and step > 0 and lo is not None and hi is not None and hi > lo:
        return max(1, round((hi - lo) / step))
    return default


@dataclass(frozen=True)
class YAxisConfig:
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    divisions: int = 5
    show_axis_line: bool = True
    show_grid_lines: bool = True
    label_style: Optional[TextStyle] = None
    axis_width: float = 50.0
    label_formatter: Optional[LabelFormatter] = None

    def __post_init__(self) -> None:
        if self.divisions < 1:
            raise ChartConfigError("divisions must be >= 1")

    def format(self, value: float) -> str:
        if self.label_formatter is not None:
            return self.label_formatter(value)
        return f"{value:.1f}"

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "nticks": self.divisions,
            "showline": self.show_axis_line,
            "showgrid": self.show_grid_lines,
            "tickwidth": self.axis_width,
        }
        if self.min_value is not None or self.max_value is not None:
            # null marks an open side of the range
            out["range"] = [self.min_value, self.max_value]
        if self.label_style is not None:
            out["tickfont"] = self.label_style.to_json()
        return out

    @classmethod
    def from_json(cls, raw: Any) -> "YAxisConfig":
        if not isinstance(raw, Mapping):
            return cls()
        rng = raw.get("range")
        lo = hi = None
        if isinstance(rng, list) and len(rng) == 2:
            lo, hi = to_number(rng[0]), to_number(rng[1])
        font = raw.get("tickfont")
        return cls(
            min_value=lo,
            max_value=hi,
            divisions=_divisions(raw, lo, hi),
            show_axis_line=as_bool(raw.get("showline"), True),
            show_grid_lines=as_bool(raw.get("showgrid"), True),
            label_style=TextStyle.from_json(font, TextStyle()) if isinstance(font, Mapping) else None,
            axis_width=as_float(raw.get("tickwidth"), 50.0),
            label_formatter=_tick_formatter(raw.get("tickformat")),
        )


@dataclass(frozen=True)
class StackedBarChartStyle:
    grid_color: Color = GREY
    background_color: Color = WHITE
    label_style: Optional[TextStyle] = None
    value_style: Optional[TextStyle] = None
    bar_spacing: float = 0.2
    corner_radius: float = 4.0
    animation_duration_ms: int = settings.DEFAULT_ANIMATION_MS
    animation_curve: Curve = CURVES[settings.DEFAULT_CURVE]
    y_axis: Optional[YAxisConfig] = None
    show_grid: bool = True
    show_values: bool = True
    padding: Padding = Padding.all(settings.DEFAULT_PADDING)
    horizontal_grid_lines: int = settings.DEFAULT_GRID_LINES

    def __post_init__(self) -> None:
        if not (0.0 <= self.bar_spacing < 1.0):
            raise ChartConfigError(f"bar_spacing must be in [0, 1): {self.bar_spacing}")
        if self.horizontal_grid_lines < 1:
            raise ChartConfigError("horizontal_grid_lines must be >= 1")

    def to_json(self) -> Dict[str, Any]:
        """Plotly layout keys."""
        out: Dict[str, Any] = {
            "plot_bgcolor": self.background_color.to_hex(),
            "paper_bgcolor": self.background_color.to_hex(),
            "bargap": self.bar_spacing,
            "barcornerradius": self.corner_radius,
            "transition": {"duration": self.animation_duration_ms, "easing": self.animation_curve.to_json()},
            "xaxis": {"gridcolor": self.grid_color.to_hex(), "showgrid": self.show_grid},
            "showValues": self.show_values,
            "horizontalGridLines": self.horizontal_grid_lines,
            "margin": self.padding.to_json(),
        }
        if self.y_axis is not None:
            out["yaxis"] = {**self.y_axis.to_json(), "gridcolor": self.grid_color.to_hex()}
        return out

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "StackedBarChartStyle":
        base = cls()
        yaxis = raw.get("yaxis")
        font = first_present(raw, "font", "xaxis.tickfont")
        value_font = first_present(raw, "valueStyle", "font")
        return cls(
            grid_color=parse_color(
                first_present(raw, "gridcolor", "xaxis.gridcolor", "yaxis.gridcolor"), base.grid_color
            ),
            background_color=parse_color(first_present(raw, "plot_bgcolor", "paper_bgcolor"), base.background_color),
            label_style=TextStyle.from_json(font, TextStyle()) if isinstance(font, Mapping) else None,
            value_style=TextStyle.from_json(value_font, TextStyle(bold=True)) if isinstance(value_font, Mapping) else None,
            bar_spacing=min(0.95, max(0.0, as_float(raw.get("bargap"), base.bar_spacing))),
            corner_radius=as_float(first_present(raw, "barcornerradius", "cornerRadius"), base.corner_radius),
            animation_duration_ms=as_int(get_path(raw, "transition.duration"), base.animation_duration_ms),
            animation_curve=curve_from_plotly_easing(get_path(raw, "transition.easing"), base.animation_curve),
            y_axis=YAxisConfig.from_json(yaxis) if isinstance(yaxis, Mapping) else None,
            show_grid=as_bool(first_present(raw, "showGrid", "xaxis.showgrid", "yaxis.showgrid"), True),
            show_values=as_bool(raw.get("showValues"), True),
            padding=Padding.from_json(first_present(raw, "margin", "padding"), base.padding),
            horizontal_grid_lines=max(
                1, as_int(first_present(raw, "horizontalGridLines", "yaxis.nticks"), base.horizontal_grid_lines)
            ),
        )


@dataclass(frozen=True)
class StackedBarChartConfig:
    data: Tuple[StackedBarData, ...]
    style: StackedBarChartStyle = field(default_factory=StackedBarChartStyle)
    width: float = 800.0
    height: float = 400.0
    interactive: bool = True


def detect_format(doc: Any) -> str:
    """Return ``"plotly"`` or ``"simple"``; anything else raises ``ChartDataError``."""
    if isinstance(doc, list):
        return "simple"
    if isinstance(doc, Mapping):
        if isinstance(doc.get("bars"), list):
            return "simple"
        data = doc.get("data")
        if isinstance(data, list) and data and isinstance(data[0], Mapping):
            if "x" in data[0] and "y" in data[0]:
                return "plotly"
            if "label" in data[0] or "segments" in data[0]:
                return "simple"
    raise ChartDataError(
        "Unsupported JSON format. Expected Plotly format with data/layout or simple format with bars/segments"
    )


def _category_labels(layout: Mapping[str, Any]) -> Dict[str, str]:
    """Display labels from ``xaxis.tickvals``/``ticktext`` keyed by category."""
    vals, text = get_path(layout, "xaxis.tickvals"), get_path(layout, "xaxis.ticktext")
    if not isinstance(vals, list) or not isinstance(text, list):
        return {}
    return {str(v): str(t) for v, t in zip(vals, text)}


def _parse_plotly(traces: List[Any], layout: Mapping[str, Any]) -> List[StackedBarData]:
    categories: Dict[str, List[StackedBarSegment]] = {}
    for i, trace in enumerate(traces):
        if not isinstance(trace, Mapping):
            raise ChartDataError(f"Plotly trace {i} must be an object", context={"trace": i})
        xs, ys = trace.get("x"), trace.get("y")
        if not isinstance(xs, list) or not isinstance(ys, list):
            raise ChartDataError(f"Plotly trace {i} must contain x and y arrays", context={"trace": i})
        if len(xs) != len(ys):
            raise ChartDataError(
                f"Plotly trace {i} x and y arrays must have the same length", context={"trace": i}
            )
        name = trace.get("name")
        names = trace.get("customdata")
        colors = get_path(trace, "marker.color")
        for j, (x, y) in enumerate(zip(xs, ys)):
            value = 0.0 if y is None else to_number(y)
            if value is None:
                raise ChartDataError(f"Plotly trace {i} y value at index {j} is not numeric", context={"trace": i})
            raw_color = colors[j] if isinstance(colors, list) and j < len(colors) else colors
            label = names[j] if isinstance(names, list) and j < len(names) else name
            segment = StackedBarSegment(
                value=value,
                color=parse_color(raw_color, PLOTLY_DEFAULT_COLOR),
                label=None if label is None else str(label),
            )
            categories.setdefault(str(x), []).append(segment)
    labels = _category_labels(layout)
    keys = list(labels) + [k for k in categories if k not in labels]
    return [StackedBarData(labels.get(k, k), tuple(categories.get(k, ()))) for k in keys]


def _parse_simple(items: List[Any]) -> List[StackedBarData]:
    bars: List[StackedBarData] = []
    for i, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise ChartDataError(f"Simple data item {i} must be an object", context={"index": i})
        segments_raw = item.get("segments")
        if segments_raw is None:
            # a flat record is a single-segment bar
            segments = [StackedBarSegment.from_json(item)]
        elif isinstance(segments_raw, list) and segments_raw:
            segments = [StackedBarSegment.from_json(s) for s in segments_raw if isinstance(s, Mapping)]
        else:
            raise ChartDataError(f"Simple data item {i} segments must be a non-empty array", context={"index": i})
        bars.append(StackedBarData(str(first_present(item, "label", "x", default="")), tuple(segments)))
    return bars


def parse_stacked_bar_json(source: Any) -> StackedBarChartConfig:
    doc = load_document(source)
    kind = detect_format(doc)
    if kind == "plotly":
        layout = doc.get("layout") if isinstance(doc.get("layout"), Mapping) else {}
        data = _parse_plotly(doc["data"], layout)
    else:
        if isinstance(doc, list):
            items, layout = doc, {}
        else:
            items = doc.get("bars") if isinstance(doc.get("bars"), list) else doc.get("data")
            layout = first_present(doc, "style", "layout", default={})
        data = _parse_simple(items)
    if not data:
        raise ChartDataError("Stacked bar chart data cannot be empty")
    log.debug("Parsed %d stacked bars from %s JSON", len(data), kind)
    root = doc if isinstance(doc, Mapping) else {}
    return StackedBarChartConfig(
        data=tuple(data),
        style=StackedBarChartStyle.from_json(layout),
        width=as_float(first_present(layout, "width") or root.get("width"), 800.0),
        height=as_float(first_present(layout, "height") or root.get("height"), 400.0),
        interactive=as_bool(get_path(root, "config.interactive"), True),
    )


def to_plotly_json(
    data: Tuple[StackedBarData, ...] | List[StackedBarData],
    style: Optional[StackedBarChartStyle] = None,
    *,
    width: float = 800.0,
    height: float = 400.0,
) -> Dict[str, Any]:
    """One trace per stack level; parsing the result gives back equivalent bars.

    Bars are keyed by position on the x axis and shown through
    ``xaxis.ticktext`` so repeated labels stay separate bars. Segment labels
    travel per point in ``customdata``.
    """
    style = style or StackedBarChartStyle()
    depth = max((len(bar.segments) for bar in data), default=0)
    traces: List[Dict[str, Any]] = []
    for level in range(depth):
        keys = [i for i, bar in enumerate(data) if len(bar.segments) > level]
        segments = [data[i].segments[level] for i in keys]
        trace: Dict[str, Any] = {
            "type": "bar",
            "x": keys,
            "y": [s.value for s in segments],
            "customdata": [s.label for s in segments],
            "marker": {"color": [s.color.to_hex() for s in segments]},
        }
        names = {s.label for s in segments}
        if len(names) == 1 and None not in names:
            trace["name"] = names.pop()
        traces.append(trace)
    layout = {**style.to_json(), "barmode": "stack", "width": width, "height": height}
    layout["xaxis"] = {
        **layout["xaxis"],
        "tickmode": "array",
        "tickvals": list(range(len(data))),
        "ticktext": [bar.label for bar in data],
    }
    return {"data": traces, "layout": layout, "config": {"displayModeBar": False}}
