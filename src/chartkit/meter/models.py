"""Hollow semicircle meter: reading and style."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from config import settings

from ..core.jsonio import as_bool, as_float, as_int, first_present, load_document, to_number
from ..core.scene import TextStyle
from ..design.colors import BLUE, WHITE, Color, parse_color
from ..design.easing import CURVES, Curve, curve_from_json
from ..errors import ChartConfigError, ChartDataError

__all__ = ["MeterReading", "SemicircleStyle", "parse_semicircle_json"]


def _check_percentage(value: float, name: str) -> None:
    if not (0.0 <= value <= 100.0):
        raise ChartConfigError(f"{name} must be between 0 and 100: {value}", context={name: value})


@dataclass(frozen=True)
class MeterReading:
    """Target percentage plus the value the needle animates from."""

    percentage: float
    previous: float = 0.0

    def __post_init__(self) -> None:
        _check_percentage(self.percentage, "percentage")
        _check_percentage(self.previous, "previous")

    def displayed(self, progress: float) -> float:
        return self.previous + (self.percentage - self.previous) * progress


@dataclass(frozen=True)
class SemicircleStyle:
    active_color: Color = BLUE
    inactive_color: Color = Color(0xE0, 0xE0, 0xE0)
    background_color: Color = WHITE
    text_color: Optional[Color] = None
    percentage_style: Optional[TextStyle] = None
    legend_style: Optional[TextStyle] = None
    hollow_radius: float = 0.6
    animation_duration_ms: int = settings.DEFAULT_ANIMATION_MS
    animation_curve: Curve = CURVES[settings.DEFAULT_CURVE]
    show_percentage_text: bool = True
    show_legend: bool = True
    legend_labels: Tuple[str, str] = ("Active", "Inactive")
    percentage_formatter: Optional[Callable[[float], str]] = None
    legend_formatter: Optional[Callable[[str, float], str]] = None

    def __post_init__(self) -> None:
        if not (0.0 < self.hollow_radius < 1.0):
            raise ChartConfigError(f"hollow_radius must be between 0 and 1: {self.hollow_radius}")

    def format_percentage(self, value: float) -> str:
        if self.percentage_formatter is not None:
            return self.percentage_formatter(value)
        return f"{value:.0f}%"

    def format_legend(self, kind: str, value: float) -> str:
        if self.legend_formatter is not None:
            return self.legend_formatter(kind, value)
        return f"{kind} ({value:.0f}%)"

    def to_json(self) -> Dict[str, Any]:
        return {
            "activeColor": self.active_color.to_hex(),
            "inactiveColor": self.inactive_color.to_hex(),
            "hollowRadius": self.hollow_radius,
            "animationDuration": self.animation_duration_ms,
            "animationCurve": self.animation_curve.to_json(),
            "showPercentageText": self.show_percentage_text,
            "showLegend": self.show_legend,
            "legendLabels": list(self.legend_labels),
        }

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> "SemicircleStyle":
        base = cls()
        labels = raw.get("legendLabels")
        text_color = parse_color(raw.get("textColor"))
        return cls(
            active_color=parse_color(raw.get("activeColor"), base.active_color),
            inactive_color=parse_color(raw.get("inactiveColor"), base.inactive_color),
            background_color=parse_color(raw.get("backgroundColor"), base.background_color),
            text_color=text_color,
            hollow_radius=as_float(raw.get("hollowRadius"), base.hollow_radius),
            animation_duration_ms=as_int(raw.get("animationDuration"), base.animation_duration_ms),
            animation_curve=curve_from_json(raw.get("animationCurve"), base.animation_curve),
            show_percentage_text=as_bool(raw.get("showPercentageText"), True),
            show_legend=as_bool(raw.get("showLegend"), True),
            legend_labels=(str(labels[0]), str(labels[1]))
            if isinstance(labels, list) and len(labels) == 2
            else base.legend_labels,
        )


def parse_semicircle_json(source: Any) -> Tuple[MeterReading, SemicircleStyle]:
    """``{"percentage": 72, "style": {...}}``; a Plotly gauge ``value`` is accepted too."""
    doc = load_document(source)
    if not isinstance(doc, Mapping):
        raise ChartDataError("Semicircle JSON must be an object")
    value = to_number(first_present(doc, "percentage", "value"))
    if value is None and isinstance(doc.get("data"), list) and doc["data"]:
        first = doc["data"][0]
        value = to_number(first.get("value")) if isinstance(first, Mapping) else None
    if value is None:
        raise ChartDataError("Semicircle JSON requires a numeric 'percentage'")
    style_raw = first_present(doc, "style", "layout", default={})
    return MeterReading(value), SemicircleStyle.from_json(style_raw if isinstance(style_raw, Mapping) else {})
