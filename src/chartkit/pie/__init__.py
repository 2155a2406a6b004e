"""Pie and donut chart family."""

from .models import (
    ChartAlignment,
    LabelPosition,
    LegendPosition,
    PieChartConfig,
    PieChartData,
    PieChartStyle,
    parse_pie_json,
)
from .painter import normalize_slices

__all__ = [
    "ChartAlignment",
    "LabelPosition",
    "LegendPosition",
    "PieChartConfig",
    "PieChartData",
    "PieChartStyle",
    "parse_pie_json",
    "normalize_slices",
]
