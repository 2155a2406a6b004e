"""Stacked bar chart family."""

from .models import (
    StackedBarChartConfig,
    StackedBarChartStyle,
    StackedBarData,
    StackedBarSegment,
    YAxisConfig,
    detect_format,
    parse_stacked_bar_json,
    to_plotly_json,
)

__all__ = [
    "StackedBarChartConfig",
    "StackedBarChartStyle",
    "StackedBarData",
    "StackedBarSegment",
    "YAxisConfig",
    "detect_format",
    "parse_stacked_bar_json",
    "to_plotly_json",
]
