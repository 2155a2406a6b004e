"""Multi-series line chart family."""

from .models import (
    ChartSeries,
    CrosshairConfig,
    LegendPosition,
    MultiLineChartConfig,
    MultiLineChartStyle,
    MultiLinePoint,
    parse_multi_line_json,
)

__all__ = [
    "ChartSeries",
    "CrosshairConfig",
    "LegendPosition",
    "MultiLineChartConfig",
    "MultiLineChartStyle",
    "MultiLinePoint",
    "parse_multi_line_json",
]
