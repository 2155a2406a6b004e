"""Bar chart family."""

from .models import BarChartConfig, BarChartData, BarChartStyle, parse_bar_json

__all__ = ["BarChartConfig", "BarChartData", "BarChartStyle", "parse_bar_json"]
