"""Line chart family."""

from .models import HoverLineStyle, LineChartConfig, LineChartData, LineChartStyle, parse_line_json

__all__ = ["HoverLineStyle", "LineChartConfig", "LineChartData", "LineChartStyle", "parse_line_json"]
