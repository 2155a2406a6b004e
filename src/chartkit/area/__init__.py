"""Area chart family."""

from .models import AreaChartConfig, AreaChartStyle, AreaPoint, AreaSeries, TooltipConfig, parse_area_json

__all__ = ["AreaChartConfig", "AreaChartStyle", "AreaPoint", "AreaSeries", "TooltipConfig", "parse_area_json"]
