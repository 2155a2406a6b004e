"""Gantt timeline family."""

from .models import GanttChartConfig, GanttChartStyle, GanttTask, parse_date, parse_gantt_json
from .timeline import filter_by_date_range, group_by, sort_by_start_date, time_range

__all__ = [
    "GanttChartConfig",
    "GanttChartStyle",
    "GanttTask",
    "parse_date",
    "parse_gantt_json",
    "filter_by_date_range",
    "group_by",
    "sort_by_start_date",
    "time_range",
]
