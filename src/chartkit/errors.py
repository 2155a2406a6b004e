"""Structured errors raised while building charts from data or JSON."""

from __future__ import annotations
from typing import Any

__all__ = ["ChartError", "ChartDataError", "ChartConfigError", "GanttChartError"]


class ChartError(Exception):
    """Base class for chart related issues."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ChartDataError(ChartError, ValueError):
    """Raised when chart data is empty, malformed or structurally invalid."""


class ChartConfigError(ChartError, ValueError):
    """Raised when a style or configuration value is out of range."""


class GanttChartError(ChartDataError):
    """Raised for invalid Gantt tasks (e.g. end date before start date)."""
