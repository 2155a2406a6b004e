"""Animated, interactive chart widgets for PyQt6.

Each chart family lives in its own subpackage with the same layout:

 - ``models``: immutable data + style value objects (and JSON parsing)
 - ``painter``: pure geometry, hit-testing and scene building
 - ``widget``: the QWidget wrapper driving progress and pointer state

Widgets are imported lazily by the registry so the pure layers can be used
(and tested) without a QApplication.
"""

from __future__ import annotations

from .errors import ChartError, ChartDataError, ChartConfigError, GanttChartError

__all__ = ["ChartError", "ChartDataError", "ChartConfigError", "GanttChartError"]

__version__ = "0.4.0"
