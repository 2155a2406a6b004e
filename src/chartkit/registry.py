"""Chart registry.

Maps a logical chart type to a builder turning a JSON document into a
widget. Built-in families are registered at import time; widget modules
are imported inside the builders so the registry itself loads without Qt.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Any, Callable, Dict

from .types import ChartRequest, ChartResult

__all__ = ["ChartType", "ChartRegistry", "chart_registry", "register_chart_type", "build_chart"]

log = logging.getLogger(__name__)

Builder = Callable[[ChartRequest], ChartResult]


@dataclass
class ChartType:
    """Metadata for a registered chart type."""

    chart_type: str
    builder: Builder
    description: str


class ChartRegistry:
    def __init__(self) -> None:
        self._types: Dict[str, ChartType] = {}

    def register(self, chart_type: str, builder: Builder, description: str) -> None:
        if chart_type in self._types:
            raise ValueError(f"Chart type already registered: {chart_type}")
        self._types[chart_type] = ChartType(chart_type, builder, description)

    def unregister(self, chart_type: str) -> None:
        self._types.pop(chart_type, None)

    def build(self, req: ChartRequest) -> ChartResult:
        """Build the requested chart and record build duration (ms)."""
        ct = self._types.get(req.chart_type)
        if ct is None:
            raise KeyError(f"Unknown chart type: {req.chart_type}")
        start = perf_counter()
        result = ct.builder(req)
        elapsed = (perf_counter() - start) * 1000.0
        result.meta.setdefault("build_ms", elapsed)
        result.meta.setdefault("chart_type", req.chart_type)
        log.debug("built %s chart in %.1f ms", req.chart_type, elapsed)
        return result

    def list_types(self) -> Dict[str, str]:
        return {k: v.description for k, v in self._types.items()}

    def __contains__(self, chart_type: object) -> bool:
        return chart_type in self._types


chart_registry = ChartRegistry()


def register_chart_type(chart_type: str, builder: Builder, description: str) -> None:
    chart_registry.register(chart_type, builder, description)


def build_chart(chart_type: str, data: Any, **options: Any) -> ChartResult:
    return chart_registry.build(ChartRequest(chart_type, data, options or None))


def _options(req: ChartRequest) -> Dict[str, Any]:
    return dict(req.options or {})


# ---------------- Built-in families -------------------------------------


def _bar_builder(req: ChartRequest) -> ChartResult:
    from .bar.widget import BarChart

    widget = BarChart.from_json(req.data, **_options(req))
    return ChartResult(widget=widget, meta={"bar_count": len(widget.data())})


def _pie_builder(req: ChartRequest) -> ChartResult:
    from .pie.widget import PieChart

    widget = PieChart.from_json(req.data, **_options(req))
    return ChartResult(widget=widget, meta={"slice_count": len(widget.data())})


def _area_builder(req: ChartRequest) -> ChartResult:
    from .area.widget import AreaChart

    widget = AreaChart.from_plotly(req.data, **_options(req))
    return ChartResult(widget=widget, meta={"series_count": len(widget.data())})


def _line_builder(req: ChartRequest) -> ChartResult:
    from .line.widget import LineChart

    widget = LineChart.from_json(req.data, **_options(req))
    return ChartResult(widget=widget, meta={"point_count": len(widget.data())})


def _stacked_bar_builder(req: ChartRequest) -> ChartResult:
    from .stacked_bar.widget import StackedBarChart

    widget = StackedBarChart.from_json(req.data, **_options(req))
    return ChartResult(widget=widget, meta={"bar_count": len(widget.data())})


def _gantt_builder(req: ChartRequest) -> ChartResult:
    from .gantt.widget import GanttChart

    widget = GanttChart.from_json(req.data, **_options(req))
    return ChartResult(widget=widget, meta={"task_count": len(widget.data())})


def _multi_line_builder(req: ChartRequest) -> ChartResult:
    from .multi_line.widget import MultiLineChart

    widget = MultiLineChart.from_plotly(req.data, **_options(req))
    return ChartResult(widget=widget, meta={"series_count": len(widget.data())})


def _semicircle_builder(req: ChartRequest) -> ChartResult:
    from .meter.widget import HollowSemicircleChart

    widget = HollowSemicircleChart.from_json(req.data, **_options(req))
    return ChartResult(widget=widget, meta={"percentage": widget.percentage()})


def _candlestick_builder(req: ChartRequest) -> ChartResult:
    from .candlestick.widget import CandlestickChart

    widget = CandlestickChart.from_json(req.data, **_options(req))
    return ChartResult(widget=widget, meta={"candle_count": len(widget.data())})


register_chart_type("bar", _bar_builder, "Animated vertical bar chart")
register_chart_type("pie", _pie_builder, "Pie/donut chart with minimum slice share")
register_chart_type("area", _area_builder, "Multi-series gradient area chart")
register_chart_type("line", _line_builder, "Single-series line chart with progressive reveal")
register_chart_type("stacked_bar", _stacked_bar_builder, "Stacked bar chart")
register_chart_type("gantt", _gantt_builder, "Gantt timeline")
register_chart_type("multi_line", _multi_line_builder, "Multi-series line chart with crosshair")
register_chart_type("semicircle", _semicircle_builder, "Hollow semicircle percentage meter")
register_chart_type("candlestick", _candlestick_builder, "Scrollable OHLC candlestick chart")
