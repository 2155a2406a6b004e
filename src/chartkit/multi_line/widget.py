"""Interactive multi-series line chart widget."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from PyQt6.QtWidgets import QWidget

from ..core.scene import Scene
from ..core.widget import AnimatedChartWidget
from . import painter
from .models import ChartSeries, MultiLineChartStyle, parse_multi_line_json

__all__ = ["MultiLineChart"]


class MultiLineChart(AnimatedChartWidget):
    """Hover payloads are :class:`~chartkit.multi_line.painter.MultiLineHover` records."""

    def __init__(
        self,
        series: Sequence[ChartSeries],
        style: Optional[MultiLineChartStyle] = None,
        parent: Optional[QWidget] = None,
        *,
        width: int = 800,
        height: int = 400,
        interactive: bool = True,
        autoplay: bool = True,
    ):
        self._interactive = interactive
        super().__init__(
            tuple(series), style or MultiLineChartStyle(), parent, width=width, height=height, autoplay=autoplay
        )

    @classmethod
    def from_plotly(cls, source: Any, parent: Optional[QWidget] = None, **kwargs) -> "MultiLineChart":
        config = parse_multi_line_json(source)
        return cls(config.series, config.style, parent, **kwargs)

    def set_data(self, series: Sequence[ChartSeries], *, animate: bool = True) -> None:  # type: ignore[override]
        super().set_data(tuple(series), animate=animate)

    def build_scene(self, width: float, height: float) -> Scene:
        return painter.build_scene(self._data, self._style, self._progress, self._hover, width, height)

    def hit_test(self, x: float, y: float) -> Optional[painter.MultiLineHover]:
        if not self._interactive:
            return None
        return painter.hit_test(self._data, self._style, float(self.width()), float(self.height()), x, y)
