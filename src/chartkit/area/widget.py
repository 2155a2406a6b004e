"""Interactive animated area chart widget."""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

from PyQt6.QtWidgets import QWidget

from ..core.scene import Scene
from ..core.widget import AnimatedChartWidget
from . import painter
from .models import AreaChartStyle, AreaSeries, parse_area_json

__all__ = ["AreaChart"]


class AreaChart(AnimatedChartWidget):
    """Series draw in along their path; a tooltip follows the nearest point.

    Hover and tap payloads are ``(series_index, point_index)`` tuples.
    """

    def __init__(
        self,
        series: Sequence[AreaSeries],
        style: Optional[AreaChartStyle] = None,
        parent: Optional[QWidget] = None,
        *,
        width: int = 800,
        height: int = 400,
        interactive: bool = True,
        autoplay: bool = True,
    ):
        self._interactive = interactive
        super().__init__(tuple(series), style or AreaChartStyle(), parent, width=width, height=height, autoplay=autoplay)

    @classmethod
    def from_plotly(cls, source: Any, parent: Optional[QWidget] = None, **kwargs) -> "AreaChart":
        config = parse_area_json(source)
        return cls(config.series, config.style, parent, **kwargs)

    def set_data(self, series: Sequence[AreaSeries], *, animate: bool = True) -> None:  # type: ignore[override]
        super().set_data(tuple(series), animate=animate)

    def build_scene(self, width: float, height: float) -> Scene:
        return painter.build_scene(self._data, self._style, self._progress, self._hover, width, height)

    def hit_test(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        if not self._interactive:
            return None
        return painter.hit_test(self._data, self._style, float(self.width()), float(self.height()), x, y)
