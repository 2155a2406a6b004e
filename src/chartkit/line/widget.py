"""Interactive animated line chart widget."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from PyQt6.QtWidgets import QWidget

from ..core.scene import Scene
from ..core.widget import AnimatedChartWidget
from . import painter
from .models import LineChartData, LineChartStyle, parse_line_json

__all__ = ["LineChart"]


class LineChart(AnimatedChartWidget):
    """The line draws in from the left; hovering snaps a guide line to the nearest point."""

    def __init__(
        self,
        data: Sequence[LineChartData],
        style: Optional[LineChartStyle] = None,
        parent: Optional[QWidget] = None,
        *,
        width: int = 800,
        height: int = 400,
        interactive: bool = True,
        autoplay: bool = True,
    ):
        self._interactive = interactive
        super().__init__(tuple(data), style or LineChartStyle(), parent, width=width, height=height, autoplay=autoplay)

    @classmethod
    def from_json(cls, source: Any, parent: Optional[QWidget] = None, **kwargs) -> "LineChart":
        config = parse_line_json(source)
        return cls(config.data, config.style, parent, **kwargs)

    def set_data(self, data: Sequence[LineChartData], *, animate: bool = True) -> None:  # type: ignore[override]
        super().set_data(tuple(data), animate=animate)

    def build_scene(self, width: float, height: float) -> Scene:
        return painter.build_scene(self._data, self._style, self._progress, self._hover, width, height)

    def hit_test(self, x: float, y: float) -> Optional[int]:
        if not self._interactive:
            return None
        return painter.hit_test(self._data, self._style, float(self.width()), float(self.height()), x, y)
