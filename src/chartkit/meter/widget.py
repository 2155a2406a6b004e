"""Animated hollow semicircle meter widget."""

from __future__ import annotations

from typing import Any, Optional

from PyQt6.QtWidgets import QWidget

from ..core.scene import Scene
from ..core.widget import AnimatedChartWidget
from . import painter
from .models import MeterReading, SemicircleStyle, parse_semicircle_json

__all__ = ["HollowSemicircleChart"]


class HollowSemicircleChart(AnimatedChartWidget):
    """Half-ring progress meter.

    Changing the percentage tweens from the value currently on screen to
    the new one instead of restarting from zero.
    """

    def __init__(
        self,
        percentage: float,
        style: Optional[SemicircleStyle] = None,
        parent: Optional[QWidget] = None,
        *,
        size: int = 200,
        interactive: bool = True,
        autoplay: bool = True,
    ):
        self._interactive = interactive
        style = style or SemicircleStyle()
        band = painter.LEGEND_BAND if style.show_legend else 0
        super().__init__(
            MeterReading(percentage), style, parent, width=size, height=int(size / 2 + band), autoplay=autoplay
        )

    @classmethod
    def from_json(cls, source: Any, parent: Optional[QWidget] = None, **kwargs) -> "HollowSemicircleChart":
        reading, style = parse_semicircle_json(source)
        return cls(reading.percentage, style, parent, **kwargs)

    def percentage(self) -> float:
        return self._data.percentage

    def displayed_percentage(self) -> float:
        return self._data.displayed(self._progress)

    def set_percentage(self, percentage: float, *, animate: bool = True) -> None:
        self.set_data(MeterReading(percentage, previous=self.displayed_percentage()), animate=animate)

    def build_scene(self, width: float, height: float) -> Scene:
        return painter.build_scene(self._data, self._style, self._progress, self._hover, width, height)

    def hit_test(self, x: float, y: float) -> Optional[int]:
        if not self._interactive:
            return None
        return painter.hit_test(self._data, self._style, float(self.width()), float(self.height()), x, y)
