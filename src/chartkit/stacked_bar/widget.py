"""Interactive animated stacked bar chart widget."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from PyQt6.QtWidgets import QWidget

from ..core.scene import Scene
from ..core.widget import AnimatedChartWidget
from . import painter
from .models import StackedBarChartStyle, StackedBarData, parse_stacked_bar_json, to_plotly_json

__all__ = ["StackedBarChart"]


class StackedBarChart(AnimatedChartWidget):
    """Stacks grow together from the baseline; ``hovered``/``tapped`` carry the bar index."""

    def __init__(
        self,
        data: Sequence[StackedBarData],
        style: Optional[StackedBarChartStyle] = None,
        parent: Optional[QWidget] = None,
        *,
        width: int = 800,
        height: int = 400,
        interactive: bool = True,
        autoplay: bool = True,
    ):
        self._interactive = interactive
        super().__init__(
            tuple(data), style or StackedBarChartStyle(), parent, width=width, height=height, autoplay=autoplay
        )

    @classmethod
    def from_json(cls, source: Any, parent: Optional[QWidget] = None, **kwargs) -> "StackedBarChart":
        config = parse_stacked_bar_json(source)
        kwargs.setdefault("width", int(config.width))
        kwargs.setdefault("height", int(config.height))
        kwargs.setdefault("interactive", config.interactive)
        return cls(config.data, config.style, parent, **kwargs)

    def to_json(self) -> dict:
        return to_plotly_json(self._data, self._style, width=self.width(), height=self.height())

    def set_data(self, data: Sequence[StackedBarData], *, animate: bool = True) -> None:  # type: ignore[override]
        super().set_data(tuple(data), animate=animate)

    def build_scene(self, width: float, height: float) -> Scene:
        return painter.build_scene(self._data, self._style, self._progress, self._hover, width, height)

    def hit_test(self, x: float, y: float) -> Optional[int]:
        if not self._interactive:
            return None
        return painter.hit_test(self._data, self._style, float(self.width()), float(self.height()), x, y)
