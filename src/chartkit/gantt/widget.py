"""Interactive Gantt timeline widget."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from PyQt6.QtWidgets import QWidget

from ..core.scene import Scene
from ..core.widget import AnimatedChartWidget
from . import painter
from .models import GanttChartStyle, GanttTask, parse_gantt_json

__all__ = ["GanttChart"]


class GanttChart(AnimatedChartWidget):
    """``hovered`` carries the task index; ``tapped`` carries the :class:`GanttTask` itself."""

    def __init__(
        self,
        tasks: Sequence[GanttTask],
        style: Optional[GanttChartStyle] = None,
        parent: Optional[QWidget] = None,
        *,
        width: int = 800,
        height: int = 600,
        interactive: bool = True,
        autoplay: bool = True,
    ):
        self._interactive = interactive
        super().__init__(tuple(tasks), style or GanttChartStyle(), parent, width=width, height=height, autoplay=autoplay)

    @classmethod
    def from_json(cls, source: Any, parent: Optional[QWidget] = None, **kwargs) -> "GanttChart":
        config = parse_gantt_json(source)
        kwargs.setdefault("width", int(config.width))
        kwargs.setdefault("height", int(config.height))
        kwargs.setdefault("interactive", config.interactive)
        return cls(config.tasks, config.style, parent, **kwargs)

    def set_data(self, tasks: Sequence[GanttTask], *, animate: bool = True) -> None:  # type: ignore[override]
        super().set_data(tuple(tasks), animate=animate)

    def build_scene(self, width: float, height: float) -> Scene:
        return painter.build_scene(self._data, self._style, self._progress, self._hover, width, height)

    def hit_test(self, x: float, y: float) -> Optional[int]:
        if not self._interactive:
            return None
        return painter.hit_test(self._data, self._style, float(self.width()), float(self.height()), x, y)

    def tap_payload(self, hit: int) -> GanttTask:
        return self._data[hit]
