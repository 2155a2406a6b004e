"""Scrollable, animated candlestick chart widget."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QWidget

from ..core.repaint import PaintState
from ..core.scene import Scene
from ..core.widget import AnimatedChartWidget
from . import painter
from .models import CandlestickAxisConfig, CandlestickData, CandlestickStyle, parse_candlestick_json

__all__ = ["CandlestickChart"]

# one wheel notch (120 units) scrolls by one candle slot
WHEEL_NOTCH = 120.0


class CandlestickChart(AnimatedChartWidget):
    """OHLC candles growing from the baseline.

    Dragging with the left button (or the mouse wheel) scrolls horizontally;
    the view starts scrolled to the most recent candle and jumps back there
    when the number of candles changes. ``hovered`` carries a
    :class:`~chartkit.candlestick.painter.CandlestickHover`, ``tapped`` the
    :class:`CandlestickData` under the pointer.
    """

    def __init__(
        self,
        data: Sequence[CandlestickData],
        style: Optional[CandlestickStyle] = None,
        axis: Optional[CandlestickAxisConfig] = None,
        parent: Optional[QWidget] = None,
        *,
        width: int = 800,
        height: int = 400,
        interactive: bool = True,
        autoplay: bool = True,
    ):
        self._interactive = interactive
        self._axis = axis or CandlestickAxisConfig()
        self._scroll = 0.0
        self._drag_x: Optional[float] = None
        super().__init__(
            tuple(data), style or CandlestickStyle(), parent, width=width, height=height, autoplay=autoplay
        )
        self.scroll_to_end()

    @classmethod
    def from_json(cls, source: Any, parent: Optional[QWidget] = None, **kwargs) -> "CandlestickChart":
        config = parse_candlestick_json(source)
        kwargs.setdefault("width", int(config.width))
        kwargs.setdefault("height", int(config.height))
        widget = cls(config.data, config.style, config.axis, parent, **kwargs)
        if config.title:
            widget.setWindowTitle(config.title)
        return widget

    def axis_config(self) -> CandlestickAxisConfig:
        return self._axis

    def set_axis_config(self, axis: CandlestickAxisConfig) -> None:
        self._axis = axis
        self.update()

    def set_data(self, data: Sequence[CandlestickData], *, animate: bool = True) -> None:  # type: ignore[override]
        resized = len(data) != len(self._data)
        super().set_data(tuple(data), animate=animate)
        if resized:
            self.scroll_to_end()
        else:
            self.set_scroll_offset(self._scroll)

    # Scrolling -------------------------------------------------------------
    def _area(self):
        return painter.chart_area(self._style, self._axis, float(self.width()), float(self.height()))

    def max_scroll(self) -> float:
        return painter.max_scroll(len(self._data), self._style, self._area())

    def scroll_offset(self) -> float:
        return self._scroll

    def set_scroll_offset(self, value: float) -> None:
        self._scroll = max(0.0, min(self.max_scroll(), float(value)))
        self.request_repaint()

    def scroll_to_end(self) -> None:
        self.set_scroll_offset(self.max_scroll())

    def scroll_by(self, dx: float) -> None:
        """Move the view right by ``dx`` pixels (negative moves left)."""
        self.set_scroll_offset(self._scroll + dx)

    # AnimatedChartWidget hooks ---------------------------------------------
    def paint_state(self) -> PaintState:
        # scroll rides along with hover so both compare by value
        return PaintState(self._data, self._style, self._progress, (self._hover, self._scroll))

    def build_scene(self, width: float, height: float) -> Scene:
        return painter.build_scene(
            self._data, self._style, self._axis, self._progress, self._hover, width, height, self._scroll
        )

    def hit_test(self, x: float, y: float) -> Optional[painter.CandlestickHover]:
        if not self._interactive:
            return None
        return painter.hit_test(
            self._data, self._style, self._axis, float(self.width()), float(self.height()), x, y, self._scroll
        )

    def tap_payload(self, hit: painter.CandlestickHover) -> Optional[CandlestickData]:
        return None if hit.index is None else self._data[hit.index]

    # Qt overrides ----------------------------------------------------------
    def mousePressEvent(self, event):  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self._drag_x = event.position().x()
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):  # type: ignore[override]
        if self._drag_x is not None and event.buttons() & Qt.MouseButton.LeftButton:
            x = event.position().x()
            dx = x - self._drag_x
            # ignore sub-pixel jitter
            if abs(dx) >= 1.0:
                self.scroll_by(-dx)
                self._drag_x = x
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):  # type: ignore[override]
        self._drag_x = None
        super().mouseReleaseEvent(event)

    def wheelEvent(self, event):  # type: ignore[override]
        delta = event.angleDelta()
        steps = (delta.x() or delta.y()) / WHEEL_NOTCH
        self.scroll_by(-steps * self._style.slot_width)
        event.accept()

    def resizeEvent(self, event):  # type: ignore[override]
        super().resizeEvent(event)
        self.set_scroll_offset(self._scroll)
