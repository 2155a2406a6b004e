"""Animated chart widget base (PyQt6).

Concrete chart widgets supply ``build_scene`` and ``hit_test``; this base
owns the rest of the lifecycle:

 - a ``QVariantAnimation`` advancing ``progress`` from 0 to 1 using the
   style's duration and easing curve (skipped under reduced motion)
 - pointer tracking: ``mouseMoveEvent`` updates the hover state and emits
   ``hovered``; ``leaveEvent`` clears it; ``mousePressEvent`` emits ``tapped``
 - repaint gating through :func:`~chartkit.core.repaint.should_repaint`

Hover/tap payloads are whatever ``hit_test`` returns (a bar index, a
``(series, point)`` pair, ...); ``None`` means nothing is under the pointer.
``tap_payload`` may map a hit to ``None`` to suppress ``tapped``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from PyQt6.QtCore import QSize, QVariantAnimation, pyqtSignal
from PyQt6.QtGui import QPainter
from PyQt6.QtWidgets import QWidget

from ..design import reduced_motion as _rm
from ..design.easing import Curve
from .qt_render import render_scene as paint_scene
from .repaint import PaintState, should_repaint
from .scene import Scene

__all__ = ["AnimatedChartWidget"]

log = logging.getLogger(__name__)


class AnimatedChartWidget(QWidget):
    """Base QWidget painting a scene rebuilt from (data, style, progress, hover)."""

    animationFinished = pyqtSignal()
    hovered = pyqtSignal(object)
    tapped = pyqtSignal(object)

    def __init__(
        self,
        data: Any,
        style: Any,
        parent: Optional[QWidget] = None,
        *,
        width: int = 800,
        height: int = 400,
        autoplay: bool = True,
    ):
        super().__init__(parent)
        self.setMouseTracking(True)
        self._data = data
        self._style = style
        self._progress: float = 0.0
        self._hover: Any = None
        self._last_painted: Optional[PaintState] = None
        self._preferred = QSize(int(width), int(height))
        self.resize(self._preferred)
        self._animation = QVariantAnimation(self)
        self._animation.setStartValue(0.0)
        self._animation.setEndValue(1.0)
        self._animation.valueChanged.connect(self._on_animation_value)  # type: ignore[attr-defined]
        self._animation.finished.connect(self._on_animation_finished)  # type: ignore[attr-defined]
        if autoplay:
            self.replay()

    # Subclass hooks ------------------------------------------------------
    def build_scene(self, width: float, height: float) -> Scene:  # pragma: no cover - abstract
        raise NotImplementedError

    def hit_test(self, x: float, y: float) -> Any:  # pragma: no cover - abstract
        raise NotImplementedError

    def animation_settings(self) -> tuple[int, Curve]:
        return self._style.animation_duration_ms, self._style.animation_curve

    # Public API ------------------------------------------------------------
    def data(self) -> Any:
        return self._data

    def style_config(self) -> Any:
        return self._style

    def progress(self) -> float:
        return self._progress

    def hover_state(self) -> Any:
        return self._hover

    def is_animating(self) -> bool:
        return self._animation.state() == QVariantAnimation.State.Running

    def set_data(self, data: Any, *, animate: bool = True) -> None:
        self._data = data
        self._hover = None
        if animate:
            self.replay()
        else:
            self.set_progress(1.0)

    def set_style_config(self, style: Any) -> None:
        self._style = style
        self.request_repaint()

    def set_progress(self, value: float) -> None:
        """Jump to ``value`` (clamped to [0, 1]) and stop any running animation."""
        self._animation.stop()
        self._progress = max(0.0, min(1.0, float(value)))
        self.request_repaint()

    def replay(self) -> None:
        """Restart the entry animation from progress 0."""
        self._animation.stop()
        duration, curve = self.animation_settings()
        duration = _rm.adjust_duration(int(duration))
        if duration <= 0:
            self._progress = 1.0
            self.request_repaint()
            self.animationFinished.emit()
            return
        self._progress = 0.0
        self._animation.setDuration(duration)
        self._animation.setEasingCurve(curve.to_qeasing_curve())
        self._animation.start()

    def stop(self) -> None:
        self._animation.stop()

    def paint_state(self) -> PaintState:
        return PaintState(self._data, self._style, self._progress, self._hover)

    def render_scene(self) -> Scene:
        """Build the scene for the current widget size (handy for tests/export)."""
        return self.build_scene(float(self.width()), float(self.height()))

    def request_repaint(self) -> None:
        if should_repaint(self._last_painted, self.paint_state()):
            self.update()

    # Qt overrides --------------------------------------------------------
    def sizeHint(self) -> QSize:  # type: ignore[override]
        return self._preferred

    def paintEvent(self, event):  # type: ignore[override]
        state = self.paint_state()
        scene = self.render_scene()
        p = QPainter(self)
        try:
            paint_scene(p, scene)
        finally:
            p.end()
        self._last_painted = state

    def mouseMoveEvent(self, event):  # type: ignore[override]
        pos = event.position()
        self._update_hover(self.hit_test(pos.x(), pos.y()))
        super().mouseMoveEvent(event)

    def leaveEvent(self, event):  # type: ignore[override]
        self._update_hover(None)
        super().leaveEvent(event)

    def mousePressEvent(self, event):  # type: ignore[override]
        pos = event.position()
        hit = self.hit_test(pos.x(), pos.y())
        payload = None if hit is None else self.tap_payload(hit)
        if payload is not None:
            self.tapped.emit(payload)
        super().mousePressEvent(event)

    def tap_payload(self, hit: Any) -> Any:
        return hit

    # Internals -------------------------------------------------------------
    def _update_hover(self, hit: Any) -> None:
        if hit == self._hover:
            return
        self._hover = hit
        self.hovered.emit(hit)
        self.request_repaint()

    def _on_animation_value(self, value) -> None:
        self._progress = float(value)
        self.request_repaint()

    def _on_animation_finished(self) -> None:
        self._progress = 1.0
        self.request_repaint()
        log.debug("%s animation finished", type(self).__name__)
        self.animationFinished.emit()
