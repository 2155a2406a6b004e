"""Linear gradient fills.

A gradient is defined in screen space by two end points plus ordered
stops. Renderers map it onto ``QLinearGradient`` (widgets) or a clipped
image (matplotlib export).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from .colors import Color

__all__ = ["GradientStop", "LinearGradient", "validate_gradient", "vertical_gradient", "even_stops"]


@dataclass(frozen=True)
class GradientStop:
    position: float  # 0.0 .. 1.0
    color: Color


@dataclass(frozen=True)
class LinearGradient:
    x1: float
    y1: float
    x2: float
    y2: float
    stops: Tuple[GradientStop, ...]

    def __post_init__(self) -> None:
        validate_gradient(self)

    def sample(self, t: np.ndarray) -> np.ndarray:
        """Return RGBA floats (shape ``t.shape + (4,)``) along the gradient axis."""
        t = np.clip(np.asarray(t, dtype=float), 0.0, 1.0)
        positions = np.array([s.position for s in self.stops])
        channels = np.array([s.color.to_rgba_f() for s in self.stops])
        out = np.empty(t.shape + (4,), dtype=float)
        for c in range(4):
            out[..., c] = np.interp(t, positions, channels[:, c])
        return out


def validate_gradient(gradient: LinearGradient) -> None:
    if len(gradient.stops) < 2:
        raise ValueError("Gradient must have at least two stops")
    last_pos = -1.0
    for stop in gradient.stops:
        if not (0.0 <= stop.position <= 1.0):
            raise ValueError("Stop position out of range [0,1]")
        if stop.position < last_pos:
            raise ValueError("Stop positions must be non-decreasing")
        last_pos = stop.position


def even_stops(colors: Sequence[Color]) -> Tuple[GradientStop, ...]:
    if len(colors) < 2:
        raise ValueError("Gradient must have at least two stops")
    last = len(colors) - 1
    return tuple(GradientStop(i / last, c) for i, c in enumerate(colors))


def vertical_gradient(top: float, bottom: float, colors: Sequence[Color]) -> LinearGradient:
    """Gradient running from ``colors[0]`` at ``top`` to ``colors[-1]`` at ``bottom``."""
    return LinearGradient(0.0, top, 0.0, bottom, even_stops(colors))
