"""Screen-space geometry helpers shared by the chart painters.

Everything here is pure and Qt-free: rectangles, padding, value-to-pixel
mapping, bezier flattening and the path-length utilities used for the
"drawing in" reveal animation of line and area charts.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import numpy as np

__all__ = [
    "Point",
    "Padding",
    "Rect",
    "evenly_spaced_x",
    "map_values_y",
    "polyline_length",
    "polyline_prefix",
    "flatten_quadratic",
    "flatten_cubic",
    "dash_segments",
    "distance",
]

Point = Tuple[float, float]

CURVE_STEPS = 16

_LONG_SIDES = {"l": "left", "t": "top", "r": "right", "b": "bottom"}


@dataclass(frozen=True)
class Padding:
    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @classmethod
    def all(cls, value: float) -> "Padding":
        return cls(value, value, value, value)

    @classmethod
    def symmetric(cls, horizontal: float = 0.0, vertical: float = 0.0) -> "Padding":
        return cls(horizontal, vertical, horizontal, vertical)

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom

    def to_json(self) -> dict[str, float]:
        return {"l": self.left, "t": self.top, "r": self.right, "b": self.bottom}

    @classmethod
    def from_json(cls, raw: Any, fallback: "Padding") -> "Padding":
        """Read a Plotly ``margin`` mapping; missing sides keep ``fallback``'s value."""
        if not isinstance(raw, Mapping):
            return fallback

        def side(key: str, default: float) -> float:
            v = raw.get(key, raw.get(_LONG_SIDES[key]))
            return float(v) if isinstance(v, (int, float)) and not isinstance(v, bool) else default

        return cls(
            side("l", fallback.left),
            side("t", fallback.top),
            side("r", fallback.right),
            side("b", fallback.bottom),
        )


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_ltrb(cls, left: float, top: float, right: float, bottom: float) -> "Rect":
        return cls(left, top, right - left, bottom - top)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> Point:
        return (self.left + self.width / 2, self.top + self.height / 2)

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def deflate(self, padding: Padding) -> "Rect":
        """Inset by ``padding``; width/height never go negative."""
        return Rect(
            self.left + padding.left,
            self.top + padding.top,
            max(0.0, self.width - padding.horizontal),
            max(0.0, self.height - padding.vertical),
        )


def evenly_spaced_x(count: int, left: float, width: float) -> List[float]:
    """X positions for ``count`` points spread across ``width``.

    A single point is centered rather than divided by ``count - 1``.
    """
    if count <= 0:
        return []
    if count == 1:
        return [left + width / 2]
    return [float(x) for x in np.linspace(left, left + width, count)]


def map_values_y(
    values: Sequence[float], lo: float, hi: float, top: float, height: float
) -> List[float]:
    """Map values into a vertical pixel range, inverted (larger value, smaller y).

    A zero value range places every point on the baseline.
    """
    bottom = top + height
    span = hi - lo
    if span == 0:
        return [bottom for _ in values]
    arr = np.asarray(values, dtype=float)
    return [float(y) for y in bottom - (arr - lo) / span * height]


def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def polyline_length(points: Sequence[Point]) -> float:
    if len(points) < 2:
        return 0.0
    arr = np.asarray(points, dtype=float)
    return float(np.hypot(*np.diff(arr, axis=0).T).sum())


def polyline_prefix(points: Sequence[Point], length: float) -> List[Point]:
    """Return the leading part of the polyline measuring ``length`` pixels.

    The final point is interpolated inside the segment where the budget runs
    out. A non-positive length yields the first point only.
    """
    if not points:
        return []
    out: List[Point] = [points[0]]
    if length <= 0:
        return out
    remaining = length
    for a, b in zip(points, points[1:]):
        seg = distance(a, b)
        if seg >= remaining:
            t = remaining / seg if seg else 0.0
            out.append((a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t))
            return out
        out.append(b)
        remaining -= seg
    return out


def flatten_quadratic(p0: Point, c: Point, p1: Point, steps: int = CURVE_STEPS) -> List[Point]:
    """Sample a quadratic bezier (excluding ``p0``)."""
    t = np.linspace(0.0, 1.0, steps + 1)[1:]
    inv = 1.0 - t
    xs = inv * inv * p0[0] + 2 * inv * t * c[0] + t * t * p1[0]
    ys = inv * inv * p0[1] + 2 * inv * t * c[1] + t * t * p1[1]
    return list(zip(xs.tolist(), ys.tolist()))


def flatten_cubic(
    p0: Point, c1: Point, c2: Point, p1: Point, steps: int = CURVE_STEPS
) -> List[Point]:
    """Sample a cubic bezier (excluding ``p0``)."""
    t = np.linspace(0.0, 1.0, steps + 1)[1:]
    inv = 1.0 - t
    a, b, c, d = inv**3, 3 * inv * inv * t, 3 * inv * t * t, t**3
    xs = a * p0[0] + b * c1[0] + c * c2[0] + d * p1[0]
    ys = a * p0[1] + b * c1[1] + c * c2[1] + d * p1[1]
    return list(zip(xs.tolist(), ys.tolist()))


def dash_segments(
    start: Point, end: Point, on: float, off: float, *, max_segments: Optional[int] = None
) -> List[Tuple[Point, Point]]:
    """Split ``start -> end`` into dash segments of ``on`` length separated by ``off``."""
    if on <= 0:
        raise ValueError("dash length must be > 0")
    total = distance(start, end)
    if total == 0:
        return []
    ux = (end[0] - start[0]) / total
    uy = (end[1] - start[1]) / total
    out: List[Tuple[Point, Point]] = []
    pos = 0.0
    while pos < total:
        seg_end = min(pos + on, total)
        out.append(
            ((start[0] + ux * pos, start[1] + uy * pos), (start[0] + ux * seg_end, start[1] + uy * seg_end))
        )
        if max_segments is not None and len(out) >= max_segments:
            break
        pos = seg_end + max(off, 0.0)
    return out
