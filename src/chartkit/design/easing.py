"""Animation curves: named easings, cubic-bezier parsing and Qt mapping.

Curves are plain value objects so styles stay hashable and comparable.
``Curve.transform`` is pure Python for tests and static rendering; widgets
hand ``Curve.to_qeasing_curve()`` to their ``QVariantAnimation``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

__all__ = [
    "CubicBezier",
    "Curve",
    "CURVES",
    "get_curve",
    "parse_cubic_bezier",
    "curve_from_json",
    "curve_from_plotly_easing",
]

log = logging.getLogger(__name__)

CubicBezier = Tuple[float, float, float, float]

_BEZIERS: Dict[str, CubicBezier] = {
    "ease_in": (0.42, 0.0, 1.0, 1.0),
    "ease_out": (0.0, 0.0, 0.58, 1.0),
    "ease_in_out": (0.42, 0.0, 0.58, 1.0),
    "fast_out_slow_in": (0.4, 0.0, 0.2, 1.0),
}


def parse_cubic_bezier(spec: str) -> CubicBezier:
    """Parse a CSS-like cubic-bezier string into numeric tuple.

    Expected format: 'cubic-bezier(x1, y1, x2, y2)'. Whitespace tolerated.
    """
    s = spec.strip().lower()
    if not s.startswith("cubic-bezier(") or not s.endswith(")"):
        raise ValueError(f"Invalid cubic-bezier format: {spec}")
    inner = s[len("cubic-bezier(") : -1]
    parts = [p.strip() for p in inner.split(",")]
    if len(parts) != 4:
        raise ValueError(f"cubic-bezier requires 4 components, got {len(parts)}: {spec}")
    try:
        x1, y1, x2, y2 = (float(p) for p in parts)
    except ValueError as e:
        raise ValueError(f"Non-numeric cubic-bezier value in {spec}") from e
    if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
        raise ValueError(f"cubic-bezier x components must lie in [0,1]: {spec}")
    return x1, y1, x2, y2


def _bezier_axis(p1: float, p2: float, s: float) -> float:
    inv = 1.0 - s
    return 3 * inv * inv * s * p1 + 3 * inv * s * s * p2 + s * s * s


def _solve_bezier(points: CubicBezier, t: float) -> float:
    x1, y1, x2, y2 = points
    lo, hi = 0.0, 1.0
    s = t
    # bisection on the monotonic x(s)
    for _ in range(40):
        x = _bezier_axis(x1, x2, s)
        if abs(x - t) < 1e-6:
            break
        if x < t:
            lo = s
        else:
            hi = s
        s = (lo + hi) / 2
    return _bezier_axis(y1, y2, s)


def _bounce_out(t: float) -> float:
    if t < 1 / 2.75:
        return 7.5625 * t * t
    if t < 2 / 2.75:
        t -= 1.5 / 2.75
        return 7.5625 * t * t + 0.75
    if t < 2.5 / 2.75:
        t -= 2.25 / 2.75
        return 7.5625 * t * t + 0.9375
    t -= 2.625 / 2.75
    return 7.5625 * t * t + 0.984375


@dataclass(frozen=True)
class Curve:
    """Named easing curve, optionally backed by cubic-bezier control points."""

    name: str
    bezier: Optional[CubicBezier] = None

    def transform(self, t: float) -> float:
        t = max(0.0, min(1.0, float(t)))
        if t in (0.0, 1.0):
            return t
        if self.bezier is not None:
            return _solve_bezier(self.bezier, t)
        if self.name == "linear":
            return t
        if self.name == "decelerate":
            return 1.0 - (1.0 - t) * (1.0 - t)
        if self.name == "bounce_out":
            return _bounce_out(t)
        if self.name == "bounce_in":
            return 1.0 - _bounce_out(1.0 - t)
        raise KeyError(f"Unknown curve: {self.name}")

    def to_json(self) -> str:
        if self.name == "cubic_bezier" and self.bezier is not None:
            return "cubic-bezier({}, {}, {}, {})".format(*self.bezier)
        return self.name

    def to_qeasing_curve(self):
        from PyQt6.QtCore import QEasingCurve, QPointF

        simple = {
            "linear": QEasingCurve.Type.Linear,
            "decelerate": QEasingCurve.Type.OutQuad,
            "bounce_out": QEasingCurve.Type.OutBounce,
            "bounce_in": QEasingCurve.Type.InBounce,
        }
        if self.name in simple:
            return QEasingCurve(simple[self.name])
        curve = QEasingCurve(QEasingCurve.Type.BezierSpline)
        x1, y1, x2, y2 = self.bezier or _BEZIERS["ease_in_out"]
        curve.addCubicBezierSegment(QPointF(x1, y1), QPointF(x2, y2), QPointF(1.0, 1.0))
        return curve


CURVES: Dict[str, Curve] = {
    "linear": Curve("linear"),
    "decelerate": Curve("decelerate"),
    "bounce_in": Curve("bounce_in"),
    "bounce_out": Curve("bounce_out"),
    **{name: Curve(name, pts) for name, pts in _BEZIERS.items()},
}

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _normalize_name(name: str) -> str:
    return _CAMEL_RE.sub("_", name.strip()).replace("-", "_").lower()


def get_curve(spec: str) -> Curve:
    """Resolve a curve name (``ease_in_out``/``easeInOut``) or cubic-bezier string."""
    if spec.strip().lower().startswith("cubic-bezier"):
        return Curve("cubic_bezier", parse_cubic_bezier(spec))
    curve = CURVES.get(_normalize_name(spec))
    if curve is None:
        raise KeyError(f"Unknown curve: {spec}")
    return curve


def curve_from_json(value: Any, fallback: Curve) -> Curve:
    if not isinstance(value, str):
        return fallback
    try:
        return get_curve(value)
    except (KeyError, ValueError):
        log.debug("Unknown animation curve %r, using %s", value, fallback.name)
        return fallback


def curve_from_plotly_easing(value: Any, fallback: Curve) -> Curve:
    """Translate a Plotly ``transition.easing`` name (``cubic-in-out``...)."""
    if not isinstance(value, str):
        return fallback
    s = value.strip().lower()
    if s == "linear":
        return CURVES["linear"]
    if s.startswith("bounce"):
        return CURVES["bounce_in"] if s in {"bounce-in", "bounce_in"} else CURVES["bounce_out"]
    if s.endswith("-in-out"):
        return CURVES["ease_in_out"]
    if s.endswith("-in"):
        return CURVES["ease_in"]
    if s.endswith("-out"):
        return CURVES["ease_out"]
    if s in {"quad", "cubic", "sin", "exp", "circle", "elastic", "back"}:
        return CURVES["ease_in_out"]
    return curve_from_json(value, fallback)
