"""Color values and CSS-like color parsing.

Colors are immutable RGBA tuples (0..255 channels). Parsing is permissive:
Plotly documents carry colors as ``#hex``, ``rgb()``, ``rgba()`` or named
strings, and anything we cannot read falls back to the caller's default
instead of failing the whole chart.
"""

from __future__ import annotations

import colorsys
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

__all__ = [
    "Color",
    "NAMED_COLORS",
    "parse_color",
    "BLUE",
    "RED",
    "GREEN",
    "YELLOW",
    "PURPLE",
    "ORANGE",
    "GREY",
    "BLACK",
    "WHITE",
    "TRANSPARENT",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            v = getattr(self, name)
            if not (0 <= v <= 255):
                raise ValueError(f"Color channel {name} out of range [0,255]: {v}")

    @property
    def alpha_f(self) -> float:
        return self.a / 255.0

    def with_alpha(self, alpha: float) -> "Color":
        """Return a copy with opacity ``alpha`` in [0, 1]."""
        alpha = max(0.0, min(1.0, float(alpha)))
        return Color(self.r, self.g, self.b, round(alpha * 255))

    def lighten(self, amount: float = 0.1) -> "Color":
        """Raise HSL lightness by ``amount`` (clamped to 1.0)."""
        h, lum, s = colorsys.rgb_to_hls(self.r / 255.0, self.g / 255.0, self.b / 255.0)
        lum = max(0.0, min(1.0, lum + amount))
        r, g, b = colorsys.hls_to_rgb(h, lum, s)
        return Color(round(r * 255), round(g * 255), round(b * 255), self.a)

    def to_hex(self) -> str:
        if self.a == 255:
            return f"#{self.r:02x}{self.g:02x}{self.b:02x}"
        return f"#{self.a:02x}{self.r:02x}{self.g:02x}{self.b:02x}"

    def to_rgba_f(self) -> tuple[float, float, float, float]:
        return (self.r / 255.0, self.g / 255.0, self.b / 255.0, self.alpha_f)

    def __str__(self) -> str:  # pragma: no cover - debug aid
        return self.to_hex()


# Material palette primaries used as defaults across chart styles
BLUE = Color(0x21, 0x96, 0xF3)
RED = Color(0xF4, 0x43, 0x36)
GREEN = Color(0x4C, 0xAF, 0x50)
YELLOW = Color(0xFF, 0xEB, 0x3B)
PURPLE = Color(0x9C, 0x27, 0xB0)
ORANGE = Color(0xFF, 0x98, 0x00)
GREY = Color(0x9E, 0x9E, 0x9E)
BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)
TRANSPARENT = Color(0, 0, 0, 0)

NAMED_COLORS: Dict[str, Color] = {
    "blue": BLUE,
    "red": RED,
    "green": GREEN,
    "yellow": YELLOW,
    "purple": PURPLE,
    "orange": ORANGE,
    "grey": GREY,
    "gray": GREY,
    "black": BLACK,
    "white": WHITE,
    "transparent": TRANSPARENT,
    "pink": Color(0xE9, 0x1E, 0x63),
    "teal": Color(0x00, 0x96, 0x88),
    "cyan": Color(0x00, 0xBC, 0xD4),
    "amber": Color(0xFF, 0xC1, 0x07),
    "indigo": Color(0x3F, 0x51, 0xB5),
    "brown": Color(0x79, 0x55, 0x48),
    "lightblue": Color(0x03, 0xA9, 0xF4),
    "lightgreen": Color(0x8B, 0xC3, 0x4A),
}

_RGB_RE = re.compile(r"^rgba?\(\s*([^)]*)\)$")


def _parse_hex(s: str) -> Color:
    digits = s[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) == 6:
        return Color(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
    if len(digits) == 8:
        return Color(
            int(digits[2:4], 16), int(digits[4:6], 16), int(digits[6:8], 16), int(digits[0:2], 16)
        )
    raise ValueError(f"Invalid hex color: {s}")


def _parse_rgb(s: str) -> Color:
    m = _RGB_RE.match(s)
    if m is None:
        raise ValueError(f"Invalid rgb color: {s}")
    parts = [p.strip() for p in m.group(1).split(",")]
    if len(parts) not in (3, 4):
        raise ValueError(f"rgb()/rgba() requires 3 or 4 components: {s}")
    r, g, b = (max(0, min(255, round(float(p)))) for p in parts[:3])
    a = 255
    if len(parts) == 4:
        a = round(max(0.0, min(1.0, float(parts[3]))) * 255)
    return Color(r, g, b, a)


def parse_color(value: Any, fallback: Optional[Color] = None) -> Optional[Color]:
    """Parse ``value`` into a :class:`Color`.

    Accepts Color instances, ``#rgb``/``#rrggbb``/``#aarrggbb``, ``rgb(r,g,b)``,
    ``rgba(r,g,b,a)`` with alpha in 0..1, and the names in ``NAMED_COLORS``.
    Unreadable input returns ``fallback``.
    """
    if isinstance(value, Color):
        return value
    if not isinstance(value, str):
        return fallback
    s = value.strip().lower()
    try:
        if s.startswith("#"):
            return _parse_hex(s)
        if s.startswith("rgb"):
            return _parse_rgb(s)
    except ValueError:
        log.debug("Unparseable color %r, using fallback", value)
        return fallback
    named = NAMED_COLORS.get(s.replace(" ", ""))
    if named is None:
        log.debug("Unknown color name %r, using fallback", value)
        return fallback
    return named
