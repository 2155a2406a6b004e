"""Drawing primitives produced by chart painters.

A :class:`Scene` is a flat, ordered list of items in screen coordinates
(origin top-left, y pointing down, angles in radians measured clockwise
from 3 o'clock). Painters build scenes; renderers (``core.qt_render`` and
``export``) draw them. Keeping the scene toolkit-agnostic lets the geometry
be asserted directly in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from ..design.colors import Color, parse_color
from ..design.gradients import LinearGradient
from .geometry import Point, Rect

__all__ = [
    "Fill",
    "TextStyle",
    "RectItem",
    "WedgeItem",
    "CircleItem",
    "PathItem",
    "TextItem",
    "SceneItem",
    "Scene",
    "estimate_text_size",
]

Fill = Union[Color, LinearGradient]

T = TypeVar("T")


@dataclass(frozen=True)
class TextStyle:
    color: Color = Color(0x42, 0x42, 0x42)
    size: float = 12.0
    bold: bool = False

    def to_json(self) -> dict:
        return {"color": self.color.to_hex(), "size": self.size, "bold": self.bold}

    @classmethod
    def from_json(cls, raw, fallback: "TextStyle") -> "TextStyle":
        if not isinstance(raw, dict):
            return fallback
        size = raw.get("size")
        return cls(
            color=parse_color(raw.get("color"), fallback.color),
            size=float(size) if isinstance(size, (int, float)) else fallback.size,
            bold=bool(raw.get("bold", fallback.bold)),
        )


def estimate_text_size(text: str, size: float) -> Tuple[float, float]:
    """Approximate (width, height) of a single line of text.

    Used where layout depends on label size (stacked bar labels, legends)
    so painters stay independent of font metrics.
    """
    return len(text) * size * 0.6, size * 1.2


@dataclass(frozen=True)
class RectItem:
    rect: Rect
    fill: Optional[Fill]
    corner_radius: float = 0.0
    stroke: Optional[Color] = None
    stroke_width: float = 1.0


@dataclass(frozen=True)
class WedgeItem:
    center: Point
    radius: float
    start_angle: float
    sweep_angle: float
    fill: Fill
    stroke: Optional[Color] = None
    index: int = -1


@dataclass(frozen=True)
class CircleItem:
    center: Point
    radius: float
    fill: Optional[Fill]
    stroke: Optional[Color] = None
    stroke_width: float = 1.0


@dataclass(frozen=True)
class PathItem:
    points: Tuple[Point, ...]
    stroke: Optional[Color] = None
    stroke_width: float = 1.0
    fill: Optional[Fill] = None
    closed: bool = False


@dataclass(frozen=True)
class TextItem:
    position: Point
    text: str
    style: TextStyle = TextStyle()
    align: str = "left"  # left | center | right
    valign: str = "top"  # top | middle | bottom


SceneItem = Union[RectItem, WedgeItem, CircleItem, PathItem, TextItem]


@dataclass
class Scene:
    width: float
    height: float
    background: Optional[Color] = None
    items: List[SceneItem] = field(default_factory=list)

    def add(self, item: SceneItem) -> None:
        self.items.append(item)

    def extend(self, items: Sequence[SceneItem]) -> None:
        self.items.extend(items)

    def of_type(self, kind: Type[T]) -> List[T]:
        return [it for it in self.items if isinstance(it, kind)]

    def texts(self) -> List[str]:
        return [it.text for it in self.of_type(TextItem)]

    def __iter__(self) -> Iterator[SceneItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
