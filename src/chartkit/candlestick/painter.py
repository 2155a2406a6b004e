"""Candlestick geometry, hit-testing and scene building.

Candles sit in fixed-width slots (``candle_width * (1 + spacing)``) laid out
from the left edge of the plot area and shifted by a horizontal scroll
offset; only candles overlapping the plot area are drawn. Prices map
linearly between the lowest low and the highest high, and every price is
scaled toward the baseline by the animation progress.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..core.geometry import Point, Rect
from ..core.scene import PathItem, RectItem, Scene, TextItem, TextStyle
from ..core.tooltip import build_tooltip
from .models import CandlestickAxisConfig, CandlestickData, CandlestickStyle

__all__ = [
    "CandleGeometry",
    "CandlestickHover",
    "chart_area",
    "price_bounds",
    "candle_x",
    "max_scroll",
    "visible_indices",
    "candle_geometry",
    "tooltip_lines",
    "hit_test",
    "build_scene",
]

MAX_DATE_LABELS = 10
EMPTY_TEXT = "No data available"


@dataclass(frozen=True)
class CandleGeometry:
    index: int
    wick: Tuple[Point, Point]
    body: Rect


@dataclass(frozen=True)
class CandlestickHover:
    pointer: Point
    index: Optional[int] = None


def chart_area(style: CandlestickStyle, axis: CandlestickAxisConfig, width: float, height: float) -> Rect:
    pad = style.padding
    return Rect(
        pad.left + axis.y_axis_width,
        pad.top,
        max(0.0, width - pad.horizontal - axis.y_axis_width),
        max(0.0, height - pad.vertical - axis.x_axis_height),
    )


def price_bounds(data: Sequence[CandlestickData]) -> Tuple[float, float]:
    return min(c.low for c in data), max(c.high for c in data)


def candle_x(index: int, style: CandlestickStyle, area: Rect, scroll: float) -> float:
    return area.left + index * style.slot_width - scroll


def max_scroll(count: int, style: CandlestickStyle, area: Rect) -> float:
    """Offset that brings the last candle to the right edge (0 when all fit)."""
    return max(0.0, style.slot_width * count - area.width)


def visible_indices(count: int, style: CandlestickStyle, area: Rect, scroll: float) -> range:
    first = max(0, math.floor(scroll / style.slot_width))
    last = min(count, first + math.ceil(area.width / style.slot_width) + 1)
    return range(first, last)


def _price_y(price: float, lo: float, hi: float, area: Rect, progress: float) -> float:
    if hi <= lo:
        return area.bottom
    return area.bottom - (price - lo) / (hi - lo) * area.height * progress


def candle_geometry(
    data: Sequence[CandlestickData],
    style: CandlestickStyle,
    axis: CandlestickAxisConfig,
    progress: float,
    width: float,
    height: float,
    scroll: float = 0.0,
) -> List[CandleGeometry]:
    if not data:
        return []
    area = chart_area(style, axis, width, height)
    lo, hi = price_bounds(data)
    out: List[CandleGeometry] = []
    for i in visible_indices(len(data), style, area, scroll):
        x = candle_x(i, style, area, scroll)
        if x + style.candle_width < area.left or x > area.right:
            continue
        c = data[i]
        open_y = _price_y(c.open, lo, hi, area, progress)
        close_y = _price_y(c.close, lo, hi, area, progress)
        mid = x + style.candle_width / 2
        # bodies are clipped to the plot area; wicks outside it are dropped
        left, right = max(x, area.left), min(x + style.candle_width, area.right)
        body = Rect(left, min(open_y, close_y), max(0.0, right - left), abs(open_y - close_y))
        wick = ((mid, _price_y(c.high, lo, hi, area, progress)), (mid, _price_y(c.low, lo, hi, area, progress)))
        out.append(CandleGeometry(i, wick, body))
    return out


def tooltip_lines(candle: CandlestickData) -> List[str]:
    lines = [
        f"Date: {candle.date.strftime('%b %d, %Y')}",
        f"Open: {candle.open:.2f}",
        f"High: {candle.high:.2f}",
        f"Low: {candle.low:.2f}",
        f"Close: {candle.close:.2f}",
    ]
    if candle.volume is not None:
        lines.append(f"Volume: {candle.volume:,.0f}")
    return lines


def hit_test(
    data: Sequence[CandlestickData],
    style: CandlestickStyle,
    axis: CandlestickAxisConfig,
    width: float,
    height: float,
    x: float,
    y: float,
    scroll: float = 0.0,
) -> Optional[CandlestickHover]:
    """Pointer plus the candle whose body spans ``x``; ``None`` outside the plot area."""
    area = chart_area(style, axis, width, height)
    if not data or not area.contains(x, y):
        return None
    for i in visible_indices(len(data), style, area, scroll):
        left = candle_x(i, style, area, scroll)
        if left <= x <= left + style.candle_width:
            return CandlestickHover((x, y), i)
    return CandlestickHover((x, y))


def _axis_items(style: CandlestickStyle, area: Rect) -> list:
    return [
        PathItem(((area.left, area.top), (area.left, area.bottom)), stroke=style.grid_color),
        PathItem(((area.left, area.bottom), (area.right, area.bottom)), stroke=style.grid_color),
    ]


def _grid_items(
    data: Sequence[CandlestickData], style: CandlestickStyle, axis: CandlestickAxisConfig, area: Rect, scroll: float
) -> list:
    stroke = style.grid_color.with_alpha(0.2)
    items: list = []
    for i in range(1, axis.price_divisions):
        y = area.top + area.height / axis.price_divisions * i
        items.append(PathItem(((area.left, y), (area.right, y)), stroke=stroke))
    for i in visible_indices(len(data), style, area, scroll):
        x = candle_x(i, style, area, scroll)
        if i % axis.date_divisions == 0 and area.left <= x <= area.right:
            items.append(PathItem(((x, area.top), (x, area.bottom)), stroke=stroke))
    return items


def _label_items(
    data: Sequence[CandlestickData], style: CandlestickStyle, axis: CandlestickAxisConfig, area: Rect, scroll: float
) -> list:
    label_style = axis.label_style or TextStyle(color=style.grid_color, size=12.0)
    lo, hi = price_bounds(data)
    items: list = []
    for i in range(axis.price_divisions + 1):
        price = lo + (hi - lo) * i / axis.price_divisions
        y = area.bottom - i / axis.price_divisions * area.height
        items.append(TextItem((area.left - 8, y), axis.format_price(price), label_style, align="right", valign="middle"))
    visible = visible_indices(len(data), style, area, scroll)
    skip = math.ceil(len(visible) / MAX_DATE_LABELS) if len(visible) > MAX_DATE_LABELS else 1
    for n, i in enumerate(visible):
        if n % skip:
            continue
        x = candle_x(i, style, area, scroll) + style.candle_width / 2
        if area.left <= x <= area.right:
            items.append(TextItem((x, area.bottom + 8), axis.format_date(data[i].date), label_style, align="center"))
    return items


def build_scene(
    data: Sequence[CandlestickData],
    style: CandlestickStyle,
    axis: CandlestickAxisConfig,
    progress: float,
    hover: Optional[CandlestickHover],
    width: float,
    height: float,
    scroll: float = 0.0,
) -> Scene:
    scene = Scene(width, height, style.background_color)
    if not data:
        scene.add(
            TextItem((width / 2, height / 2), EMPTY_TEXT, TextStyle(color=style.grid_color, size=16.0),
                     align="center", valign="middle")
        )
        return scene
    area = chart_area(style, axis, width, height)
    scene.extend(_axis_items(style, area))
    if style.show_grid:
        scene.extend(_grid_items(data, style, axis, area, scroll))
    for geo in candle_geometry(data, style, axis, progress, width, height, scroll):
        color = style.color_for(data[geo.index])
        top, bottom = geo.wick
        if area.left <= top[0] <= area.right:
            scene.add(PathItem((top, bottom), stroke=color, stroke_width=style.wick_width))
        scene.add(RectItem(geo.body, color))
    scene.extend(_label_items(data, style, axis, area, scroll))
    if hover is not None:
        px, py = hover.pointer
        scene.add(
            PathItem(((px, area.top), (px, area.bottom)), stroke=style.vertical_line_color,
                     stroke_width=style.vertical_line_width)
        )
        if hover.index is not None and 0 <= hover.index < len(data):
            scene.extend(build_tooltip((px, py), tooltip_lines(data[hover.index]), style.tooltip_style, area))
    return scene
