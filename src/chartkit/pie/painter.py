"""Pie chart geometry: slice normalization, layout, hit-testing, scene.

Slices are drawn clockwise from ``style.start_angle``. Each slice sweeps
``size / total * 2pi * progress`` where ``size`` comes from
:func:`normalize_slices`, so undersized slices can be raised to a minimum
visible share without changing the total.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core.geometry import Point, Rect
from ..core.scene import CircleItem, PathItem, RectItem, Scene, TextItem, TextStyle, WedgeItem, estimate_text_size
from ..design.colors import BLACK, WHITE
from .models import LabelPosition, LegendPosition, PieChartData, PieChartStyle

__all__ = [
    "PieLayout",
    "normalize_slices",
    "pie_layout",
    "slice_angles",
    "hit_test",
    "build_scene",
    "LEGEND_WIDTH",
    "LEGEND_ITEM_HEIGHT",
]

log = logging.getLogger(__name__)

LEGEND_WIDTH = 120.0
LEGEND_ITEM_HEIGHT = 24.0
LEGEND_ICON = 16.0
LEGEND_GAP = 8.0
INSIDE_LABEL_RATIO = 0.7
CONNECTOR_RUN = 20.0
LABEL_TEXT_GAP = 25.0

_TEXT_DARK = BLACK.with_alpha(0.87)


@dataclass(frozen=True)
class PieLayout:
    center: Point
    radius: float
    inner_radius: float


def normalize_slices(values: Sequence[float], min_percent: float) -> List[float]:
    """Raise slices below ``min_percent`` of the total to that floor.

    Fixed-point iteration over the set of clamped slices: clamped slices get
    exactly the floor, the others are rescaled proportionally into what is
    left of the total, and any slice that drops below the floor joins the
    clamped set for the next round. The total is preserved. When the floor
    cannot be met by every slice (``min_percent * n > 100``) all slices get
    an equal share. Negative values count as zero.
    """
    sizes = np.clip(np.asarray(values, dtype=float), 0.0, None)
    n = len(sizes)
    total = float(sizes.sum())
    if n == 0 or total <= 0 or min_percent <= 0:
        return sizes.tolist()
    floor = total * min_percent / 100.0
    if floor * n >= total:
        return [total / n] * n
    clamped = np.zeros(n, dtype=bool)
    rounds = 0
    while True:
        rounds += 1
        free = ~clamped
        remaining = total - floor * clamped.sum()
        free_total = sizes[free].sum()
        result = np.where(clamped, floor, 0.0)
        if free_total > 0:
            result[free] = sizes[free] / free_total * remaining
        else:
            result[free] = remaining / free.sum()
        newly = free & (result < floor - 1e-9)
        if not newly.any():
            log.debug("Slice normalization converged after %d round(s)", rounds)
            return result.tolist()
        clamped |= newly


def pie_layout(style: PieChartStyle, width: float, height: float) -> PieLayout:
    pad = style.padding
    radius = max(0.0, min((width - pad.horizontal) / 2, (height - pad.vertical) / 2))
    if style.chart_radius is not None:
        radius = min(radius, style.chart_radius)
    align = style.chart_alignment
    if align.horizontal == "left":
        cx = radius + pad.left
    elif align.horizontal == "right":
        cx = width - (pad.right + radius)
    else:
        cx = width / 2
    if align.vertical == "top":
        cy = radius + pad.top
    elif align.vertical == "bottom":
        cy = height - (pad.bottom + radius)
    else:
        cy = height / 2
    return PieLayout((cx, cy), radius, radius * style.hole_radius)


def slice_angles(
    data: Sequence[PieChartData], style: PieChartStyle, progress: float
) -> List[Tuple[float, float]]:
    """``(start, sweep)`` in radians for each slice at ``progress``."""
    sizes = normalize_slices([d.value for d in data], style.min_size_percent)
    total = sum(sizes)
    start = math.radians(style.start_angle)
    out: List[Tuple[float, float]] = []
    for size in sizes:
        sweep = size / total * 2 * math.pi * progress if total > 0 else 0.0
        out.append((start, sweep))
        start += sweep
    return out


def hit_test(
    data: Sequence[PieChartData],
    style: PieChartStyle,
    width: float,
    height: float,
    x: float,
    y: float,
    hovered: Optional[int] = None,
) -> Optional[int]:
    """Index of the slice under ``(x, y)`` or ``None`` (outside ring or hole).

    The ``hovered`` slice is drawn at ``radius * hover_scale`` and keeps the
    pointer over that enlarged outer band.
    """
    if not data:
        return None
    layout = pie_layout(style, width, height)
    dx = x - layout.center[0]
    dy = y - layout.center[1]
    dist = math.hypot(dx, dy)
    reach = layout.radius * max(1.0, style.hover_scale) if hovered is not None else layout.radius
    if dist < layout.inner_radius or dist > reach:
        return None
    angle = (math.degrees(math.atan2(dy, dx)) + 360) % 360
    angle = (angle - style.start_angle + 360) % 360
    sizes = normalize_slices([d.value for d in data], style.min_size_percent)
    total = sum(sizes)
    if total <= 0:
        return None
    current = 0.0
    for i, size in enumerate(sizes):
        sweep = size / total * 360
        if current <= angle < current + sweep:
            if dist > layout.radius and i != hovered:
                return None
            return i
        current += sweep
    return None


def _label_items(
    point: PieChartData,
    percent: float,
    layout: PieLayout,
    start: float,
    sweep: float,
    style: PieChartStyle,
) -> list:
    mid = start + sweep / 2
    inside = style.label_position is LabelPosition.INSIDE
    r = layout.radius
    label_r = r * INSIDE_LABEL_RATIO if inside else r + style.label_offset
    cx, cy = layout.center
    x = cx + math.cos(mid) * label_r
    y = cy + math.sin(mid) * label_r
    right_side = math.cos(mid) > 0
    default_color = WHITE if inside else _TEXT_DARK
    text_style = style.label_style or TextStyle(color=default_color, size=12.0)
    parts = []
    if style.show_labels:
        parts.append(point.label)
    if style.show_values:
        parts.append(f"({percent:.1f}%)")
    items: list = []
    if not inside and style.show_connector_lines:
        inner = (cx + math.cos(mid) * r, cy + math.sin(mid) * r)
        elbow = (cx + math.cos(mid) * (r + style.label_offset / 2), cy + math.sin(mid) * (r + style.label_offset / 2))
        end = (x + CONNECTOR_RUN if right_side else x - CONNECTOR_RUN, y)
        items.append(PathItem((inner, elbow, end), stroke=style.connector_line_color, stroke_width=style.connector_line_width))
    text = " ".join(parts)
    if inside:
        items.append(TextItem((x, y), text, text_style, align="center", valign="middle"))
    elif right_side:
        items.append(TextItem((x + LABEL_TEXT_GAP, y), text, text_style, align="left", valign="middle"))
    else:
        items.append(TextItem((x - LABEL_TEXT_GAP, y), text, text_style, align="right", valign="middle"))
    return items


def _legend_items(data: Sequence[PieChartData], style: PieChartStyle, hovered: Optional[int], width: float, height: float) -> list:
    pad = style.padding
    items: list = []
    x = width - pad.right - LEGEND_WIDTH
    y = pad.top
    if style.legend_position is LegendPosition.BOTTOM:
        x = pad.left
        y = height - pad.bottom - LEGEND_ITEM_HEIGHT
    for i, point in enumerate(data):
        color = style.color_for(i, point)
        is_hovered = hovered == i
        base_text = style.label_style or TextStyle(color=_TEXT_DARK, size=12.0)
        text_style = TextStyle(base_text.color, base_text.size, bold=base_text.bold or is_hovered)
        items.append(
            RectItem(Rect(x, y + 4, LEGEND_ICON, LEGEND_ICON), color.lighten(0.1) if is_hovered else color, corner_radius=4.0)
        )
        items.append(TextItem((x + LEGEND_ICON + LEGEND_GAP, y + 4), point.label, text_style))
        if style.legend_position is LegendPosition.BOTTOM:
            text_w, _ = estimate_text_size(point.label, text_style.size)
            x += LEGEND_ICON + LEGEND_GAP + text_w + LEGEND_ICON
        else:
            y += LEGEND_ITEM_HEIGHT
    return items


def build_scene(
    data: Sequence[PieChartData],
    style: PieChartStyle,
    progress: float,
    hovered: Optional[int],
    width: float,
    height: float,
) -> Scene:
    scene = Scene(width, height, style.background_color)
    if not data:
        return scene
    layout = pie_layout(style, width, height)
    angles = slice_angles(data, style, progress)
    for i, (point, (start, sweep)) in enumerate(zip(data, angles)):
        color = style.color_for(i, point)
        radius = layout.radius
        if hovered == i:
            color = color.lighten(0.1)
            radius *= style.hover_scale
        scene.add(WedgeItem(layout.center, radius, start, sweep, color, index=i))
    if style.hole_radius > 0:
        scene.add(CircleItem(layout.center, layout.inner_radius, style.background_color))
    if style.show_labels or style.show_values:
        total = sum(max(0.0, d.value) for d in data)
        for i, (point, (start, sweep)) in enumerate(zip(data, angles)):
            if sweep <= 0:
                continue
            if style.show_label_only_on_hover and hovered != i:
                continue
            percent = max(0.0, point.value) / total * 100 if total > 0 else 0.0
            scene.extend(_label_items(point, percent, layout, start, sweep, style))
    if style.show_legend:
        scene.extend(_legend_items(data, style, hovered, width, height))
    return scene
