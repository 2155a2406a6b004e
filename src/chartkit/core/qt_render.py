"""Render a :class:`~chartkit.core.scene.Scene` with ``QPainter``."""

from __future__ import annotations

import math
from typing import Optional

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QFontMetricsF, QLinearGradient, QPainter, QPainterPath, QPen

from ..design.colors import Color
from ..design.gradients import LinearGradient
from .scene import CircleItem, Fill, PathItem, RectItem, Scene, TextItem, WedgeItem

__all__ = ["to_qcolor", "to_qbrush", "render_scene"]


def to_qcolor(color: Color) -> QColor:
    return QColor(color.r, color.g, color.b, color.a)


def to_qbrush(fill: Optional[Fill]) -> QBrush:
    if fill is None:
        return QBrush(Qt.BrushStyle.NoBrush)
    if isinstance(fill, LinearGradient):
        grad = QLinearGradient(fill.x1, fill.y1, fill.x2, fill.y2)
        for stop in fill.stops:
            grad.setColorAt(stop.position, to_qcolor(stop.color))
        return QBrush(grad)
    return QBrush(to_qcolor(fill))


def _pen(stroke: Optional[Color], width: float) -> QPen:
    if stroke is None:
        return QPen(Qt.PenStyle.NoPen)
    pen = QPen(to_qcolor(stroke))
    pen.setWidthF(width)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    return pen


def _draw_text(p: QPainter, item: TextItem) -> None:
    font = QFont(p.font())
    font.setPointSizeF(item.style.size)
    font.setBold(item.style.bold)
    p.setFont(font)
    p.setPen(QPen(to_qcolor(item.style.color)))
    fm = QFontMetricsF(font)
    x, y = item.position
    width = fm.horizontalAdvance(item.text)
    if item.align == "center":
        x -= width / 2
    elif item.align == "right":
        x -= width
    if item.valign == "middle":
        baseline = y + (fm.ascent() - fm.descent()) / 2
    elif item.valign == "bottom":
        baseline = y - fm.descent()
    else:
        baseline = y + fm.ascent()
    p.drawText(QPointF(x, baseline), item.text)


def render_scene(p: QPainter, scene: Scene) -> None:
    p.setRenderHint(QPainter.RenderHint.Antialiasing, True)
    if scene.background is not None:
        p.fillRect(QRectF(0, 0, scene.width, scene.height), to_qcolor(scene.background))
    for item in scene:
        if isinstance(item, TextItem):
            _draw_text(p, item)
            continue
        if isinstance(item, RectItem):
            p.setPen(_pen(item.stroke, item.stroke_width))
            p.setBrush(to_qbrush(item.fill))
            r = item.rect
            rect = QRectF(r.left, r.top, r.width, r.height)
            if item.corner_radius > 0:
                p.drawRoundedRect(rect, item.corner_radius, item.corner_radius)
            else:
                p.drawRect(rect)
        elif isinstance(item, WedgeItem):
            p.setPen(_pen(item.stroke, 1.0))
            p.setBrush(to_qbrush(item.fill))
            cx, cy = item.center
            rect = QRectF(cx - item.radius, cy - item.radius, item.radius * 2, item.radius * 2)
            # Qt angles are counter-clockwise in 1/16 degree
            start = round(-math.degrees(item.start_angle) * 16)
            span = round(-math.degrees(item.sweep_angle) * 16)
            p.drawPie(rect, start, span)
        elif isinstance(item, CircleItem):
            p.setPen(_pen(item.stroke, item.stroke_width))
            p.setBrush(to_qbrush(item.fill))
            p.drawEllipse(QPointF(*item.center), item.radius, item.radius)
        elif isinstance(item, PathItem):
            if len(item.points) < 2:
                continue
            path = QPainterPath(QPointF(*item.points[0]))
            for pt in item.points[1:]:
                path.lineTo(QPointF(*pt))
            if item.closed:
                path.closeSubpath()
            p.setPen(_pen(item.stroke, item.stroke_width))
            p.setBrush(to_qbrush(item.fill))
            p.drawPath(path)
