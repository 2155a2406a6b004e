"""Static export of chart scenes through matplotlib.

A scene is replayed onto a pixel-sized ``Figure`` whose single axes spans
the whole canvas with the y axis inverted, so scene coordinates map 1:1
onto data coordinates. Gradient fills are drawn as an ``imshow`` image
clipped to the filled patch.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional, Union

import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Circle, FancyBboxPatch, Patch, Polygon, Rectangle, Wedge

from config import settings

from .core.scene import CircleItem, Fill, PathItem, RectItem, Scene, TextItem, WedgeItem
from .design.colors import Color
from .design.gradients import LinearGradient

__all__ = ["render_figure", "export_scene", "export_widget"]

log = logging.getLogger(__name__)

_VALIGN = {"top": "top", "middle": "center", "bottom": "bottom"}


def _rgba(color: Optional[Color]):
    return "none" if color is None else color.to_rgba_f()


def _gradient_image(ax: Axes, patch: Patch, gradient: LinearGradient) -> None:
    x0, y0, x1, y1 = _patch_bounds(patch)
    if x1 <= x0 or y1 <= y0:
        return
    cols = max(2, int(math.ceil(x1 - x0)))
    rows = max(2, int(math.ceil(y1 - y0)))
    xs, ys = np.meshgrid(np.linspace(x0, x1, cols), np.linspace(y0, y1, rows))
    dx, dy = gradient.x2 - gradient.x1, gradient.y2 - gradient.y1
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        t = np.zeros_like(xs)
    else:
        t = ((xs - gradient.x1) * dx + (ys - gradient.y1) * dy) / length_sq
    image = ax.imshow(
        gradient.sample(t),
        extent=(x0, x1, y1, y0),
        origin="upper",
        interpolation="bilinear",
        aspect="auto",
    )
    image.set_clip_path(patch)


def _patch_bounds(patch: Patch):
    verts = patch.get_path().transformed(patch.get_patch_transform()).vertices
    if len(verts) == 0:
        return 0.0, 0.0, 0.0, 0.0
    return verts[:, 0].min(), verts[:, 1].min(), verts[:, 0].max(), verts[:, 1].max()


def _add_patch(ax: Axes, patch: Patch, fill: Optional[Fill]) -> None:
    if isinstance(fill, LinearGradient):
        patch.set_facecolor("none")
        ax.add_patch(patch)
        _gradient_image(ax, patch, fill)
    else:
        patch.set_facecolor(_rgba(fill))
        ax.add_patch(patch)


def _draw_rect(ax: Axes, item: RectItem) -> None:
    r = item.rect
    kwargs = dict(
        edgecolor=_rgba(item.stroke),
        linewidth=item.stroke_width if item.stroke is not None else 0,
    )
    if item.corner_radius > 0:
        radius = min(item.corner_radius, r.width / 2, r.height / 2)
        patch = FancyBboxPatch(
            (r.left, r.top), r.width, r.height, boxstyle=f"round,pad=0,rounding_size={radius}", **kwargs
        )
    else:
        patch = Rectangle((r.left, r.top), r.width, r.height, **kwargs)
    _add_patch(ax, patch, item.fill)


def _draw_wedge(ax: Axes, item: WedgeItem) -> None:
    # with the y axis inverted, matplotlib's counter-clockwise data angles are
    # the scene's clockwise screen angles
    start = math.degrees(item.start_angle)
    end = math.degrees(item.start_angle + item.sweep_angle)
    if end < start:
        start, end = end, start
    patch = Wedge(
        item.center,
        item.radius,
        start,
        end,
        edgecolor=_rgba(item.stroke),
        linewidth=1 if item.stroke is not None else 0,
    )
    _add_patch(ax, patch, item.fill)


def _draw_circle(ax: Axes, item: CircleItem) -> None:
    patch = Circle(
        item.center,
        item.radius,
        edgecolor=_rgba(item.stroke),
        linewidth=item.stroke_width if item.stroke is not None else 0,
    )
    _add_patch(ax, patch, item.fill)


def _draw_path(ax: Axes, item: PathItem) -> None:
    if len(item.points) < 2:
        return
    if item.closed or item.fill is not None:
        patch = Polygon(
            np.asarray(item.points, dtype=float),
            closed=True,
            edgecolor=_rgba(item.stroke),
            linewidth=item.stroke_width if item.stroke is not None else 0,
        )
        _add_patch(ax, patch, item.fill)
        return
    if item.stroke is None:
        return
    xs, ys = zip(*item.points)
    ax.plot(xs, ys, color=item.stroke.to_rgba_f(), linewidth=item.stroke_width, solid_capstyle="round")


def _draw_text(ax: Axes, item: TextItem) -> None:
    ax.text(
        item.position[0],
        item.position[1],
        item.text,
        color=item.style.color.to_rgba_f(),
        fontsize=item.style.size,
        fontweight="bold" if item.style.bold else "normal",
        ha=item.align,
        va=_VALIGN.get(item.valign, "top"),
    )


def render_figure(scene: Scene, *, dpi: int = settings.EXPORT_DPI) -> Figure:
    """Replay ``scene`` onto a new matplotlib figure sized in pixels."""
    fig = Figure(figsize=(max(scene.width, 1) / dpi, max(scene.height, 1) / dpi), dpi=dpi)
    if scene.background is not None:
        fig.patch.set_facecolor(scene.background.to_rgba_f())
    else:
        fig.patch.set_alpha(0.0)
    ax = fig.add_axes((0, 0, 1, 1))
    ax.set_xlim(0, scene.width)
    ax.set_ylim(scene.height, 0)
    ax.set_axis_off()
    ax.patch.set_alpha(0.0)
    for item in scene:
        if isinstance(item, RectItem):
            _draw_rect(ax, item)
        elif isinstance(item, WedgeItem):
            _draw_wedge(ax, item)
        elif isinstance(item, CircleItem):
            _draw_circle(ax, item)
        elif isinstance(item, PathItem):
            _draw_path(ax, item)
        elif isinstance(item, TextItem):
            _draw_text(ax, item)
    # keep the pixel mapping fixed after patches autoscale
    ax.set_xlim(0, scene.width)
    ax.set_ylim(scene.height, 0)
    return fig


def export_scene(
    scene: Scene,
    path: Union[str, Path],
    *,
    format: str = "png",
    dpi: int = settings.EXPORT_DPI,
) -> None:
    """Render ``scene`` and save it as PNG or SVG.

    Args:
        scene: Scene produced by a painter or ``widget.render_scene()``.
        path: Destination file path (existing directory required).
        format: 'png' or 'svg'.
        dpi: Raster resolution for PNG.
    """
    fmt = format.lower()
    if fmt not in settings.EXPORT_FORMATS:
        raise ValueError("format must be 'png' or 'svg'")
    fig = render_figure(scene, dpi=dpi)
    fig.savefig(str(path), format=fmt, dpi=dpi if fmt == "png" else None, facecolor=fig.get_facecolor())
    log.debug("exported %dx%d scene to %s", scene.width, scene.height, path)


def export_widget(widget, path: Union[str, Path], *, format: str = "png", dpi: int = settings.EXPORT_DPI) -> None:
    """Export the current frame of a chart widget."""
    export_scene(widget.render_scene(), path, format=format, dpi=dpi)
