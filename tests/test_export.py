import pytest
from matplotlib.patches import Circle, FancyBboxPatch, Polygon, Rectangle, Wedge

from chartkit.core.geometry import Rect
from chartkit.core.scene import CircleItem, PathItem, RectItem, Scene, TextItem, TextStyle, WedgeItem
from chartkit.design.colors import BLUE, RED, WHITE
from chartkit.design.gradients import vertical_gradient
from chartkit.export import export_scene, export_widget, render_figure


def _scene():
    scene = Scene(200, 100, WHITE)
    scene.add(RectItem(Rect(10, 10, 40, 60), BLUE))
    scene.add(RectItem(Rect(60, 10, 40, 60), RED, corner_radius=4.0))
    scene.add(WedgeItem((150, 50), 30, 0.0, 1.5, RED))
    scene.add(CircleItem((150, 50), 10, WHITE))
    scene.add(PathItem(((0, 90), (200, 90)), stroke=BLUE, stroke_width=2.0))
    scene.add(PathItem(((0, 0), (10, 10), (0, 10)), fill=BLUE, closed=True))
    scene.add(TextItem((100, 5), "Title", TextStyle(size=12, bold=True), align="center"))
    return scene


def test_render_figure_replays_items():
    fig = render_figure(_scene(), dpi=100)
    ax = fig.axes[0]
    kinds = [type(p) for p in ax.patches]
    assert kinds.count(Rectangle) == 1
    assert kinds.count(FancyBboxPatch) == 1
    assert kinds.count(Wedge) == 1
    assert kinds.count(Circle) == 1
    assert kinds.count(Polygon) == 1
    assert len(ax.lines) == 1
    assert [t.get_text() for t in ax.texts] == ["Title"]
    assert tuple(fig.get_size_inches()) == pytest.approx((2.0, 1.0))
    assert ax.get_ylim() == (100, 0)


def test_gradient_fill_becomes_clipped_image():
    scene = Scene(100, 100, None)
    gradient = vertical_gradient(0, 100, [BLUE, WHITE])
    scene.add(PathItem(((0, 100), (50, 20), (100, 100)), fill=gradient, closed=True))
    ax = render_figure(scene, dpi=100).axes[0]
    assert len(ax.images) == 1
    assert ax.images[0].get_clip_path() is not None


@pytest.mark.parametrize("fmt", ["png", "svg"])
def test_export_scene_writes_file(tmp_path, fmt):
    target = tmp_path / f"chart.{fmt}"
    export_scene(_scene(), target, format=fmt)
    data = target.read_bytes()
    if fmt == "png":
        assert data.startswith(b"\x89PNG")
    else:
        assert b"<svg" in data


def test_export_rejects_unknown_format(tmp_path):
    with pytest.raises(ValueError, match="png' or 'svg"):
        export_scene(_scene(), tmp_path / "chart.pdf", format="pdf")


def test_export_widget_uses_current_frame(tmp_path):
    class _Stub:
        def render_scene(self):
            return _scene()

    target = tmp_path / "w.png"
    export_widget(_Stub(), target)
    assert target.stat().st_size > 0
