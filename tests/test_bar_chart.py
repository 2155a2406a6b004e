import json

import pytest

from chartkit.bar.models import BarChartConfig, BarChartData, BarChartStyle, parse_bar_json
from chartkit.bar.painter import bar_geometry, build_scene, hit_test
from chartkit.core.geometry import Padding
from chartkit.core.scene import RectItem
from chartkit.design.colors import BLUE, GREEN, RED, Color
from chartkit.design.gradients import LinearGradient
from chartkit.errors import ChartConfigError, ChartDataError

DATA = (BarChartData(10, "A"), BarChartData(40, "B"), BarChartData(20, "C"))
STYLE = BarChartStyle(padding=Padding.all(20))


def test_heights_proportional_to_values():
    bars = bar_geometry(DATA, STYLE, 1.0, 400, 300)
    heights = [b.rect.height for b in bars]
    # chart area is 260px tall; the max value fills it
    assert heights[1] == pytest.approx(260.0)
    assert heights[0] / heights[1] == pytest.approx(10 / 40)
    assert heights[2] / heights[1] == pytest.approx(20 / 40)
    assert all(b.rect.bottom == pytest.approx(280.0) for b in bars)


def test_bars_centered_in_equal_slots():
    bars = bar_geometry(DATA, STYLE, 1.0, 400, 300)
    slot = 360 / 3
    for i, bar in enumerate(bars):
        assert bar.rect.width == pytest.approx(slot * 0.8)
        assert bar.rect.center[0] == pytest.approx(20 + slot * (i + 0.5))


def test_progress_zero_is_degenerate_and_half_scales():
    assert all(b.rect.height == 0 for b in bar_geometry(DATA, STYLE, 0.0, 400, 300))
    half = bar_geometry(DATA, STYLE, 0.5, 400, 300)
    assert half[1].rect.height == pytest.approx(130.0)


def test_non_positive_max_draws_flat_bars():
    bars = bar_geometry((BarChartData(0, "a"), BarChartData(-3, "b")), STYLE, 1.0, 400, 300)
    assert [b.rect.height for b in bars] == [0.0, 0.0]


def test_hit_test_by_slot():
    assert hit_test(DATA, STYLE, 400, 300, 25, 100) == 0
    assert hit_test(DATA, STYLE, 400, 300, 200, 290) == 1
    assert hit_test(DATA, STYLE, 400, 300, 379, 10) == 2
    assert hit_test(DATA, STYLE, 400, 300, 5, 100) is None
    assert hit_test((), STYLE, 400, 300, 50, 50) is None


def test_hovered_bar_is_translucent_and_outlined():
    scene = build_scene(DATA, STYLE, 1.0, 1, 400, 300)
    rects = scene.of_type(RectItem)
    outlines = [r for r in rects if r.fill is None]
    assert len(outlines) == 1 and outlines[0].stroke_width == 2.0
    hovered_fill = [r.fill for r in rects if r.fill is not None][1]
    assert hovered_fill == BLUE.with_alpha(0.8)


def test_scene_texts_show_values_and_labels():
    scene = build_scene(DATA, STYLE, 1.0, None, 400, 300)
    texts = scene.texts()
    assert {"10.0", "40.0", "20.0", "A", "B", "C"} <= set(texts)
    quiet = build_scene(DATA, BarChartStyle(show_values=False, show_labels=False), 1.0, None, 400, 300)
    assert quiet.texts() == []


def test_gradient_fill_runs_bottom_to_top():
    style = BarChartStyle(gradient_effect=True, gradient_colors=(RED, GREEN))
    bar = bar_geometry(DATA, style, 1.0, 400, 300)[0]
    assert isinstance(bar.fill, LinearGradient)
    assert bar.fill.y1 == pytest.approx(bar.rect.bottom)
    assert bar.fill.y2 == pytest.approx(bar.rect.top)
    assert bar.fill.stops[0].color == RED


def test_per_bar_color_wins():
    bars = bar_geometry((BarChartData(5, "x", color=RED),), STYLE, 1.0, 200, 200)
    assert bars[0].fill == RED


def test_style_validation():
    with pytest.raises(ChartConfigError):
        BarChartStyle(bar_spacing=1.0)
    with pytest.raises(ChartConfigError):
        BarChartStyle(horizontal_grid_lines=0)


def test_parse_plotly_trace():
    doc = {
        "data": [{"type": "bar", "x": ["Mon", "Tue"], "y": [3, "4.5"], "marker": {"color": ["#ff0000", "blue"]}}],
        "layout": {"bargap": 0.3, "width": 500, "height": 250, "transition": {"duration": 800, "easing": "linear"}},
    }
    config = parse_bar_json(json.dumps(doc))
    assert [d.value for d in config.data] == [3.0, 4.5]
    assert config.data[0].color == Color(255, 0, 0)
    assert config.style.bar_spacing == pytest.approx(0.3)
    assert config.style.animation_duration_ms == 800
    assert config.style.animation_curve.name == "linear"
    assert (config.width, config.height) == (500.0, 250.0)


def test_parse_rejects_bad_documents():
    with pytest.raises(ChartDataError):
        parse_bar_json({"layout": {}})
    with pytest.raises(ChartDataError) as exc:
        parse_bar_json({"data": [{"x": ["a"], "y": ["nope"]}]})
    assert exc.value.context == {"index": 0}


def test_config_json_round_trip():
    config = BarChartConfig(
        data=(BarChartData(1.5, "a", color=RED), BarChartData(2, "b")),
        style=BarChartStyle(bar_color=GREEN, bar_spacing=0.4, corner_radius=0, show_grid=False),
        width=640,
        height=320,
    )
    again = parse_bar_json(json.dumps(config.to_json()))
    assert again == config
