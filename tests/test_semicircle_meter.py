import math

import pytest

from chartkit.core.scene import CircleItem, RectItem, WedgeItem
from chartkit.design.colors import RED
from chartkit.errors import ChartConfigError, ChartDataError
from chartkit.meter.models import MeterReading, SemicircleStyle, parse_semicircle_json
from chartkit.meter.painter import LEGEND_BAND, active_sweep, build_scene, hit_test, meter_layout


def test_reading_validation():
    with pytest.raises(ChartConfigError):
        MeterReading(101)
    with pytest.raises(ChartConfigError):
        MeterReading(50, previous=-1)
    with pytest.raises(ChartConfigError):
        SemicircleStyle(hollow_radius=1.0)
    with pytest.raises(ChartConfigError):
        SemicircleStyle(hollow_radius=0.0)


def test_displayed_value_tweens_from_previous():
    reading = MeterReading(80, previous=20)
    assert reading.displayed(0.0) == 20
    assert reading.displayed(0.5) == 50
    assert reading.displayed(1.0) == 80


def test_layout_sits_on_bottom_edge_below_legend():
    layout = meter_layout(SemicircleStyle(), 200, 140)
    assert layout.center == (100, 140)
    assert layout.outer_radius == 100
    assert layout.inner_radius == pytest.approx(60)
    short = meter_layout(SemicircleStyle(), 200, 100)
    assert short.outer_radius == 100 - LEGEND_BAND
    bare = meter_layout(SemicircleStyle(show_legend=False), 200, 100)
    assert bare.outer_radius == 100


def test_arcs_start_at_nine_oclock():
    scene = build_scene(MeterReading(25), SemicircleStyle(), 1.0, None, 200, 140)
    inactive, active = scene.of_type(WedgeItem)
    assert inactive.start_angle == pytest.approx(math.pi)
    assert inactive.sweep_angle == pytest.approx(math.pi)
    assert active.start_angle == pytest.approx(math.pi)
    assert active.sweep_angle == pytest.approx(active_sweep(25)) == pytest.approx(math.pi / 4)
    (hole,) = scene.of_type(CircleItem)
    assert hole.radius == pytest.approx(60)


def test_progress_zero_draws_no_active_arc():
    scene = build_scene(MeterReading(60), SemicircleStyle(), 0.0, None, 200, 140)
    assert [w.index for w in scene.of_type(WedgeItem)] == [1]
    assert "0%" in scene.texts()


def test_texts_and_legend():
    scene = build_scene(MeterReading(72), SemicircleStyle(), 1.0, None, 200, 140)
    texts = scene.texts()
    assert "72%" in texts
    assert "Active (72%)" in texts and "Inactive (28%)" in texts
    assert len(scene.of_type(RectItem)) == 2
    quiet = build_scene(MeterReading(72), SemicircleStyle(show_legend=False, show_percentage_text=False), 1.0, None, 200, 100)
    assert quiet.texts() == []


def test_custom_formatters():
    style = SemicircleStyle(
        percentage_formatter=lambda v: f"{v:.1f} pct",
        legend_formatter=lambda kind, v: f"{kind}={v:.0f}",
        legend_labels=("Done", "Left"),
    )
    texts = build_scene(MeterReading(40), style, 1.0, None, 200, 140).texts()
    assert {"40.0 pct", "Done=40", "Left=60"} <= set(texts)


def test_hit_test_arcs():
    style = SemicircleStyle()
    reading = MeterReading(50)
    # center (100, 140), ring between radius 60 and 100
    assert hit_test(reading, style, 200, 140, 20, 135) == 0  # left end of the arc
    assert hit_test(reading, style, 200, 140, 180, 135) == 1
    assert hit_test(reading, style, 200, 140, 100, 120) is None  # in the hole
    assert hit_test(reading, style, 200, 140, 100, 20) is None  # beyond the ring


def test_hover_lightens_arc():
    style = SemicircleStyle(active_color=RED)
    scene = build_scene(MeterReading(50), style, 1.0, 0, 200, 140)
    active = [w for w in scene.of_type(WedgeItem) if w.index == 0][0]
    assert active.fill == RED.lighten(0.1)


def test_parse_json():
    reading, style = parse_semicircle_json(
        '{"percentage": "64", "style": {"activeColor": "red", "hollowRadius": 0.5, "legendLabels": ["Used", "Free"]}}'
    )
    assert reading.percentage == 64.0
    assert style.active_color == RED
    assert style.hollow_radius == 0.5
    assert style.legend_labels == ("Used", "Free")
    gauge, _ = parse_semicircle_json({"data": [{"type": "indicator", "value": 12}]})
    assert gauge.percentage == 12.0
    with pytest.raises(ChartDataError):
        parse_semicircle_json({"style": {}})
    with pytest.raises(ChartConfigError):
        parse_semicircle_json({"value": 150})


def test_style_json_round_trip():
    style = SemicircleStyle(active_color=RED, hollow_radius=0.4, show_legend=False, legend_labels=("A", "B"))
    assert SemicircleStyle.from_json(style.to_json()) == style
