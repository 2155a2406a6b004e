import json

import pytest

from chartkit.core.geometry import Padding
from chartkit.core.scene import RectItem
from chartkit.design.colors import BLUE, GREEN, RED, WHITE
from chartkit.errors import ChartConfigError, ChartDataError
from chartkit.stacked_bar.models import (
    StackedBarChartStyle,
    StackedBarData,
    StackedBarSegment,
    YAxisConfig,
    detect_format,
    parse_stacked_bar_json,
    to_plotly_json,
)
from chartkit.stacked_bar.painter import build_scene, chart_area, hit_test, segment_geometry, value_range

DATA = (
    StackedBarData("Jan", (StackedBarSegment(10, RED, "a"), StackedBarSegment(30, GREEN, "b"))),
    StackedBarData("Feb", (StackedBarSegment(20, RED, "a"), StackedBarSegment(60, GREEN, "b"))),
)
STYLE = StackedBarChartStyle(padding=Padding.all(20))


def test_segments_stack_and_scale_consistently():
    geo = segment_geometry(DATA, STYLE, 1.0, 420, 300)
    by_key = {(g.bar, g.segment): g.rect for g in geo}
    # largest total (80) fills the 260px area
    assert by_key[(1, 0)].height + by_key[(1, 1)].height == pytest.approx(260.0)
    assert by_key[(0, 0)].height / by_key[(1, 0)].height == pytest.approx(10 / 20)
    assert by_key[(0, 1)].height / by_key[(0, 0)].height == pytest.approx(3.0)
    assert by_key[(0, 0)].bottom == pytest.approx(280.0)
    assert by_key[(0, 1)].bottom == pytest.approx(by_key[(0, 0)].top)


def test_progress_zero_collapses_to_baseline():
    assert all(g.rect.height == 0 for g in segment_geometry(DATA, STYLE, 0.0, 420, 300))


def test_y_axis_range_and_width():
    style = StackedBarChartStyle(padding=Padding.all(20), y_axis=YAxisConfig(max_value=160, axis_width=40))
    assert value_range(DATA, style) == (0.0, 160)
    assert chart_area(style, 420, 300).left == 60.0
    tallest = sum(g.rect.height for g in segment_geometry(DATA, style, 1.0, 420, 300) if g.bar == 1)
    assert tallest == pytest.approx(130.0)
    scene = build_scene(DATA, style, 1.0, None, 420, 300)
    assert "160.0" in scene.texts() and "0.0" in scene.texts()


def test_hit_test_by_slot():
    assert hit_test(DATA, STYLE, 420, 300, 30, 100) == 0
    assert hit_test(DATA, STYLE, 420, 300, 390, 100) == 1
    assert hit_test(DATA, STYLE, 420, 300, 5, 100) is None


def test_hover_translucent_segments_and_outline():
    scene = build_scene(DATA, STYLE, 1.0, 1, 420, 300)
    fills = [r.fill for r in scene.of_type(RectItem) if r.fill is not None]
    assert fills == [RED, GREEN, RED.with_alpha(0.8), GREEN.with_alpha(0.8)]
    (outline,) = [r for r in scene.of_type(RectItem) if r.fill is None]
    assert outline.stroke == WHITE.with_alpha(0.3)
    assert outline.rect.bottom == pytest.approx(280.0)


def test_value_labels_only_when_segment_is_tall_enough():
    data = (StackedBarData("x", (StackedBarSegment(1), StackedBarSegment(99))),)
    scene = build_scene(data, STYLE, 1.0, None, 420, 300)
    assert "99.0" in scene.texts()
    assert "1.0" not in scene.texts()


def test_negative_segment_rejected():
    with pytest.raises(ChartDataError):
        StackedBarSegment(-1)
    with pytest.raises(ChartConfigError):
        YAxisConfig(divisions=0)


def test_detect_format():
    assert detect_format({"data": [{"x": ["a"], "y": [1]}]}) == "plotly"
    assert detect_format({"bars": []}) == "simple"
    assert detect_format([{"label": "a", "segments": []}]) == "simple"
    with pytest.raises(ChartDataError) as exc:
        detect_format({"rows": []})
    assert str(exc.value).startswith("Unsupported JSON format")


def test_parse_plotly_groups_by_category():
    doc = {
        "data": [
            {"type": "bar", "name": "Won", "x": ["Q1", "Q2"], "y": [3, 4], "marker": {"color": "#4caf50"}},
            {"type": "bar", "name": "Lost", "x": ["Q1", "Q2"], "y": [1, None]},
        ],
        "layout": {"barmode": "stack", "yaxis": {"range": [0, 10], "tickformat": ".1f"}},
    }
    config = parse_stacked_bar_json(json.dumps(doc))
    assert [b.label for b in config.data] == ["Q1", "Q2"]
    assert [s.value for s in config.data[1].segments] == [4.0, 0.0]
    assert config.data[0].segments[0].color == GREEN
    assert config.data[0].segments[1].label == "Lost"
    axis = config.style.y_axis
    assert (axis.min_value, axis.max_value) == (0.0, 10.0)
    assert axis.format(2) == "2.0"


def test_parse_rejects_mismatched_trace():
    with pytest.raises(ChartDataError) as exc:
        parse_stacked_bar_json({"data": [{"x": ["a", "b"], "y": [1]}]})
    assert "x and y arrays must have the same length" in str(exc.value)


def test_parse_simple_format():
    doc = {
        "bars": [
            {"label": "A", "segments": [{"value": 2, "color": "blue"}, {"value": 3, "label": "rest"}]},
            {"label": "B", "value": 5},
        ],
        "style": {"width": 300, "height": 200},
        "config": {"interactive": False},
    }
    config = parse_stacked_bar_json(doc)
    assert config.data[0].segments[0].color == BLUE
    assert config.data[0].total == 5
    assert config.data[1].segments[0].value == 5
    assert (config.width, config.height, config.interactive) == (300.0, 200.0, False)
    with pytest.raises(ChartDataError):
        parse_stacked_bar_json({"bars": []})


def test_plotly_export_round_trip():
    style = StackedBarChartStyle(
        bar_spacing=0.3,
        corner_radius=2.0,
        show_values=False,
        y_axis=YAxisConfig(min_value=0, max_value=100, divisions=4),
    )
    doc = to_plotly_json(DATA, style, width=500, height=250)
    assert doc["layout"]["barmode"] == "stack"
    assert doc["config"] == {"displayModeBar": False}
    config = parse_stacked_bar_json(json.dumps(doc))
    assert config.data == DATA
    assert config.style == style
    assert (config.width, config.height) == (500.0, 250.0)


def test_plotly_export_keeps_segment_labels_and_repeated_bars():
    data = (
        StackedBarData("Jan", (StackedBarSegment(5, RED, "rent"), StackedBarSegment(2, GREEN, "food"))),
        StackedBarData("Feb", (StackedBarSegment(7, BLUE, "salary"),)),
        StackedBarData("Q", (StackedBarSegment(1, RED),)),
        StackedBarData("Q", (StackedBarSegment(3, RED, "late"),)),
    )
    doc = to_plotly_json(data)
    assert doc["layout"]["xaxis"]["ticktext"] == ["Jan", "Feb", "Q", "Q"]
    config = parse_stacked_bar_json(json.dumps(doc))
    assert config.data == data
    assert config.data[1].segments[0].label == "salary"
    assert [len(b.segments) for b in config.data] == [2, 1, 1, 1]


def test_y_axis_single_bound_round_trip():
    for axis in (YAxisConfig(min_value=10.0), YAxisConfig(max_value=40.0)):
        style = StackedBarChartStyle(y_axis=axis)
        again = StackedBarChartStyle.from_json(json.loads(json.dumps(style.to_json())))
        assert again == style


def test_y_axis_dtick_is_a_step():
    axis = YAxisConfig.from_json({"range": [0, 100], "dtick": 25})
    assert axis.divisions == 4
    assert YAxisConfig.from_json({"range": [0, 100], "nticks": 3, "dtick": 25}).divisions == 3
    # a step without a closed range keeps the default
    assert YAxisConfig.from_json({"dtick": 25}).divisions == 5
