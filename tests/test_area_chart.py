import pytest

from chartkit.area.models import AreaChartStyle, AreaPoint, AreaSeries, TooltipConfig, parse_area_json, plotly_title
from chartkit.area.painter import build_scene, hit_test, revealed_path, series_points, value_bounds, chart_area
from chartkit.core.geometry import Padding
from chartkit.core.scene import CircleItem, PathItem, RectItem
from chartkit.design.colors import BLUE, RED
from chartkit.design.gradients import LinearGradient
from chartkit.errors import ChartConfigError, ChartDataError

STYLE = AreaChartStyle(padding=Padding.all(20))


def _series(name, values, **kwargs):
    return AreaSeries(name, tuple(AreaPoint(v, f"p{i}") for i, v in enumerate(values)), **kwargs)


def test_points_evenly_spaced_and_counted():
    series = (_series("a", [1, 5, 3, 8]),)
    pts = series_points(series, STYLE, chart_area(STYLE, 400, 300))[0]
    assert len(pts) == 4
    xs = [x for x, _ in pts]
    gaps = [b - a for a, b in zip(xs, xs[1:])]
    assert gaps == pytest.approx([120.0, 120.0, 120.0])


def test_shared_scale_starts_at_zero_by_default():
    series = (_series("a", [5, 10]), _series("b", [20, 15]))
    assert value_bounds(series, STYLE) == (0.0, 20.0)
    loose = AreaChartStyle(force_y_axis_from_zero=False)
    assert value_bounds(series, loose) == (5.0, 20.0)
    assert value_bounds((_series("n", [-4, 2]),), STYLE) == (-4.0, 2.0)


def test_reveal_by_path_length():
    pts = [(0.0, 0.0), (10.0, 0.0), (20.0, 0.0)]
    assert revealed_path(pts, 0.0) == [(0.0, 0.0)]
    assert revealed_path(pts, 0.25)[-1] == pytest.approx((5.0, 0.0))
    assert revealed_path(pts, 1.0) == pts


def test_progress_zero_draws_no_area_or_points():
    series = (_series("a", [1, 2, 3]),)
    scene = build_scene(series, AreaChartStyle(show_grid=False), 0.0, None, 400, 300)
    assert scene.of_type(PathItem) == []
    assert scene.of_type(CircleItem) == []


def test_full_progress_fills_gradient_from_series_color():
    series = (_series("a", [1, 2, 3], color=RED),)
    scene = build_scene(series, AreaChartStyle(show_grid=False), 1.0, None, 400, 300)
    region, line = scene.of_type(PathItem)
    assert region.closed and isinstance(region.fill, LinearGradient)
    assert region.fill.stops[0].color == RED
    assert region.fill.stops[-1].color == RED.with_alpha(0.2)
    assert len(line.points) == 3
    assert len(scene.of_type(CircleItem)) == 3


def test_hover_tooltip_shows_series_and_value():
    series = (_series("Revenue", [1, 4]),)
    pts = series_points(series, STYLE, chart_area(STYLE, 400, 300))[0]
    hit = hit_test(series, STYLE, 400, 300, pts[1][0] + 3, pts[1][1])
    assert hit == (0, 1)
    scene = build_scene(series, STYLE, 1.0, hit, 400, 300)
    assert "Revenue: 4.0" in scene.texts()
    assert scene.of_type(RectItem)


def test_hover_respects_radius_and_disabled_tooltips():
    disabled = TooltipConfig(enabled=False)
    series = (_series("a", [1, 4], tooltip=disabled),)
    pts = series_points(series, STYLE, chart_area(STYLE, 400, 300))[0]
    assert hit_test(series, STYLE, 400, 300, *pts[0]) is None
    enabled = (_series("a", [1, 4]),)
    assert hit_test(enabled, STYLE, 400, 300, pts[0][0] + 30, pts[0][1]) is None


def test_custom_tooltip_text():
    point = AreaPoint(3.0, "x", tooltip=TooltipConfig(text="Peak"))
    series = (AreaSeries("s", (point, AreaPoint(1.0))),)
    scene = build_scene(series, STYLE, 1.0, (0, 0), 400, 300)
    assert "Peak" in scene.texts()


def test_style_validation():
    with pytest.raises(ChartConfigError):
        AreaChartStyle(colors=())
    with pytest.raises(ChartConfigError):
        AreaChartStyle(grid_lines=0)


def test_parse_plotly_area_figure():
    doc = {
        "data": [
            {"type": "scatter", "fill": "tozeroy", "name": "Sales", "x": ["Q1", "Q2"], "y": [3, 5], "line": {"color": "#2196f3", "width": 3}},
            {"type": "bar", "x": [1], "y": [1]},
            {"x": ["Q1", "Q2"], "y": ["1", 2], "marker": {"size": 6}},
        ],
        "layout": {"title": {"text": "Quarterly"}, "yaxis": {"title": "EUR"}},
    }
    config = parse_area_json(doc)
    assert [s.name for s in config.series] == ["Sales", "Series 2"]
    sales = config.series[0]
    assert sales.color == BLUE and sales.gradient_color == BLUE.with_alpha(0.2)
    assert sales.line_width == 3
    assert config.series[1].point_size == 6 and config.series[1].show_points is True
    assert config.style.title == "Quarterly"
    assert config.style.y_axis_title == "EUR"


def test_parse_reports_invalid_y_value():
    with pytest.raises(ChartDataError) as exc:
        parse_area_json({"data": [{"y": [1, "abc"]}]})
    assert "Invalid y-value at index 1" in str(exc.value)


def test_plotly_title_forms():
    assert plotly_title("x") == "x"
    assert plotly_title({"text": "y"}) == "y"
    assert plotly_title(None) is None
