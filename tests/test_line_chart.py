import pytest

from chartkit.core.geometry import Padding
from chartkit.core.scene import CircleItem, PathItem, RectItem
from chartkit.design.colors import RED
from chartkit.errors import ChartConfigError, ChartDataError
from chartkit.line.models import HoverLineStyle, LineChartData, LineChartStyle, parse_line_json
from chartkit.line.painter import (
    build_scene,
    chart_area,
    curve_control_points,
    data_points,
    hit_test,
    line_path,
)

DATA = tuple(LineChartData(v, f"d{i}") for i, v in enumerate([3, 7, 2, 9, 5]))
STYLE = LineChartStyle(padding=Padding.all(20), show_grid=False)


def test_n_points_evenly_spaced_left_to_right():
    pts = data_points(DATA, chart_area(STYLE, 420, 300))
    assert len(pts) == len(DATA)
    xs = [x for x, _ in pts]
    assert xs[0] == 20.0 and xs[-1] == 400.0
    assert [b - a for a, b in zip(xs, xs[1:])] == pytest.approx([95.0] * 4)


def test_values_map_to_own_min_and_max():
    pts = data_points(DATA, chart_area(STYLE, 420, 300))
    ys = [y for _, y in pts]
    assert ys[3] == pytest.approx(20.0)  # max at the top
    assert ys[2] == pytest.approx(280.0)  # min at the bottom


def test_single_point_centered_and_flat_series_on_baseline():
    pts = data_points((LineChartData(4, "only"),), chart_area(STYLE, 420, 300))
    assert pts == [(210.0, 280.0)]


def test_control_points_first_segment_follows_its_direction():
    pts = [(0.0, 0.0), (10.0, 0.0), (20.0, 10.0)]
    controls = curve_control_points(pts, 0.5)
    assert controls[0] == pytest.approx((5.0, 0.0))
    # last segment leans along the previous segment
    assert controls[1] == pytest.approx((10.0 + 0.5 * 200 ** 0.5, 0.0))


def test_curved_path_passes_through_data_points():
    style = LineChartStyle(use_curved_lines=True)
    pts = data_points(DATA, chart_area(style, 420, 300))
    path = line_path(pts, style)
    assert len(path) > len(pts)
    for p in pts:
        assert any(q == pytest.approx(p) for q in path)
    assert line_path(pts, LineChartStyle()) == pts


def test_progress_reveals_line_and_points():
    empty = build_scene(DATA, STYLE, 0.0, None, 420, 300)
    assert empty.of_type(PathItem) == [] and empty.of_type(CircleItem) == []
    half = build_scene(DATA, STYLE, 0.5, None, 420, 300)
    assert len(half.of_type(CircleItem)) == 2
    full = build_scene(DATA, STYLE, 1.0, None, 420, 300)
    (line,) = full.of_type(PathItem)
    assert len(line.points) == len(DATA)
    assert len(full.of_type(CircleItem)) == len(DATA)


def test_labels_under_each_point():
    scene = build_scene(DATA, STYLE, 1.0, None, 420, 300)
    assert scene.texts() == [d.label for d in DATA]


def test_hit_test_nearest_x_within_distance():
    assert hit_test(DATA, STYLE, 420, 300, 120, 0) == 1
    assert hit_test(DATA, STYLE, 420, 300, 150, 150) is None
    assert hit_test((), STYLE, 420, 300, 10, 10) is None


def test_hover_enlarges_point_and_shows_tooltip():
    scene = build_scene(DATA, STYLE, 1.0, 3, 420, 300)
    radii = [c.radius for c in scene.of_type(CircleItem)]
    assert radii[3] == pytest.approx(STYLE.point_radius * 1.5)
    assert "d3: 9.0" in scene.texts()
    # dashed guide: several short segments besides the data line
    assert len(scene.of_type(PathItem)) > 2


def test_solid_hover_line_and_square_points():
    style = LineChartStyle(show_grid=False, hover_line_style=HoverLineStyle.SOLID, rounded_points=False)
    scene = build_scene(DATA, style, 1.0, 0, 420, 300)
    assert len(scene.of_type(PathItem)) == 2
    squares = [r for r in scene.of_type(RectItem) if r.fill == style.point_color]
    assert len(squares) == len(DATA)


def test_style_validation():
    with pytest.raises(ChartConfigError):
        LineChartStyle(curve_intensity=1.5)
    with pytest.raises(ChartConfigError):
        LineChartStyle(grid_lines=0)


def test_parse_plotly_line_trace():
    doc = {
        "data": [
            {
                "x": ["a", "b", "c"],
                "y": [1, "2", 3],
                "mode": "lines",
                "line": {"color": "red", "width": 3, "shape": "spline", "smoothing": 1.3},
            }
        ],
        "layout": {"title": "Trend", "transition": {"duration": 400, "easing": "linear"}},
    }
    config = parse_line_json(doc)
    assert [d.value for d in config.data] == [1.0, 2.0, 3.0]
    style = config.style
    assert style.line_color == RED and style.point_color == RED
    assert style.use_curved_lines and style.curve_intensity == 1.0
    assert style.show_points is False
    assert style.animation_duration_ms == 400
    assert config.title == "Trend"


def test_parse_without_x_uses_indices():
    config = parse_line_json('{"data": [{"y": [4, 5]}]}')
    assert [d.label for d in config.data] == ["0", "1"]


def test_parse_errors():
    with pytest.raises(ChartDataError) as exc:
        parse_line_json({"data": [{"x": [1, 2], "y": [1, None]}]})
    assert str(exc.value) == "Invalid y-value at index 1"
    with pytest.raises(ChartDataError):
        parse_line_json({"data": []})
