import pytest

from chartkit.core.geometry import (
    Padding,
    Rect,
    dash_segments,
    evenly_spaced_x,
    flatten_cubic,
    flatten_quadratic,
    map_values_y,
    polyline_length,
    polyline_prefix,
)


def test_evenly_spaced_x_endpoints_and_step():
    xs = evenly_spaced_x(5, 10.0, 200.0)
    assert xs[0] == 10.0 and xs[-1] == 210.0
    steps = {round(b - a, 9) for a, b in zip(xs, xs[1:])}
    assert steps == {50.0}


def test_single_point_is_centered():
    assert evenly_spaced_x(1, 0.0, 100.0) == [50.0]
    assert evenly_spaced_x(0, 0.0, 100.0) == []


def test_map_values_y_inverts_and_handles_flat_range():
    ys = map_values_y([0, 5, 10], 0, 10, top=0, height=100)
    assert ys == [100.0, 50.0, 0.0]
    assert map_values_y([3, 3], 3, 3, top=10, height=50) == [60.0, 60.0]


def test_rect_deflate_never_negative():
    r = Rect(0, 0, 20, 10).deflate(Padding.all(8))
    assert (r.left, r.top) == (8, 8)
    assert r.width == 4 and r.height == 0


def test_padding_from_plotly_margin():
    p = Padding.from_json({"l": 40, "t": 10}, Padding.all(24))
    assert p == Padding(40, 10, 24, 24)
    assert Padding.from_json(None, Padding.all(3)) == Padding.all(3)


def test_polyline_prefix_interpolates():
    pts = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0)]
    assert polyline_length(pts) == 20.0
    assert polyline_prefix(pts, 15.0) == [(0.0, 0.0), (10.0, 0.0), (10.0, 5.0)]
    assert polyline_prefix(pts, 0) == [(0.0, 0.0)]
    assert polyline_prefix(pts, 100.0) == pts


def test_bezier_flattening_ends_on_target():
    q = flatten_quadratic((0, 0), (5, 10), (10, 0), steps=4)
    assert len(q) == 4
    assert q[-1] == pytest.approx((10.0, 0.0))
    assert q[1] == pytest.approx((5.0, 5.0))
    c = flatten_cubic((0, 0), (0, 10), (10, 10), (10, 0), steps=8)
    assert c[-1] == pytest.approx((10.0, 0.0))


def test_dash_segments():
    segs = dash_segments((0, 0), (20, 0), 6, 4)
    assert [(a[0], b[0]) for a, b in segs] == [(0, 6), (10, 16)]
    assert dash_segments((1, 1), (1, 1), 6, 4) == []
    with pytest.raises(ValueError):
        dash_segments((0, 0), (1, 0), 0, 1)
