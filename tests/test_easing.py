import pytest

from chartkit.design.easing import (
    CURVES,
    curve_from_json,
    curve_from_plotly_easing,
    get_curve,
    parse_cubic_bezier,
)


def test_parse_cubic_bezier_manual():
    assert parse_cubic_bezier("cubic-bezier(0.1, 0.2, 0.3, 0.9)") == (0.1, 0.2, 0.3, 0.9)


@pytest.mark.parametrize(
    "spec",
    ["bezier(0,0,0,0)", "cubic-bezier(0.1, 0.2)", "cubic-bezier(a, b, c, d)", "cubic-bezier(1.5, 0, 0, 1)"],
)
def test_parse_invalid_bezier(spec):
    with pytest.raises(ValueError):
        parse_cubic_bezier(spec)


@pytest.mark.parametrize("name", sorted(CURVES))
def test_curves_fix_endpoints(name):
    curve = CURVES[name]
    assert curve.transform(0.0) == 0.0
    assert curve.transform(1.0) == 1.0


def test_curve_monotonic_for_ease_in_out():
    curve = CURVES["ease_in_out"]
    samples = [curve.transform(i / 20) for i in range(21)]
    assert samples == sorted(samples)
    assert curve.transform(0.5) == pytest.approx(0.5, abs=1e-3)


def test_get_curve_accepts_camel_case_and_bezier():
    assert get_curve("easeInOut") is CURVES["ease_in_out"]
    custom = get_curve("cubic-bezier(0.2, 0, 0.2, 1)")
    assert custom.bezier == (0.2, 0.0, 0.2, 1.0)
    assert get_curve(custom.to_json()) == custom
    with pytest.raises(KeyError):
        get_curve("wobble")


def test_curve_from_json_falls_back():
    fallback = CURVES["linear"]
    assert curve_from_json("nope", fallback) is fallback
    assert curve_from_json(None, fallback) is fallback
    assert curve_from_json("bounce_out", fallback) is CURVES["bounce_out"]


def test_plotly_easing_names():
    fallback = CURVES["linear"]
    assert curve_from_plotly_easing("cubic-in-out", fallback) is CURVES["ease_in_out"]
    assert curve_from_plotly_easing("quad-in", fallback) is CURVES["ease_in"]
    assert curve_from_plotly_easing("sin-out", fallback) is CURVES["ease_out"]
    assert curve_from_plotly_easing("bounce-in", fallback) is CURVES["bounce_in"]
    assert curve_from_plotly_easing("elastic", fallback) is CURVES["ease_in_out"]
    assert curve_from_plotly_easing(3, fallback) is fallback


def test_qeasing_curve_mapping():
    from PyQt6.QtCore import QEasingCurve

    assert CURVES["linear"].to_qeasing_curve().type() == QEasingCurve.Type.Linear
    assert CURVES["ease_in_out"].to_qeasing_curve().type() == QEasingCurve.Type.BezierSpline
