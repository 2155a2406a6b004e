import pytest

from chartkit.design.colors import BLUE, GREY, WHITE, Color, parse_color


def test_parse_hex_forms():
    assert parse_color("#fff") == WHITE
    assert parse_color("#2196F3") == BLUE
    assert parse_color("#802196f3") == Color(0x21, 0x96, 0xF3, 0x80)


def test_parse_rgb_and_rgba():
    assert parse_color("rgb(10, 20, 30)") == Color(10, 20, 30)
    assert parse_color("rgba(10,20,30,0.5)") == Color(10, 20, 30, 128)
    # out of range components clamp
    assert parse_color("rgb(300, -5, 0)") == Color(255, 0, 0)


def test_named_colors_case_insensitive():
    assert parse_color("Blue") == BLUE
    assert parse_color("gray") == GREY
    assert parse_color("light blue") == parse_color("lightblue")


def test_unreadable_values_use_fallback():
    assert parse_color("not-a-color") is None
    assert parse_color("#12", WHITE) == WHITE
    assert parse_color(42, BLUE) == BLUE
    assert parse_color("rgb(1,2)", GREY) == GREY


def test_channel_validation():
    with pytest.raises(ValueError):
        Color(256, 0, 0)


def test_with_alpha_and_hex():
    c = BLUE.with_alpha(0.5)
    assert c.a == 128
    assert c.to_hex() == "#802196f3"
    assert BLUE.to_hex() == "#2196f3"
    assert parse_color(c.to_hex()) == c


def test_lighten_raises_lightness_and_keeps_alpha():
    base = Color(100, 50, 50, 200)
    lighter = base.lighten(0.2)
    assert sum((lighter.r, lighter.g, lighter.b)) > sum((base.r, base.g, base.b))
    assert lighter.a == 200
    assert WHITE.lighten(0.5) == WHITE
