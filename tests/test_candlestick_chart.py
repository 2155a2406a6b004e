"""Candlestick parsing, geometry, scrolling and widget interaction."""

from __future__ import annotations

import json
from datetime import datetime

import pytest
from PyQt6.QtCore import QEvent, QPointF, Qt
from PyQt6.QtGui import QMouseEvent

from chartkit.candlestick import painter
from chartkit.candlestick.models import (
    CandlestickAxisConfig,
    CandlestickData,
    CandlestickStyle,
    parse_candlestick_json,
)
from chartkit.candlestick.widget import CandlestickChart
from chartkit.core.scene import PathItem, RectItem
from chartkit.design.colors import GREEN, RED, parse_color
from chartkit.errors import ChartConfigError, ChartDataError

W, H = 400.0, 300.0
STYLE = CandlestickStyle()
AXIS = CandlestickAxisConfig()

CANDLES = (
    CandlestickData(datetime(2024, 1, 2), 10, 14, 8, 12),
    CandlestickData(datetime(2024, 1, 3), 12, 13, 9, 10),
    CandlestickData(datetime(2024, 1, 4), 10, 16, 10, 15, volume=1500),
)


def _series(count: int):
    return tuple(
        CandlestickData(datetime(2024, 1, 1 + i % 28, i // 28), 10 + i % 3, 14 + i % 3, 8, 11)
        for i in range(count)
    )


def _mouse(widget, kind, x: float, y: float, buttons) -> QMouseEvent:
    pos = QPointF(x, y)
    button = Qt.MouseButton.NoButton if kind == QEvent.Type.MouseMove else Qt.MouseButton.LeftButton
    return QMouseEvent(kind, pos, widget.mapToGlobal(pos), button, buttons, Qt.KeyboardModifier.NoModifier)


# Parsing -------------------------------------------------------------------


def test_parse_string_and_epoch_dates():
    doc = {
        "data": [
            {
                "type": "candlestick",
                "x": ["2024-01-02", 1704240000000],
                "open": [10, 12],
                "high": [14, 13],
                "low": [8, 9],
                "close": [12, 10],
            }
        ],
        "layout": {"title": {"text": "ACME"}, "width": 640, "height": 320},
    }
    config = parse_candlestick_json(json.dumps(doc))
    assert [c.date for c in config.data] == [datetime(2024, 1, 2), datetime(2024, 1, 3)]
    assert config.data[0].is_bullish and not config.data[1].is_bullish
    assert config.title == "ACME"
    assert (config.width, config.height) == (640.0, 320.0)


def test_parse_mismatched_arrays():
    doc = {"data": [{"type": "candlestick", "x": [1, 2], "open": [1], "high": [2, 2], "low": [0, 0], "close": [1, 1]}]}
    with pytest.raises(ChartDataError, match="same length"):
        parse_candlestick_json(doc)


def test_parse_rejects_bad_price_and_date():
    base = {"type": "candlestick", "x": ["2024-01-02"], "open": [1], "high": [2], "low": [0], "close": [1]}
    with pytest.raises(ChartDataError, match="open"):
        parse_candlestick_json({"data": [{**base, "open": ["n/a"]}]})
    with pytest.raises(ChartDataError, match="Invalid date"):
        parse_candlestick_json({"data": [{**base, "x": ["soon"]}]})


def test_parse_skips_other_and_hidden_traces():
    doc = {
        "data": [
            {"type": "scatter", "x": [1], "y": [1]},
            {"type": "candlestick", "visible": False, "x": ["2024-01-01"], "open": [1], "high": [2], "low": [0], "close": [1]},
            {"type": "candlestick", "x": ["2024-01-02"], "open": [3], "high": [5], "low": [2], "close": [4]},
        ]
    }
    config = parse_candlestick_json(doc)
    assert len(config.data) == 1
    assert config.data[0].close == 4


def test_parse_increasing_and_decreasing_colors():
    doc = {
        "data": [
            {
                "type": "candlestick",
                "x": ["2024-01-02"],
                "open": [1],
                "high": [2],
                "low": [0],
                "close": [1],
                "increasing": {"line": {"color": "#00ff00"}},
                "decreasing": {"fillcolor": "#ff0000"},
            }
        ]
    }
    style = parse_candlestick_json(doc).style
    assert style.bullish_color == parse_color("#00ff00")
    assert style.bearish_color == parse_color("#ff0000")
    default = parse_candlestick_json({"data": [{**doc["data"][0], "increasing": {}, "decreasing": {}}]}).style
    assert (default.bullish_color, default.bearish_color) == (GREEN, RED)


def test_model_validation():
    with pytest.raises(ChartDataError):
        CandlestickData(datetime(2024, 1, 1), 5, 4, 6, 5)
    with pytest.raises(ChartConfigError):
        CandlestickStyle(candle_width=0)
    with pytest.raises(ChartConfigError):
        CandlestickAxisConfig(price_divisions=0)


# Geometry ------------------------------------------------------------------


def test_body_spans_open_close_and_wick_spans_high_low():
    area = painter.chart_area(STYLE, AXIS, W, H)
    geos = painter.candle_geometry(CANDLES, STYLE, AXIS, 1.0, W, H)
    assert [g.index for g in geos] == [0, 1, 2]
    first = geos[0]
    span = area.height / 8  # prices 8..16
    assert first.body.left == pytest.approx(area.left)
    assert first.body.width == pytest.approx(STYLE.candle_width)
    assert first.body.top == pytest.approx(area.bottom - 4 * span)
    assert first.body.height == pytest.approx(2 * span)
    (wx, high_y), (_, low_y) = first.wick
    assert wx == pytest.approx(area.left + STYLE.candle_width / 2)
    assert high_y == pytest.approx(area.bottom - 6 * span)
    assert low_y == pytest.approx(area.bottom)


def test_progress_zero_collapses_to_baseline():
    area = painter.chart_area(STYLE, AXIS, W, H)
    for geo in painter.candle_geometry(CANDLES, STYLE, AXIS, 0.0, W, H):
        assert geo.body.height == 0
        assert geo.wick[0][1] == geo.wick[1][1] == pytest.approx(area.bottom)


def test_flat_prices_sit_on_baseline():
    flat = (CandlestickData(datetime(2024, 1, 1), 5, 5, 5, 5),)
    area = painter.chart_area(STYLE, AXIS, W, H)
    (geo,) = painter.candle_geometry(flat, STYLE, AXIS, 1.0, W, H)
    assert geo.body.top == pytest.approx(area.bottom)


def test_scroll_limits_and_visible_range():
    area = painter.chart_area(STYLE, AXIS, W, H)
    assert painter.max_scroll(3, STYLE, area) == 0
    data = _series(40)
    end = painter.max_scroll(len(data), STYLE, area)
    assert end == pytest.approx(40 * STYLE.slot_width - area.width)
    visible = painter.visible_indices(len(data), STYLE, area, end)
    assert visible[-1] == 39 and visible[0] > 0
    geos = painter.candle_geometry(data, STYLE, AXIS, 1.0, W, H, end)
    assert all(area.left <= g.body.left and g.body.right <= area.right + 1e-9 for g in geos)


def test_hit_test_candle_gap_and_outside():
    area = painter.chart_area(STYLE, AXIS, W, H)
    y = area.top + 20
    hit = painter.hit_test(CANDLES, STYLE, AXIS, W, H, area.left + 5, y)
    assert hit == painter.CandlestickHover((area.left + 5, y), 0)
    gap = painter.hit_test(CANDLES, STYLE, AXIS, W, H, area.left + STYLE.candle_width + 1, y)
    assert gap is not None and gap.index is None
    assert painter.hit_test(CANDLES, STYLE, AXIS, W, H, 5, y) is None
    assert painter.hit_test((), STYLE, AXIS, W, H, area.left + 5, y) is None


def test_hit_test_follows_scroll():
    data = _series(40)
    area = painter.chart_area(STYLE, AXIS, W, H)
    scroll = 10 * STYLE.slot_width
    hit = painter.hit_test(data, STYLE, AXIS, W, H, area.left + 2, area.top + 5, scroll)
    assert hit.index == 10


def test_tooltip_lines():
    assert painter.tooltip_lines(CANDLES[2]) == [
        "Date: Jan 04, 2024",
        "Open: 10.00",
        "High: 16.00",
        "Low: 10.00",
        "Close: 15.00",
        "Volume: 1,500",
    ]
    assert len(painter.tooltip_lines(CANDLES[0])) == 5


# Scene ---------------------------------------------------------------------


def test_scene_colors_candles_by_direction():
    scene = painter.build_scene(CANDLES, STYLE, AXIS, 1.0, None, W, H)
    bodies = [r for r in scene.of_type(RectItem) if r.fill in (STYLE.bullish_color, STYLE.bearish_color)]
    assert [b.fill for b in bodies] == [STYLE.bullish_color, STYLE.bearish_color, STYLE.bullish_color]
    wicks = [p for p in scene.of_type(PathItem) if p.stroke_width == STYLE.wick_width and p.stroke in (GREEN, RED)]
    assert len(wicks) == 3
    assert "Jan 02" in scene.texts()
    assert AXIS.format_price(16) in scene.texts()


def test_empty_scene_shows_placeholder():
    scene = painter.build_scene((), STYLE, AXIS, 1.0, None, W, H)
    assert scene.texts() == [painter.EMPTY_TEXT]


def test_date_labels_are_thinned():
    data = _series(40)
    area = painter.chart_area(STYLE, AXIS, W, H)
    scene = painter.build_scene(data, STYLE, AXIS, 1.0, None, W, H, painter.max_scroll(40, STYLE, area))
    dates = [t for t in scene.texts() if t.startswith("Jan")]
    assert 0 < len(dates) <= painter.MAX_DATE_LABELS


def test_hover_draws_vertical_line_and_tooltip():
    area = painter.chart_area(STYLE, AXIS, W, H)
    hover = painter.CandlestickHover((area.left + 5, area.top + 20), 0)
    scene = painter.build_scene(CANDLES, STYLE, AXIS, 1.0, hover, W, H)
    lines = [p for p in scene.of_type(PathItem) if p.stroke == STYLE.vertical_line_color]
    assert lines and lines[0].points == ((area.left + 5, area.top), (area.left + 5, area.bottom))
    assert "Close: 12.00" in scene.texts()
    bare = painter.build_scene(CANDLES, STYLE, AXIS, 1.0, painter.CandlestickHover((area.left + 30, 50)), W, H)
    assert "Close: 12.00" not in bare.texts()


# Widget --------------------------------------------------------------------


def test_widget_starts_scrolled_to_end(qtbot, no_motion):
    chart = CandlestickChart(_series(40), width=int(W), height=int(H))
    qtbot.addWidget(chart)
    assert chart.progress() == 1.0
    assert chart.scroll_offset() == pytest.approx(chart.max_scroll())
    assert chart.max_scroll() > 0
    chart.set_scroll_offset(-50)
    assert chart.scroll_offset() == 0
    chart.set_data(_series(45))
    assert chart.scroll_offset() == pytest.approx(chart.max_scroll())


def test_drag_pans_horizontally(qtbot, no_motion):
    chart = CandlestickChart(_series(40), width=int(W), height=int(H))
    qtbot.addWidget(chart)
    start = chart.scroll_offset()
    held = Qt.MouseButton.LeftButton
    chart.mousePressEvent(_mouse(chart, QEvent.Type.MouseButtonPress, 200, 100, held))
    chart.mouseMoveEvent(_mouse(chart, QEvent.Type.MouseMove, 250, 100, held))
    assert chart.scroll_offset() == pytest.approx(start - 50)
    chart.mouseReleaseEvent(_mouse(chart, QEvent.Type.MouseButtonRelease, 250, 100, Qt.MouseButton.NoButton))
    chart.mouseMoveEvent(_mouse(chart, QEvent.Type.MouseMove, 300, 100, Qt.MouseButton.NoButton))
    assert chart.scroll_offset() == pytest.approx(start - 50)


def test_tap_emits_candle(qtbot, no_motion):
    chart = CandlestickChart(CANDLES, width=int(W), height=int(H))
    qtbot.addWidget(chart)
    area = painter.chart_area(STYLE, AXIS, W, H)
    tapped = []
    chart.tapped.connect(tapped.append)
    x = area.left + STYLE.slot_width + 3
    chart.mousePressEvent(_mouse(chart, QEvent.Type.MouseButtonPress, x, 100, Qt.MouseButton.LeftButton))
    chart.mousePressEvent(_mouse(chart, QEvent.Type.MouseButtonPress, area.left + 60, 100, Qt.MouseButton.LeftButton))
    assert tapped == [CANDLES[1]]


def test_hover_payload_and_scene(qtbot, no_motion):
    chart = CandlestickChart(CANDLES, width=int(W), height=int(H))
    qtbot.addWidget(chart)
    area = painter.chart_area(STYLE, AXIS, W, H)
    seen = []
    chart.hovered.connect(seen.append)
    chart.mouseMoveEvent(_mouse(chart, QEvent.Type.MouseMove, area.left + 4, 100, Qt.MouseButton.NoButton))
    assert seen[-1].index == 0
    assert "Open: 10.00" in chart.render_scene().texts()
