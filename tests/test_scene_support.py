import json

import pytest

from chartkit.core.geometry import Rect
from chartkit.core.jsonio import as_bool, as_int, first_present, get_path, load_document, require_list, to_number
from chartkit.core.repaint import PaintState, should_repaint
from chartkit.core.scene import RectItem, TextItem
from chartkit.core.tooltip import TooltipStyle, build_tooltip
from chartkit.errors import ChartDataError


def test_repaint_compares_progress_and_hover_by_value():
    data, style = (1, 2), object()
    old = PaintState(data, style, 0.5, None)
    assert should_repaint(None, old)
    assert not should_repaint(old, PaintState(data, style, 0.5, None))
    assert should_repaint(old, PaintState(data, style, 0.6, None))
    assert should_repaint(old, PaintState(data, style, 0.5, 3))


def test_repaint_compares_data_and_style_by_identity():
    data = [1, 2]
    old = PaintState(data, "s", 1.0)
    assert should_repaint(old, PaintState(list(data), "s", 1.0))


def test_tooltip_stays_inside_bounds():
    bounds = Rect(0, 0, 200, 100)
    items = build_tooltip((195, 5), ["label: 1.0", "second"], TooltipStyle(), bounds)
    box = items[0]
    assert isinstance(box, RectItem)
    assert box.rect.left >= 0 and box.rect.right <= 200
    assert box.rect.top >= 0
    assert [it.text for it in items if isinstance(it, TextItem)] == ["label: 1.0", "second"]
    assert build_tooltip((0, 0), [], TooltipStyle(), bounds) == []


def test_tooltip_style_json_round_trip():
    style = TooltipStyle(border_radius=2.0, padding=4.0)
    assert TooltipStyle.from_json(json.loads(json.dumps(style.to_json()))) == style


def test_load_document_variants():
    assert load_document('{"a": 1}') == {"a": 1}
    assert load_document([1]) == [1]
    with pytest.raises(ChartDataError) as exc:
        load_document("{bad")
    assert "Malformed" in str(exc.value)
    with pytest.raises(ChartDataError):
        load_document(42)


def test_loose_readers():
    doc = {"marker": {"color": "red", "size": "4"}, "flag": "TRUE"}
    assert get_path(doc, "marker.color") == "red"
    assert get_path(doc, "marker.missing", 7) == 7
    assert first_present(doc, "nope", "marker.size") == "4"
    assert as_int(doc["marker"]["size"], 0) == 4
    assert as_bool(doc["flag"], False) is True
    assert to_number(True) is None
    assert to_number(" 2.5 ") == 2.5
    with pytest.raises(ChartDataError):
        require_list(doc, "data", where="Test chart")


def test_chart_errors_are_value_errors_with_context():
    err = ChartDataError("boom", context={"index": 2})
    assert isinstance(err, ValueError)
    assert err.context == {"index": 2}
    assert err.message == "boom"
