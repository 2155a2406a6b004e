"""Permissive readers for loosely typed JSON chart documents.

Optional fields fall back to defaults; only structural problems (a document
that is not JSON, a required array that is absent) raise ``ChartDataError``.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from typing import Any, List, Mapping, Optional, Sequence, Type, Union

from ..errors import ChartDataError

__all__ = [
    "load_document",
    "get_path",
    "first_present",
    "as_float",
    "as_int",
    "as_bool",
    "as_list",
    "require_list",
    "to_number",
    "to_datetime",
]

log = logging.getLogger(__name__)

Document = Union[str, bytes, Mapping[str, Any], Sequence[Any]]


def load_document(source: Document) -> Any:
    """Decode ``source`` if it is a JSON string; mappings/lists pass through."""
    if isinstance(source, (str, bytes)):
        try:
            return json.loads(source)
        except json.JSONDecodeError as e:
            raise ChartDataError(f"Malformed chart JSON: {e.msg}", context={"pos": e.pos}) from e
    if isinstance(source, (Mapping, list, tuple)):
        return source
    raise ChartDataError(f"Unsupported chart document type: {type(source).__name__}")


def get_path(raw: Any, path: str, default: Any = None) -> Any:
    """Look up a dotted path (``"marker.color"``) in nested mappings."""
    node = raw
    for part in path.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return default
        node = node[part]
    return default if node is None else node


def first_present(raw: Any, *paths: str, default: Any = None) -> Any:
    for path in paths:
        v = get_path(raw, path)
        if v is not None:
            return v
    return default


def to_number(value: Any) -> Optional[float]:
    """Coerce ints, floats and numeric strings; anything else is ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def as_float(value: Any, default: float) -> float:
    n = to_number(value)
    return default if n is None else n


def as_int(value: Any, default: int) -> int:
    n = to_number(value)
    return default if n is None else int(n)


def as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    return default


def as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def require_list(raw: Mapping[str, Any], key: str, *, where: str) -> List[Any]:
    value = raw.get(key) if isinstance(raw, Mapping) else None
    if not isinstance(value, (list, tuple)):
        raise ChartDataError(f"{where} requires a '{key}' array", context={"key": key})
    return list(value)


_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
)


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_datetime(value: Any, *, error: Type[ChartDataError] = ChartDataError) -> datetime:
    """Coerce a JSON date value to a naive (UTC) ``datetime``.

    Accepts ``datetime``/``date`` objects, epoch milliseconds, ISO strings and
    the day-first/month-first forms in ``_DATE_FORMATS``. Anything else raises
    ``error``.
    """
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc).replace(tzinfo=None)
    if isinstance(value, str):
        text = value.strip()
        for fmt in _DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
        try:
            return _naive_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            raise error(f"Invalid date format: {value}", context={"value": value}) from None
    raise error(f"Invalid date type: {type(value).__name__}", context={"value": value})
