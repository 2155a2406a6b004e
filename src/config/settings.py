"""Global configuration and defaults for chart rendering."""

from __future__ import annotations

import os
from typing import Final


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


DEFAULT_ANIMATION_MS: Final = _env_int("CHARTKIT_ANIMATION_MS", 1500)
DEFAULT_CURVE: Final = "ease_in_out"
DEFAULT_PADDING: Final = 24.0
DEFAULT_GRID_LINES: Final = 5

# Gantt timeline is padded on both sides of the task range
GANTT_RANGE_PADDING_DAYS: Final = 7

EXPORT_DPI: Final = 120
EXPORT_FORMATS: Final = frozenset({"png", "svg"})

PREFER_REDUCED_MOTION: Final = os.environ.get(
    "CHARTKIT_PREFER_REDUCED_MOTION", ""
).strip().lower() in {"1", "true", "yes", "on"}
