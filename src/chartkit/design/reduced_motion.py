"""Reduced motion preference for chart animations.

When enabled, chart widgets skip their entry animation and paint the final
layout (progress 1.0) immediately. The preference is bootstrapped from
``CHARTKIT_PREFER_REDUCED_MOTION`` (see ``config.settings``) and can be
toggled at runtime or scoped with :func:`temporarily_reduced_motion`.
"""

from __future__ import annotations

import contextlib
from typing import Iterator

from config import settings

__all__ = [
    "set_reduced_motion",
    "is_reduced_motion",
    "adjust_duration",
    "temporarily_reduced_motion",
]

_reduced_motion_enabled: bool = bool(settings.PREFER_REDUCED_MOTION)


def set_reduced_motion(enabled: bool) -> None:
    global _reduced_motion_enabled
    _reduced_motion_enabled = bool(enabled)


def is_reduced_motion() -> bool:
    """Return whether reduced motion is currently enabled."""
    return _reduced_motion_enabled


def adjust_duration(ms: int, minimum_ms: int = 0) -> int:
    """Return ``minimum_ms`` when reduced motion is on, else ``ms`` (both clamped >= 0)."""
    minimum_ms = max(0, minimum_ms)
    ms = max(0, ms)
    return minimum_ms if _reduced_motion_enabled else ms


@contextlib.contextmanager
def temporarily_reduced_motion(force: bool = True) -> Iterator[None]:
    prev = _reduced_motion_enabled
    try:
        set_reduced_motion(force)
        yield
    finally:
        set_reduced_motion(prev)
