"""Repaint decision shared by all chart painters.

Painters are pure functions of ``PaintState`` plus canvas size. A widget
keeps the state it last painted and calls :func:`should_repaint` before
scheduling another ``update()``.

Equality policy: ``progress`` and ``hover`` compare by value, ``data`` and
``style`` compare by identity. Models are immutable, so a different object
is the only way their content can change; swapping in an equal copy costs
one redundant repaint.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

__all__ = ["PaintState", "should_repaint"]


@dataclass(frozen=True, eq=False)
class PaintState:
    data: Any
    style: Any
    progress: float = 1.0
    hover: Any = None


def should_repaint(old: Optional[PaintState], new: PaintState) -> bool:
    if old is None:
        return True
    return (
        old.progress != new.progress
        or old.hover != new.hover
        or old.data is not new.data
        or old.style is not new.style
    )
