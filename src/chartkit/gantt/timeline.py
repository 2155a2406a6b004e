"""Date-range helpers and task list operations."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Dict, Hashable, List, Sequence, Tuple, TypeVar

from config import settings

from ..errors import GanttChartError
from .models import GanttTask

__all__ = ["time_range", "sort_by_start_date", "filter_by_date_range", "group_by"]

K = TypeVar("K", bound=Hashable)


def time_range(
    tasks: Sequence[GanttTask], padding_days: int = settings.GANTT_RANGE_PADDING_DAYS
) -> Tuple[datetime, datetime]:
    """``(earliest start - padding, latest end + padding)``."""
    if not tasks:
        raise GanttChartError("Cannot compute a time range for an empty task list")
    pad = timedelta(days=padding_days)
    return min(t.start for t in tasks) - pad, max(t.end for t in tasks) + pad


def sort_by_start_date(tasks: Sequence[GanttTask]) -> List[GanttTask]:
    return sorted(tasks, key=lambda t: t.start)


def filter_by_date_range(tasks: Sequence[GanttTask], start: datetime, end: datetime) -> List[GanttTask]:
    """Tasks lying entirely within ``[start, end]``."""
    return [t for t in tasks if t.start >= start and t.end <= end]


def group_by(tasks: Sequence[GanttTask], key: Callable[[GanttTask], K]) -> Dict[K, List[GanttTask]]:
    groups: Dict[K, List[GanttTask]] = {}
    for task in tasks:
        groups.setdefault(key(task), []).append(task)
    return groups
