"""Registry request/result types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ChartRequest:
    """A logical chart request.

    Attributes:
        chart_type: Identifier registered in the chart registry (e.g. 'pie').
        data: JSON document (str, bytes or already decoded) for the family parser.
        options: Keyword arguments forwarded to the widget (width, height,
            interactive, autoplay, ...).
    """

    chart_type: str
    data: Any
    options: Optional[Dict[str, Any]] = None


@dataclass
class ChartResult:
    widget: Any  # QWidget; typed loosely so the registry imports without Qt
    meta: Dict[str, Any]
