"""Candlestick (OHLC) data, style, axis config and Plotly parsing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from config import settings

from ..core.geometry import Padding
from ..core.jsonio import as_float, first_present, get_path, load_document, to_datetime, to_number
from ..core.scene import TextStyle
from ..core.tooltip import TooltipStyle
from ..design.colors import BLUE, GREEN, GREY, RED, WHITE, Color, parse_color
from ..design.easing import CURVES, Curve, curve_from_plotly_easing
from ..errors import ChartConfigError, ChartDataError

__all__ = [
    "CandlestickData",
    "CandlestickStyle",
    "CandlestickAxisConfig",
    "CandlestickChartConfig",
    "parse_candlestick_json",
]

log = logging.getLogger(__name__)

_PRICE_KEYS = ("open", "high", "low", "close")


def _price(value: Any, key: str, index: int) -> float:
    n = to_number(value)
    if n is None:
        raise ChartDataError(f"Invalid {key} value at index {index}: {value!r}", context={"key": key, "index": index})
    return n


@dataclass(frozen=True)
class CandlestickData:
    date: datetime
    open: float
    high: float
    low: float
    close: float
    volume: Optional[float] = None

    def __post_init__(self) -> None:
        if self.high < self.low:
            raise ChartDataError(
                f"High ({self.high}) cannot be below low ({self.low})",
                context={"high": self.high, "low": self.low},
            )

    @property
    def is_bullish(self) -> bool:
        """Close at or above open."""
        return self.close >= self.open

    @classmethod
    def from_plotly_arrays(
        cls,
        x: Sequence[Any],
        open: Sequence[Any],
        high: Sequence[Any],
        low: Sequence[Any],
        close: Sequence[Any],
        index: int,
        volume: Optional[Sequence[Any]] = None,
    ) -> "CandlestickData":
        """Build the candle at ``index`` of column-wise Plotly arrays."""
        return cls(
            date=to_datetime(x[index]),
            open=_price(open[index], "open", index),
            high=_price(high[index], "high", index),
            low=_price(low[index], "low", index),
            close=_price(close[index], "close", index),
            volume=None if volume is None else _price(volume[index], "volume", index),
        )


@dataclass(frozen=True)
class CandlestickStyle:
    bullish_color: Color = GREEN
    bearish_color: Color = RED
    background_color: Color = WHITE
    grid_color: Color = GREY
    candle_width: float = 12.0
    wick_width: float = 2.0
    spacing: float = 0.2
    animation_duration_ms: int = settings.DEFAULT_ANIMATION_MS
    animation_curve: Curve = CURVES[settings.DEFAULT_CURVE]
    vertical_line_color: Color = BLUE
    vertical_line_width: float = 1.0
    tooltip_style: TooltipStyle = TooltipStyle()
    show_grid: bool = True
    padding: Padding = Padding.all(16.0)

    def __post_init__(self) -> None:
        if self.candle_width <= 0:
            raise ChartConfigError(f"candle_width must be positive: {self.candle_width}")
        if self.spacing < 0:
            raise ChartConfigError(f"spacing must be non-negative: {self.spacing}")

    def color_for(self, candle: CandlestickData) -> Color:
        return self.bullish_color if candle.is_bullish else self.bearish_color

    @property
    def slot_width(self) -> float:
        return self.candle_width * (1 + self.spacing)


@dataclass(frozen=True)
class CandlestickAxisConfig:
    price_divisions: int = 5
    date_divisions: int = 5
    label_style: Optional[TextStyle] = None
    y_axis_width: float = 60.0
    x_axis_height: float = 30.0
    price_formatter: Optional[Callable[[float], str]] = None
    date_formatter: Optional[Callable[[datetime], str]] = None

    def __post_init__(self) -> None:
        if self.price_divisions < 1 or self.date_divisions < 1:
            raise ChartConfigError("price_divisions and date_divisions must be >= 1")

    def format_price(self, price: float) -> str:
        if self.price_formatter is not None:
            return self.price_formatter(price)
        return f"{price:.2f}"

    def format_date(self, moment: datetime) -> str:
        if self.date_formatter is not None:
            return self.date_formatter(moment)
        return moment.strftime("%b %d")


@dataclass(frozen=True)
class CandlestickChartConfig:
    data: Tuple[CandlestickData, ...]
    style: CandlestickStyle = field(default_factory=CandlestickStyle)
    axis: CandlestickAxisConfig = field(default_factory=CandlestickAxisConfig)
    title: Optional[str] = None
    width: float = 800.0
    height: float = 400.0


def _trace_candles(trace: Mapping[str, Any], index: int) -> List[CandlestickData]:
    xs = trace.get("x")
    if not isinstance(xs, list):
        raise ChartDataError(f"Candlestick trace {index} requires an 'x' array", context={"trace": index})
    columns: Dict[str, List[Any]] = {}
    for key in _PRICE_KEYS:
        column = trace.get(key)
        if not isinstance(column, list) or len(column) != len(xs):
            raise ChartDataError(
                "All price arrays must have the same length as x array", context={"trace": index, "key": key}
            )
        columns[key] = column
    volume = trace.get("volume")
    if volume is not None and (not isinstance(volume, list) or len(volume) != len(xs)):
        raise ChartDataError("Volume array must have the same length as x array", context={"trace": index})
    return [
        CandlestickData.from_plotly_arrays(xs, index=i, volume=volume, **columns)
        for i in range(len(xs))
    ]


def _side_color(trace: Mapping[str, Any], side: str) -> Optional[Color]:
    return parse_color(first_present(trace, f"{side}.line.color", f"{side}.fillcolor", f"{side}.color"))


def parse_candlestick_json(source: Any) -> CandlestickChartConfig:
    """Parse a Plotly figure with ``candlestick`` traces.

    Visible candlestick traces are concatenated in order; other trace types
    are skipped. Increasing/decreasing colours come from the first
    candlestick trace.
    """
    doc = load_document(source)
    traces = doc.get("data") if isinstance(doc, Mapping) else None
    if not isinstance(traces, list):
        raise ChartDataError("Candlestick JSON requires a 'data' array")
    candles: List[CandlestickData] = []
    first: Optional[Mapping[str, Any]] = None
    for i, trace in enumerate(traces):
        if not isinstance(trace, Mapping):
            raise ChartDataError(f"Plotly trace {i} must be an object", context={"trace": i})
        kind = str(trace.get("type", "candlestick"))
        if kind != "candlestick":
            log.debug("Skipping %s trace %d in candlestick figure", kind, i)
            continue
        if first is None:
            first = trace
        if trace.get("visible", True) is False:
            continue
        candles.extend(_trace_candles(trace, i))
    layout = doc.get("layout") if isinstance(doc.get("layout"), Mapping) else {}
    base = CandlestickStyle()
    style = CandlestickStyle(
        bullish_color=(_side_color(first, "increasing") if first else None) or base.bullish_color,
        bearish_color=(_side_color(first, "decreasing") if first else None) or base.bearish_color,
        background_color=parse_color(first_present(layout, "plot_bgcolor", "paper_bgcolor"), base.background_color),
        grid_color=parse_color(first_present(layout, "xaxis.gridcolor", "yaxis.gridcolor"), base.grid_color),
        animation_duration_ms=int(as_float(get_path(layout, "transition.duration"), base.animation_duration_ms)),
        animation_curve=curve_from_plotly_easing(get_path(layout, "transition.easing"), base.animation_curve),
        show_grid=get_path(layout, "xaxis.showgrid", True) is not False,
    )
    title = layout.get("title")
    if isinstance(title, Mapping):
        title = title.get("text")
    log.debug("Parsed %d candles", len(candles))
    return CandlestickChartConfig(
        data=tuple(candles),
        style=style,
        title=None if title is None else str(title),
        width=as_float(layout.get("width"), 800.0),
        height=as_float(layout.get("height"), 400.0),
    )
