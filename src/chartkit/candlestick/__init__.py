"""Candlestick (OHLC) chart family."""

from .models import (
    CandlestickAxisConfig,
    CandlestickChartConfig,
    CandlestickData,
    CandlestickStyle,
    parse_candlestick_json,
)

__all__ = [
    "CandlestickAxisConfig",
    "CandlestickChartConfig",
    "CandlestickData",
    "CandlestickStyle",
    "parse_candlestick_json",
]
