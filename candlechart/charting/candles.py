"""Candle window selection and per-candle geometry.

Window:
- ``candle_count = round(width * window_fill / candle_span)`` candles fit.
- With less history than that nothing is drawn (``None``, not an error).

Geometry (y relative to the price baseline, up is negative):
- Wick from ``-round(high/ratio)`` to ``-round(low/ratio)``, drawn only when
  both high and low lie inside the price band.
- Body drawn only when both open and close lie inside the band. It settles
  at ``-round(max(open, close)/ratio)`` with height
  ``round(|close - open|/ratio)`` (at least 1px) and starts as a 1px bar at
  ``-round(open/ratio)``.
- Wick and body eligibility are independent.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..market_data.series import Candle, CandleSeries
from .models import CandleGeometry, Direction, PriceBand
from .pixels import price_to_y, round_px
from .policies import ChartPolicy, resolve_policy


def candle_count(width: int, policy: Optional[ChartPolicy] = None) -> int:
    policy = resolve_policy(policy)
    return round_px(width * policy.window_fill / policy.candle_span(width))


def window_candles(series: CandleSeries, width: int, policy: Optional[ChartPolicy] = None) -> Optional[CandleSeries]:
    """Most recent candles that fit *width*, or None while history is too short."""
    count = candle_count(width, policy)
    if len(series) < count:
        return None
    return series.tail(count)


def direction_of(candle: Candle) -> Direction:
    return Direction.UP if candle.close > candle.open else Direction.DOWN


def candle_geometry(candle: Candle, index: int, band: PriceBand, price_ratio: float, candle_span: float) -> CandleGeometry:
    geom = {
        "pixel_x": round_px(index * candle_span),
        "direction": direction_of(candle),
    }

    if band.contains(candle.high, candle.low):
        geom["wick_top_y"] = price_to_y(candle.high, price_ratio)
        geom["wick_bottom_y"] = price_to_y(candle.low, price_ratio)

    if band.contains(candle.open, candle.close):
        height = round_px(abs(candle.close - candle.open) / price_ratio)
        geom["body_top_y_start"] = price_to_y(candle.open, price_ratio)
        geom["body_height_start"] = 1
        geom["body_top_y_end"] = price_to_y(max(candle.open, candle.close), price_ratio)
        geom["body_height_end"] = height if height != 0 else 1

    return CandleGeometry(**geom)


def compile_candles(
    window: Sequence[Candle],
    band: PriceBand,
    price_ratio: float,
    candle_span: float,
) -> List[CandleGeometry]:
    return [candle_geometry(c, i, band, price_ratio, candle_span) for i, c in enumerate(window)]
