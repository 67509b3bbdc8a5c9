"""Charting subsystem.

Pure layout: CandleSeries + viewport -> DrawPlan. Painting is left to the
host's renderer.
"""

from .candles import candle_count, compile_candles, window_candles
from .date_axis import plan_date_axis
from .engine import LayoutSession, build_draw_plan
from .errors import ChartLayoutError, DegenerateRangeError, InsufficientDataError
from .models import (
    CandleGeometry,
    DateTick,
    Direction,
    DrawPlan,
    PriceAxis,
    PriceBand,
    PriceTick,
    Viewport,
)
from .policies import DEFAULT_CHART_POLICY, ChartPolicy, get_locked_default_policy
from .price_axis import choose_grid_spacing, plan_price_axis
from .price_range import select_price_range

__all__ = [
    "build_draw_plan",
    "LayoutSession",
    "select_price_range",
    "plan_price_axis",
    "choose_grid_spacing",
    "plan_date_axis",
    "candle_count",
    "window_candles",
    "compile_candles",
    "ChartPolicy",
    "DEFAULT_CHART_POLICY",
    "get_locked_default_policy",
    "ChartLayoutError",
    "InsufficientDataError",
    "DegenerateRangeError",
    "CandleGeometry",
    "DateTick",
    "Direction",
    "DrawPlan",
    "PriceAxis",
    "PriceBand",
    "PriceTick",
    "Viewport",
]
