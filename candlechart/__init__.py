"""candlechart: candlestick chart layout engine."""

from .charting import ChartPolicy, DrawPlan, LayoutSession, Viewport, build_draw_plan
from .market_data import Candle, CandleSeries

__all__ = [
    "Candle",
    "CandleSeries",
    "ChartPolicy",
    "DrawPlan",
    "LayoutSession",
    "Viewport",
    "build_draw_plan",
]
__version__ = "0.1.0"
