"""Market data contract for the layout engine.

Raw quote records are converted here; the layout engine only ever sees a
CandleSeries.
"""

from .series import Candle, CandleSeries

__all__ = ["Candle", "CandleSeries"]
