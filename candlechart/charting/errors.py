"""Layout errors.

Raised to the caller of the layout engine. A failed layout never produces a
partial DrawPlan.
"""

from __future__ import annotations


class ChartLayoutError(Exception):
    """Base class for layout failures."""


class InsufficientDataError(ChartLayoutError):
    """Fewer than two candles in the statistics window."""


class DegenerateRangeError(ChartLayoutError):
    """Outlier filtering left nothing to scale the price axis against."""
