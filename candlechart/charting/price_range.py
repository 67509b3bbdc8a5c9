"""Price band selection with outlier rejection.

A single sigma guard on the closing-price distribution rejects data glitches
(e.g. a misparsed decimal) without discarding legitimate extreme days:

  band = [mean - k*sdev, mean + k*sdev]   (k = policy.outlier_sigmas, sample sdev)

The highest high and the lowest low are searched independently among the
candles whose high (resp. low) lies strictly inside the band.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

import numpy as np

from ..market_data.series import Candle
from .errors import DegenerateRangeError, InsufficientDataError
from .models import PriceBand
from .policies import ChartPolicy, resolve_policy


def close_stats(window: Sequence[Candle]) -> tuple[float, float]:
    """Return (mean, sample standard deviation) of the closing prices."""
    if len(window) < 2:
        raise InsufficientDataError(f"need at least 2 candles for a price band, got {len(window)}")
    closes = np.array([c.close for c in window], dtype=float)
    return float(closes.mean()), float(closes.std(ddof=1))


def _extreme(
    window: Sequence[Candle],
    value: Callable[[Candle], float],
    lower: float,
    upper: float,
    *,
    highest: bool,
) -> Optional[Candle]:
    best: Optional[Candle] = None
    for candle in window:
        v = value(candle)
        if not (lower < v < upper):
            continue
        if best is None or (v >= value(best) if highest else v <= value(best)):
            best = candle
    return best


def select_price_range(window: Sequence[Candle], policy: Optional[ChartPolicy] = None) -> PriceBand:
    """Pick the visible price band for the displayed *window*.

    Raises:
        InsufficientDataError: fewer than two candles.
        DegenerateRangeError: no high or no low survives the outlier filter.
    """
    policy = resolve_policy(policy)
    mean, sdev = close_stats(window)
    lower = mean - policy.outlier_sigmas * sdev
    upper = mean + policy.outlier_sigmas * sdev

    at_max = _extreme(window, lambda c: c.high, lower, upper, highest=True)
    at_min = _extreme(window, lambda c: c.low, lower, upper, highest=False)
    if at_max is None or at_min is None:
        raise DegenerateRangeError(
            f"no candle inside the acceptance band [{lower:.4f}, {upper:.4f}] "
            f"(mean={mean:.4f}, sdev={sdev:.4f})"
        )

    return PriceBand(
        price_min=at_min.low,
        price_max=at_max.high,
        candle_at_max=at_max,
        candle_at_min=at_min,
        mean=mean,
        sdev=sdev,
        lower_bound=lower,
        upper_bound=upper,
    )
