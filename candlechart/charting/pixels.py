"""Pixel rounding helpers."""

from __future__ import annotations

import math


def round_px(value: float) -> int:
    """Round half up (``floor(x + 0.5)``), so ``-2.5`` becomes ``-2``.

    The builtin ``round`` uses banker's rounding, which shifts shapes by a
    pixel on exact halves.
    """
    return int(math.floor(value + 0.5))


def price_to_y(price: float, price_ratio: float) -> int:
    """Y offset of *price* from the price baseline (higher price, smaller y)."""
    return -round_px(price / price_ratio)
