"""Price axis planning: vertical scale and horizontal grid lines."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from .errors import DegenerateRangeError
from .models import PriceAxis, PriceBand, PriceTick, format_price_label
from .pixels import price_to_y
from .policies import ChartPolicy, resolve_policy


def price_ratio_for(band: PriceBand, height: int, policy: Optional[ChartPolicy] = None) -> float:
    """Price units per pixel; the swing fills ``policy.price_fill`` of *height*."""
    policy = resolve_policy(policy)
    if not band.swing > 0:
        raise DegenerateRangeError(f"price band has no height ({band.price_min} .. {band.price_max})")
    return band.swing / policy.price_fill / height


def choose_grid_spacing(swing: float, candidates: Sequence[int], divisions: int = 5) -> int:
    """Candidate closest to ``swing / divisions``.

    Candidates are walked in order; one at less-or-equal distance replaces
    the current best, so on a tie the later candidate wins.
    """
    target = swing / divisions
    best = candidates[0]
    for candidate in candidates[1:]:
        if abs(candidate - target) <= abs(best - target):
            best = candidate
    return best


def price_levels(price_max: float, price_min: float, spacing: int) -> List[int]:
    """Grid values from just below *price_max* down to just above *price_min*."""
    levels: List[int] = []
    value = math.floor(price_max / spacing) * spacing
    while value > price_min:
        levels.append(value)
        value -= spacing
    return levels


def plan_price_axis(band: PriceBand, height: int, policy: Optional[ChartPolicy] = None) -> PriceAxis:
    policy = resolve_policy(policy)
    ratio = price_ratio_for(band, height, policy)
    spacing = choose_grid_spacing(band.swing, policy.grid_spacings, policy.grid_divisions)
    ticks = tuple(
        PriceTick(value=value, pixel_y=price_to_y(value, ratio), label=format_price_label(value))
        for value in price_levels(band.price_max, band.price_min, spacing)
    )
    return PriceAxis(price_ratio=ratio, spacing=spacing, ticks=ticks)
