"""Date axis planning: which days get a gridline and which also get a label.

The window is walked newest to oldest. A day whose weekday number does not
advance by exactly one over the previous trading day starts a new "week"
and gets a gridline. Only every ``label_every``-th boundary (counting from
the newest) also gets a label, and never one inside the oldest
``label_skip_fraction`` of the window where labels would crowd the left
edge.

The gap test is deliberately calendar-naive: a mid-week holiday counts as a
boundary too. The heuristic does not look at the viewport width.
"""

from __future__ import annotations

import datetime
from typing import List, Optional, Sequence

from ..market_data.series import Candle
from .models import DateTick, format_date_label
from .pixels import round_px
from .policies import ChartPolicy, resolve_policy

MONDAY = 1


def weekday_number(date: datetime.date) -> int:
    """Sunday = 0 .. Saturday = 6."""
    return date.isoweekday() % 7


def is_consecutive_day(earlier: datetime.date, later: datetime.date) -> bool:
    return weekday_number(later) - weekday_number(earlier) == 1


def in_oldest_fraction(index: int, count: int, fraction: float) -> bool:
    """True if *index* (0 = oldest) lies within the oldest *fraction* of *count*, edge included."""
    return index <= count * fraction


def _tick(candle: Candle, index: int, candle_span: float, gridline: bool, label: bool) -> DateTick:
    return DateTick(
        date=candle.date,
        draws_gridline=gridline,
        draws_label=label,
        pixel_x=round_px(index * candle_span),
        label=format_date_label(candle.date),
    )


def plan_date_axis(
    window: Sequence[Candle],
    candle_span: float,
    policy: Optional[ChartPolicy] = None,
) -> List[DateTick]:
    """Return one DateTick per candle of *window*, in chronological order."""
    policy = resolve_policy(policy)
    count = len(window)
    ticks: List[DateTick] = []
    boundaries = 0

    for index in range(count - 1, -1, -1):
        candle = window[index]
        if index == 0:
            ticks.append(_tick(candle, index, candle_span, weekday_number(candle.date) == MONDAY, False))
            continue

        if is_consecutive_day(window[index - 1].date, candle.date):
            ticks.append(_tick(candle, index, candle_span, False, False))
            continue

        if boundaries % policy.label_every != 0:
            label = False
        elif in_oldest_fraction(index, count, policy.label_skip_fraction):
            label = False
        else:
            label = True
        ticks.append(_tick(candle, index, candle_span, True, label))
        boundaries += 1

    ticks.reverse()
    return ticks
