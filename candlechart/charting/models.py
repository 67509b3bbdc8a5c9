"""Value records produced by the layout engine.

All records are frozen; sequences are tuples. A DrawPlan is superseded by the
next one, never mutated.
"""

from __future__ import annotations

import datetime
import enum
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

from ..market_data.series import Candle
from .pixels import round_px

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_date_label(date: datetime.date) -> str:
    """``Jan 5, 2017`` style label."""
    return f"{_MONTHS[date.month - 1]} {date.day}, {date.year}"


def format_price_label(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


class Direction(str, enum.Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int

    @classmethod
    def for_width(cls, width: int, reference_width: int = 1280, reference_height: int = 720) -> "Viewport":
        """Viewport keeping the reference aspect ratio for a host *width*."""
        return cls(int(width), round_px(reference_height * width / reference_width))


@dataclass(frozen=True)
class PriceBand:
    """Price band chosen by the outlier-rejecting range selector.

    ``price_max``/``price_min`` come from ``candle_at_max.high`` and
    ``candle_at_min.low``; ``lower_bound``/``upper_bound`` are the acceptance
    band around the mean close.
    """

    price_min: float
    price_max: float
    candle_at_max: Candle
    candle_at_min: Candle
    mean: float
    sdev: float
    lower_bound: float
    upper_bound: float

    @property
    def swing(self) -> float:
        return self.price_max - self.price_min

    def contains(self, *values: float) -> bool:
        """True if every value lies in ``[price_min, price_max]`` (NaN never does)."""
        return all(self.price_min <= v <= self.price_max for v in values)


@dataclass(frozen=True)
class PriceTick:
    value: float
    pixel_y: int
    label: str = ""


@dataclass(frozen=True)
class PriceAxis:
    price_ratio: float
    spacing: int
    ticks: Tuple[PriceTick, ...]


@dataclass(frozen=True)
class DateTick:
    date: datetime.date
    draws_gridline: bool
    draws_label: bool
    pixel_x: int
    label: str = ""


@dataclass(frozen=True)
class CandleGeometry:
    """Geometry of one candle, relative to the price baseline.

    ``*_end`` is the settled body, ``*_start`` the initial 1px bar of the
    grow-in animation. ``None`` marks a shape clipped by the price band.
    """

    pixel_x: int
    direction: Direction
    wick_top_y: Optional[int] = None
    wick_bottom_y: Optional[int] = None
    body_top_y_start: Optional[int] = None
    body_top_y_end: Optional[int] = None
    body_height_start: Optional[int] = None
    body_height_end: Optional[int] = None

    @property
    def draws_wick(self) -> bool:
        return self.wick_top_y is not None

    @property
    def draws_body(self) -> bool:
        return self.body_top_y_end is not None


@dataclass(frozen=True)
class DrawPlan:
    """Renderer-agnostic description of one chart render."""

    width: int
    height: int
    price_ticks: Tuple[PriceTick, ...]
    date_ticks: Tuple[DateTick, ...]
    candles: Tuple[CandleGeometry, ...]
    baseline_y: int

    # Renderer hints
    price_band: PriceBand
    price_ratio: float
    candle_span: float
    candle_offset_x: int
    body_width: int
    plot_width: int
    axis_y: int
    date_label_y: int
    price_label_x: int
    font_size_pt: int
    animation_duration: int

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation (dates ISO formatted, enums by value)."""
        return {f.name: _plain(getattr(self, f.name)) for f in fields(self)}


def _plain(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if hasattr(value, "__dataclass_fields__"):
        return {f.name: _plain(getattr(value, f.name)) for f in fields(value)}
    return value
