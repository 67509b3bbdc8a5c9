"""Candle series contract.

Everything handed to the layout engine goes through this layer. The purpose
is to enforce a stable, read-only series contract so chart behavior doesn't
change when the feed format does.

Contract:
  - Candles keep the feed order (the feed is already ascending by date).
  - Numeric fields are coerced with ``errors="coerce"``: a malformed number
    becomes NaN, never 0 and never an exception. NaN is left for the range
    checks downstream to reject.
  - Rows whose date cannot be parsed are dropped (and logged).
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Sequence, Union, overload

import pandas as pd

from ..logging_utils import get_component_logger

log = get_component_logger(__name__, "market_data")

OHLC_COLUMNS = ("open", "high", "low", "close")


@dataclass(frozen=True)
class Candle:
    """A single OHLC bar.

    Attributes:
        date:  Trading day.
        open:  Opening price.
        high:  Highest price of the day.
        low:   Lowest price of the day.
        close: Closing price.

    ``low <= open, close <= high`` is assumed, not enforced.
    """

    date: datetime.date
    open: float
    high: float
    low: float
    close: float


class CandleSeries(Sequence[Candle]):
    """Immutable, chronologically ordered sequence of candles."""

    __slots__ = ("_candles",)

    def __init__(self, candles: Iterable[Candle] = ()):
        self._candles: tuple[Candle, ...] = tuple(candles)

    @overload
    def __getitem__(self, index: int) -> Candle: ...

    @overload
    def __getitem__(self, index: slice) -> "CandleSeries": ...

    def __getitem__(self, index: Union[int, slice]) -> Union[Candle, "CandleSeries"]:
        if isinstance(index, slice):
            return CandleSeries(self._candles[index])
        return self._candles[index]

    def __len__(self) -> int:
        return len(self._candles)

    def __iter__(self) -> Iterator[Candle]:
        return iter(self._candles)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CandleSeries):
            return NotImplemented
        return self._candles == other._candles

    def __hash__(self) -> int:
        return hash(self._candles)

    def __repr__(self) -> str:
        if not self._candles:
            return "CandleSeries([])"
        return f"CandleSeries({len(self)} candles, {self._candles[0].date} .. {self._candles[-1].date})"

    def tail(self, n: int) -> "CandleSeries":
        """Return the most recent *n* candles (all of them if fewer)."""
        if n <= 0:
            return CandleSeries()
        return CandleSeries(self._candles[-n:])

    @classmethod
    def from_frame(cls, df: Any) -> "CandleSeries":
        """Build a series from a DataFrame with date/open/high/low/close columns.

        Column names are matched case-insensitively (``Date``, ``Open`` ...).
        A ``timestamp`` column is accepted in place of ``date``.
        """
        if df is None or getattr(df, "empty", True):
            return cls()

        out = df.rename(columns={c: str(c).strip().lower() for c in df.columns})
        if "date" not in out.columns and "timestamp" in out.columns:
            out = out.rename(columns={"timestamp": "date"})

        missing = [c for c in ("date",) + OHLC_COLUMNS if c not in out.columns]
        if missing:
            raise ValueError(f"Missing columns: {missing}")

        out = out.copy()
        out["date"] = pd.to_datetime(out["date"], errors="coerce", format="mixed")
        for c in OHLC_COLUMNS:
            out[c] = pd.to_numeric(out[c], errors="coerce")

        bad_dates = int(out["date"].isna().sum())
        if bad_dates:
            log.warning("Dropping %d rows with unparseable dates", bad_dates)
            out = out.dropna(subset=["date"])

        nan_rows = int(out[list(OHLC_COLUMNS)].isna().any(axis=1).sum())
        if nan_rows:
            log.debug("%d rows carry non-numeric prices (kept as NaN)", nan_rows)

        candles = [
            Candle(
                date=ts.date(),
                open=float(o),
                high=float(h),
                low=float(lo),
                close=float(c),
            )
            for ts, o, h, lo, c in zip(out["date"], out["open"], out["high"], out["low"], out["close"])
        ]
        return cls(candles)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "CandleSeries":
        """Build a series from raw quote records (numeric strings allowed)."""
        rows = list(records)
        if not rows:
            return cls()
        return cls.from_frame(pd.DataFrame.from_records(rows))
