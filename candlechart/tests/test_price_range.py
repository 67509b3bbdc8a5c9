import datetime
import statistics

import pytest

from candlechart.charting import DegenerateRangeError, InsufficientDataError, select_price_range
from candlechart.charting.policies import ChartPolicy
from candlechart.market_data import Candle, CandleSeries
from candlechart.tests.series_factories import business_days, flat_candle, ramp_series


def _with_glitch(series, index, close=50000.0):
    candles = list(series)
    c = candles[index]
    candles[index] = Candle(date=c.date, open=c.open, high=close, low=c.low, close=close)
    return CandleSeries(candles)


def test_price_band_uses_highest_high_and_lowest_low():
    series = ramp_series(20)
    band = select_price_range(series)

    assert band.candle_at_max is series[-1]
    assert band.candle_at_min is series[0]
    assert band.price_max == pytest.approx(10210.0)
    assert band.price_min == pytest.approx(9790.0)


def test_mean_and_sample_sdev_of_closes():
    series = ramp_series(20)
    closes = [c.close for c in series]
    band = select_price_range(series)

    assert band.mean == pytest.approx(statistics.mean(closes))
    assert band.sdev == pytest.approx(statistics.stdev(closes))
    assert band.upper_bound == pytest.approx(band.mean + 9 * band.sdev)
    assert band.lower_bound == pytest.approx(band.mean - 9 * band.sdev)


def test_injected_close_is_rejected_from_max_search():
    series = _with_glitch(ramp_series(200), 150)
    band = select_price_range(series)

    assert band.candle_at_max is not series[150]
    assert band.price_max == pytest.approx(10210.0)
    assert band.price_min == pytest.approx(9790.0)


def test_retained_extremes_lie_within_sigma_bound():
    series = _with_glitch(ramp_series(200), 42)
    band = select_price_range(series)

    assert abs(band.candle_at_max.high - band.mean) < 9 * band.sdev
    assert abs(band.candle_at_min.low - band.mean) < 9 * band.sdev


def test_high_and_low_filters_are_independent():
    # The last candle's high is a glitch but its low is ordinary, so it can
    # still be the min-low candle while being excluded from the max search.
    series = ramp_series(200)
    candles = list(series)
    last = candles[-1]
    candles[-1] = Candle(date=last.date, open=9700.0, high=90000.0, low=9500.0, close=9700.0)
    band = select_price_range(CandleSeries(candles))

    assert band.candle_at_min is candles[-1]
    assert band.candle_at_max is not candles[-1]


def test_tighter_sigma_policy_narrows_the_band():
    series = ramp_series(20)
    band = select_price_range(series, ChartPolicy(outlier_sigmas=1.0))

    assert band.price_max < 10210.0
    assert band.price_min > 9790.0


def test_fewer_than_two_candles_is_insufficient():
    one = CandleSeries([flat_candle(datetime.date(2017, 1, 2), 100.0)])
    with pytest.raises(InsufficientDataError):
        select_price_range(one)
    with pytest.raises(InsufficientDataError):
        select_price_range(CandleSeries())


def test_identical_closes_leave_nothing_inside_the_band():
    series = CandleSeries(flat_candle(d, 100.0, spread=5.0) for d in business_days(datetime.date(2017, 1, 2), 10))
    with pytest.raises(DegenerateRangeError):
        select_price_range(series)


def test_nan_close_poisons_the_band():
    candles = list(ramp_series(20))
    c = candles[5]
    candles[5] = Candle(date=c.date, open=c.open, high=c.high, low=c.low, close=float("nan"))
    with pytest.raises(DegenerateRangeError):
        select_price_range(CandleSeries(candles))


def test_tied_extremes_resolve_to_the_later_candle():
    days = business_days(datetime.date(2017, 1, 2), 4)
    c = [
        Candle(days[0], 100.0, 110.0, 90.0, 100.0),
        Candle(days[1], 100.0, 110.0, 90.0, 104.0),
        Candle(days[2], 100.0, 105.0, 95.0, 100.0),
        Candle(days[3], 100.0, 106.0, 96.0, 104.0),
    ]
    band = select_price_range(CandleSeries(c))

    assert band.candle_at_max is c[1]
    assert band.candle_at_min is c[1]
