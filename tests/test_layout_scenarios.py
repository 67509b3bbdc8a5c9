import datetime

import pytest

from candlechart.charting import ChartPolicy, Viewport, build_draw_plan, candle_count, plan_date_axis
from candlechart.market_data import Candle, CandleSeries
from candlechart.tests.series_factories import business_days, ramp_series


def _labels(ticks):
    return [i for i, t in enumerate(ticks) if t.draws_label]


def test_identical_short_series_is_not_rendered():
    days = business_days(datetime.date(2017, 1, 2), 10)
    series = CandleSeries(Candle(d, 100.0, 105.0, 95.0, 100.0) for d in days)

    assert candle_count(1280) > 10
    assert build_draw_plan(series, Viewport(1280, 720)) is None


def test_glitch_close_does_not_stretch_the_price_axis():
    # A finer candle pitch puts 225 candles in the window, enough for a
    # single 50000 close to fall outside the 9-sigma band.
    policy = ChartPolicy(reference_candle_span=5.0)
    candles = list(ramp_series(260))
    glitch = candles[250]
    candles[250] = Candle(glitch.date, glitch.open, 50000.0, glitch.low, 50000.0)
    series = CandleSeries(candles)

    plan = build_draw_plan(series, Viewport(1280, 720), policy)

    assert plan is not None
    assert len(plan.candles) == 225
    assert plan.price_band.price_max == pytest.approx(10210.0)
    assert plan.price_band.candle_at_max is not candles[250]
    glitch_geom = plan.candles[250 - 35]
    assert glitch_geom.draws_wick is False
    assert glitch_geom.draws_body is False


def test_boundary_on_the_oldest_tenth_edge_has_no_label():
    window = CandleSeries(
        Candle(d, 100.0, 101.0, 99.0, 100.0) for d in business_days(datetime.date(2017, 1, 5), 20)
    )
    ticks = plan_date_axis(window, 30.0)

    assert ticks[2].draws_gridline is True
    assert ticks[2].draws_label is False


def test_labels_every_third_week_boundary():
    series = ramp_series(38, start=datetime.date(2017, 1, 2))
    plan = build_draw_plan(series, Viewport(1280, 720))

    gridlines = [i for i, t in enumerate(plan.date_ticks) if t.draws_gridline]
    assert gridlines == [0, 5, 10, 15, 20, 25, 30, 35]
    # Newest first: 35 labeled, 30 and 25 gridline only, 20 labeled, ...
    assert _labels(plan.date_ticks) == [5, 20, 35]


@pytest.mark.parametrize("length", [37, 38, 39, 120])
def test_window_is_a_contiguous_suffix(length):
    series = ramp_series(length)
    plan = build_draw_plan(series, Viewport(1280, 720))

    if length < 38:
        assert plan is None
        return
    assert len(plan.candles) == min(length, 38)
    assert [t.date for t in plan.date_ticks] == [c.date for c in series[length - 38:]]


def test_same_input_same_plan():
    series = ramp_series(80)
    a = build_draw_plan(series, Viewport(960, 540))
    b = build_draw_plan(series, Viewport(960, 540))
    assert a == b
    assert a.to_dict() == b.to_dict()
