import datetime
import json
import logging
import math

import pytest

from candlechart.charting import (
    DegenerateRangeError,
    Direction,
    InsufficientDataError,
    LayoutSession,
    Viewport,
    build_draw_plan,
)
from candlechart.charting.policies import ChartPolicy
from candlechart.market_data import Candle, CandleSeries
from candlechart.tests.series_factories import business_days, flat_candle, ramp_series


def _wavy_series(count=60):
    candles = []
    for i, d in enumerate(business_days(datetime.date(2017, 1, 2), count)):
        close = 19000.0 + 400.0 * math.sin(i / 4.0)
        open_ = close - 60.0 * math.cos(i)
        candles.append(
            Candle(date=d, open=open_, high=max(open_, close) + 40.0, low=min(open_, close) - 40.0, close=close)
        )
    return CandleSeries(candles)


def test_plan_covers_the_most_recent_window():
    series = _wavy_series()
    plan = build_draw_plan(series, Viewport(1280, 720))

    assert plan is not None
    assert (plan.width, plan.height) == (1280, 720)
    assert len(plan.candles) == 38
    assert len(plan.date_ticks) == 38
    assert [t.date for t in plan.date_ticks] == [c.date for c in series[-38:]]


def test_plan_is_deterministic():
    series = _wavy_series()
    assert build_draw_plan(series, Viewport(1280, 720)) == build_draw_plan(series, Viewport(1280, 720))


def test_renderer_hints_at_reference_viewport():
    plan = build_draw_plan(_wavy_series(), Viewport(1280, 720))

    assert plan.candle_span == 30.0
    assert plan.candle_offset_x == 15
    assert plan.body_width == 20
    assert plan.plot_width == 1140
    assert plan.axis_y == 641
    assert plan.date_label_y == 648
    assert plan.price_label_x == 1166
    assert plan.font_size_pt == 18
    assert plan.animation_duration == 1000
    expected = math.floor(plan.price_band.price_max / plan.price_ratio + 720 * 0.15 + 0.5)
    assert plan.baseline_y == expected


def test_font_size_has_a_floor():
    plan = build_draw_plan(_wavy_series(), Viewport(320, 180))
    assert plan.font_size_pt == 6


def test_price_ticks_lie_inside_the_band():
    plan = build_draw_plan(_wavy_series(), Viewport(1280, 720))

    assert plan.price_ticks
    for tick in plan.price_ticks:
        assert plan.price_band.price_min < tick.value <= plan.price_band.price_max


def test_candle_directions_follow_close_vs_open():
    series = _wavy_series()
    plan = build_draw_plan(series, Viewport(1280, 720))

    for candle, geom in zip(series[-38:], plan.candles):
        assert geom.direction is (Direction.UP if candle.close > candle.open else Direction.DOWN)


def test_short_history_returns_none(caplog):
    with caplog.at_level(logging.DEBUG, logger="candlechart.charting.engine"):
        assert build_draw_plan(ramp_series(10), Viewport(1280, 720)) is None
    assert any(getattr(r, "viewport", "") == "1280x720" for r in caplog.records)


def test_single_candle_window_is_insufficient():
    policy = ChartPolicy(window_fill=0.02)
    with pytest.raises(InsufficientDataError):
        build_draw_plan(ramp_series(40), Viewport(1280, 720), policy)


def test_flat_series_is_degenerate():
    series = CandleSeries(flat_candle(d, 100.0) for d in business_days(datetime.date(2017, 1, 2), 40))
    with pytest.raises(DegenerateRangeError):
        build_draw_plan(series, Viewport(1280, 720))


@pytest.mark.parametrize("viewport", [Viewport(0, 720), Viewport(1280, 0), Viewport(-5, 10)])
def test_invalid_viewport_is_rejected(viewport):
    with pytest.raises(ValueError):
        build_draw_plan(_wavy_series(), viewport)


def test_viewport_for_width_keeps_aspect_ratio():
    assert Viewport.for_width(1280) == Viewport(1280, 720)
    assert Viewport.for_width(640) == Viewport(640, 360)
    assert Viewport.for_width(1000) == Viewport(1000, 563)


def test_plan_to_dict_is_json_ready():
    plan = build_draw_plan(_wavy_series(), Viewport(1280, 720))
    data = json.loads(json.dumps(plan.to_dict()))

    assert data["date_ticks"][0]["date"] == plan.date_ticks[0].date.isoformat()
    assert data["candles"][0]["direction"] in ("up", "down")
    assert data["price_band"]["candle_at_max"]["high"] == plan.price_band.price_max


def test_session_replaces_plan_and_keeps_last_good_one():
    session = LayoutSession()
    series = _wavy_series()

    first = session.refresh(series, Viewport(1280, 720))
    assert session.plan is first

    assert session.refresh(ramp_series(5), Viewport(1280, 720)) is None
    assert session.plan is first

    flat = CandleSeries(flat_candle(d, 100.0) for d in business_days(datetime.date(2017, 1, 2), 40))
    with pytest.raises(DegenerateRangeError):
        session.refresh(flat, Viewport(1280, 720))
    assert session.plan is first

    second = session.resize(series, 640)
    assert second is not first
    assert session.plan is second
    assert (second.width, second.height) == (640, 360)
