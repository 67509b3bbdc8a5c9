"""Chart layout engine.

``build_draw_plan`` is the single pure entry point: a CandleSeries snapshot
and a viewport in, a DrawPlan (or None while history is too short) out.
Every data fetch and every resize is just another call.
"""

from __future__ import annotations

from typing import Optional

from ..logging_utils import get_component_logger, with_context
from ..market_data.series import CandleSeries
from .candles import compile_candles, window_candles
from .date_axis import plan_date_axis
from .errors import ChartLayoutError
from .models import DrawPlan, Viewport
from .pixels import round_px
from .policies import ChartPolicy, resolve_policy
from .price_axis import plan_price_axis
from .price_range import select_price_range

log = get_component_logger(__name__, "layout")


def _check_viewport(viewport: Viewport) -> None:
    for name in ("width", "height"):
        value = getattr(viewport, name)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f"viewport {name} must be a positive integer, got {value!r}")


def build_draw_plan(
    series: CandleSeries,
    viewport: Viewport,
    policy: Optional[ChartPolicy] = None,
) -> Optional[DrawPlan]:
    """Lay out *series* for *viewport*.

    Returns None when the series is shorter than the window the viewport
    holds.

    Raises:
        ValueError: non-positive viewport.
        InsufficientDataError, DegenerateRangeError: no usable price band.
    """
    policy = resolve_policy(policy)
    _check_viewport(viewport)
    width, height = viewport.width, viewport.height
    vlog = with_context(log, viewport=f"{width}x{height}")

    window = window_candles(series, width, policy)
    if window is None:
        vlog.debug("Skipping render: %d candles of history", len(series))
        return None

    span = policy.candle_span(width)
    band = select_price_range(window, policy)
    price_axis = plan_price_axis(band, height, policy)
    date_ticks = plan_date_axis(window, span, policy)
    candles = compile_candles(window, band, price_axis.price_ratio, span)

    plot_width = len(window) * span
    plan = DrawPlan(
        width=width,
        height=height,
        price_ticks=price_axis.ticks,
        date_ticks=tuple(date_ticks),
        candles=tuple(candles),
        baseline_y=round_px(band.price_max / price_axis.price_ratio + height * policy.top_margin),
        price_band=band,
        price_ratio=price_axis.price_ratio,
        candle_span=span,
        candle_offset_x=round_px(span * 0.5),
        body_width=round_px(span / 3) * 2,
        plot_width=round_px(plot_width),
        axis_y=round_px(height * policy.axis_fraction),
        date_label_y=round_px(height * policy.label_row_fraction),
        price_label_x=round_px(plot_width + width * policy.label_gap_fraction),
        font_size_pt=policy.font_size(width),
        animation_duration=policy.animation_duration,
    )
    vlog.debug(
        "Laid out %d candles, band %.2f..%.2f, grid %d (%d price ticks)",
        len(window),
        band.price_min,
        band.price_max,
        price_axis.spacing,
        len(plan.price_ticks),
    )
    return plan


class LayoutSession:
    """Holds the most recent DrawPlan for a host.

    Each refresh recomputes the plan from scratch and replaces the previous
    one wholesale. A skipped or failed refresh keeps the last good plan.
    """

    def __init__(self, policy: Optional[ChartPolicy] = None):
        self.policy = resolve_policy(policy)
        self.plan: Optional[DrawPlan] = None

    def refresh(self, series: CandleSeries, viewport: Viewport) -> Optional[DrawPlan]:
        """Recompute and store the plan; returns the new plan or None if skipped.

        Layout errors propagate to the caller after being logged.
        """
        try:
            plan = build_draw_plan(series, viewport, self.policy)
        except ChartLayoutError as exc:
            with_context(log, viewport=f"{viewport.width}x{viewport.height}").warning("Layout failed: %s", exc)
            raise
        if plan is not None:
            self.plan = plan
        return plan

    def resize(self, series: CandleSeries, width: int) -> Optional[DrawPlan]:
        """Refresh for a new host width, keeping the reference aspect ratio."""
        viewport = Viewport.for_width(width, self.policy.reference_width, self.policy.reference_height)
        return self.refresh(series, viewport)
