"""Chart layout policies (LOCKED defaults).

Centralizes every tunable of the layout engine in a single immutable
ChartPolicy:
  * reference viewport 1280x720 with a 30px candle pitch at that width
  * 88% of the width filled with candles
  * 9-sigma outlier guard on closing prices
  * 60% of the height reserved for the price swing
  * grid spacing picked from 100/200/300/400/500/1000
  * one date label every 3 week boundaries, none in the oldest 10%

Any future visual change should be made by changing ChartPolicy defaults
(explicitly) rather than by ad-hoc edits in the planners.
"""

from __future__ import annotations

import configparser
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

from .pixels import round_px

CHART_SECTION = "CHART"


@dataclass(frozen=True)
class ChartPolicy:
    """Immutable layout policy.

    Keep defaults stable unless intentionally changing visual behavior.
    """

    reference_width: int = 1280
    reference_height: int = 720
    reference_candle_span: float = 30.0
    window_fill: float = 0.88

    # Price band / axis
    outlier_sigmas: float = 9.0
    price_fill: float = 0.6
    grid_divisions: int = 5
    grid_spacings: Tuple[int, ...] = (100, 200, 300, 400, 500, 1000)

    # Date axis label thinning
    label_every: int = 3
    label_skip_fraction: float = 0.1

    # Renderer hints
    top_margin: float = 0.15
    axis_fraction: float = 0.89
    label_row_fraction: float = 0.9
    label_gap_fraction: float = 0.02
    font_size_pt: int = 18
    min_font_size_pt: int = 6
    animation_duration: int = 1000

    def candle_span(self, width: int) -> float:
        """Pixel pitch between candle centers, scaled from the reference width."""
        return self.reference_candle_span * width / self.reference_width

    def font_size(self, width: int) -> int:
        return max(self.min_font_size_pt, round_px(self.font_size_pt * width / self.reference_width))

    @classmethod
    def from_values(cls, values: Dict[str, Any]) -> "ChartPolicy":
        """Build a policy from already-coerced values, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in values.items() if k in known}
        if "grid_spacings" in kwargs:
            kwargs["grid_spacings"] = tuple(int(s) for s in kwargs["grid_spacings"])
        return cls(**kwargs)

    @classmethod
    def from_config(cls, config: configparser.ConfigParser, *, strict: bool = False) -> "ChartPolicy":
        """Build a policy from the [CHART] section of *config*.

        Invalid values fall back to defaults unless *strict* is set, in which
        case ValueError lists every problem.
        """
        from ..config_validate import validate_chart_config

        rep = validate_chart_config(config, strict=strict)
        if strict and not rep.ok:
            raise ValueError("; ".join(rep.errors))
        return cls.from_values(rep.values)


# Single source of truth: locked default policy.
DEFAULT_CHART_POLICY = ChartPolicy()


def get_locked_default_policy() -> ChartPolicy:
    """Return the locked default policy (explicit API)."""
    return DEFAULT_CHART_POLICY


def resolve_policy(policy: Optional[ChartPolicy]) -> ChartPolicy:
    return DEFAULT_CHART_POLICY if policy is None else policy
