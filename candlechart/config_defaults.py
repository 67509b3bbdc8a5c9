"""Default chart config builder.

This module owns the default values of the [CHART] INI section. They mirror
the locked ChartPolicy defaults, so a freshly written config reproduces the
default layout exactly.
"""

from __future__ import annotations

import configparser

from .charting.policies import CHART_SECTION, DEFAULT_CHART_POLICY


def _new_config_parser() -> configparser.ConfigParser:
    """Create a robust ConfigParser.

    - Preserve option name case (optionxform=str)
    - Disable interpolation to avoid '%' parsing errors
    - Allow inline comments (# / ;)
    - Allow duplicates in damaged INI files (last one wins)
    """
    cfg = configparser.ConfigParser(
        interpolation=None,
        inline_comment_prefixes=("#", ";"),
        strict=False,
    )
    cfg.optionxform = str
    return cfg


def default_chart_config() -> configparser.ConfigParser:
    """Return a ConfigParser containing the default [CHART] section."""
    p = DEFAULT_CHART_POLICY
    cfg = _new_config_parser()

    cfg[CHART_SECTION] = {
        # Viewport reference
        "reference_width": str(p.reference_width),
        "reference_height": str(p.reference_height),
        "reference_candle_span": str(p.reference_candle_span),
        "window_fill": str(p.window_fill),
        # Price band / axis
        "outlier_sigmas": str(p.outlier_sigmas),
        "price_fill": str(p.price_fill),
        "grid_divisions": str(p.grid_divisions),
        "grid_spacings": ",".join(str(s) for s in p.grid_spacings),
        # Date labels
        "label_every": str(p.label_every),
        "label_skip_fraction": str(p.label_skip_fraction),
        # Renderer hints
        "top_margin": str(p.top_margin),
        "axis_fraction": str(p.axis_fraction),
        "label_row_fraction": str(p.label_row_fraction),
        "label_gap_fraction": str(p.label_gap_fraction),
        "font_size_pt": str(p.font_size_pt),
        "min_font_size_pt": str(p.min_font_size_pt),
        "animation_duration": str(p.animation_duration),
        # Host
        "log_level": "INFO",
        "strict_config_validation": "False",
    }
    return cfg
