"""Chart configuration schema validation helpers.

- Type checks and range checks for every [CHART] knob.
- Safe defaults are used *only* when strict mode is OFF.
- Range violations are always errors.

Used by:
- ChartPolicy.from_config
- The CLI startup gate in main.py
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from .charting.policies import CHART_SECTION, DEFAULT_CHART_POLICY

_BOOL_TRUE = {"1", "true", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "no", "n", "off"}


@dataclass
class ConfigValidationReport:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    values: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0


@dataclass(frozen=True)
class FieldSpec:
    section: str
    key: str
    kind: str  # "int" | "float" | "bool" | "enum" | "int_list"
    default: Any
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    allowed: Optional[Sequence[str]] = None


def _parse_bool(raw: Any) -> Optional[bool]:
    if raw is None:
        return None
    s = str(raw).strip().lower()
    if s in _BOOL_TRUE:
        return True
    if s in _BOOL_FALSE:
        return False
    return None


def _finite(raw: Any) -> float:
    x = float(str(raw).strip())
    if not math.isfinite(x):
        raise ValueError(f"non-finite value: {raw!r}")
    return x


def _coerce(spec: FieldSpec, raw: Any) -> tuple[bool, Any]:
    """Return (ok, value). Never raises."""
    try:
        if spec.kind == "int":
            return True, int(_finite(raw))
        if spec.kind == "float":
            return True, _finite(raw)
        if spec.kind == "bool":
            b = _parse_bool(raw)
            if b is None:
                return False, None
            return True, b
        if spec.kind == "enum":
            return True, str(raw).strip().upper()
        if spec.kind == "int_list":
            items = [s.strip() for s in str(raw).split(",") if s.strip()]
            if not items:
                return False, None
            return True, tuple(int(_finite(s)) for s in items)
    except (ValueError, OverflowError):
        return False, None

    return False, None


def _get_raw(config, section: str, key: str) -> Any:
    if not config.has_section(section):
        return None
    if not config.has_option(section, key):
        return None
    return config.get(section, key)


def _validate_field(config, spec: FieldSpec, rep: ConfigValidationReport, *, strict: bool) -> Any:
    raw = _get_raw(config, spec.section, spec.key)

    # Missing key
    if raw is None:
        if strict:
            rep.errors.append(f"Missing key: {spec.section}.{spec.key}")
        else:
            rep.warnings.append(f"Missing {spec.section}.{spec.key}; using default={spec.default!r}")
        return spec.default

    ok_type, val = _coerce(spec, raw)
    if not ok_type:
        msg = f"{spec.section}.{spec.key} has invalid type; expected {spec.kind}"
        if strict:
            rep.errors.append(msg)
            return spec.default
        rep.warnings.append(msg)
        val = spec.default

    # Enum check
    if spec.kind == "enum" and spec.allowed:
        allowed = [str(x).strip().upper() for x in spec.allowed]
        if val not in allowed:
            if strict:
                rep.errors.append(f"{spec.section}.{spec.key} must be one of {allowed}")
            else:
                rep.warnings.append(f"{spec.section}.{spec.key} is not one of {allowed}; using default={spec.default!r}")
            val = spec.default

    # Range checks (numeric only) are always errors; the default stands in.
    if spec.kind in ("int", "float", "int_list"):
        numbers = val if spec.kind == "int_list" else (val,)
        for number in numbers:
            if spec.min_value is not None and float(number) < float(spec.min_value):
                rep.errors.append(f"{spec.section}.{spec.key} must be >= {spec.min_value}")
                val = spec.default
                break
            if spec.max_value is not None and float(number) > float(spec.max_value):
                rep.errors.append(f"{spec.section}.{spec.key} must be <= {spec.max_value}")
                val = spec.default
                break

    return val


# ---------------------------------------------------------------------------
# Schema Index
#
# Key | Type | Default | Constraints / Notes
#
# CHART.reference_width | int | 1280 | >= 1
# CHART.reference_height | int | 720 | >= 1
# CHART.reference_candle_span | float | 30.0 | > 0; pixel pitch at reference_width
# CHART.window_fill | float | 0.88 | (0, 1]
# CHART.outlier_sigmas | float | 9.0 | > 0
# CHART.price_fill | float | 0.6 | (0, 1]
# CHART.grid_divisions | int | 5 | >= 1
# CHART.grid_spacings | int_list | 100,200,300,400,500,1000 | each >= 1
# CHART.label_every | int | 3 | >= 1
# CHART.label_skip_fraction | float | 0.1 | [0, 1]
# CHART.top_margin | float | 0.15 | [0, 1]
# CHART.axis_fraction | float | 0.89 | [0, 1]
# CHART.label_row_fraction | float | 0.9 | [0, 1]
# CHART.label_gap_fraction | float | 0.02 | [0, 1]
# CHART.font_size_pt | int | 18 | >= 1
# CHART.min_font_size_pt | int | 6 | >= 1
# CHART.animation_duration | int | 1000 | >= 0
# CHART.log_level | enum | INFO | DEBUG|INFO|WARNING|ERROR|CRITICAL
# CHART.strict_config_validation | bool | False | CLI startup gate
# ---------------------------------------------------------------------------

_P = DEFAULT_CHART_POLICY
_TINY = 0.000001

_SCHEMA: list[FieldSpec] = [
    FieldSpec(CHART_SECTION, "reference_width", "int", _P.reference_width, min_value=1),
    FieldSpec(CHART_SECTION, "reference_height", "int", _P.reference_height, min_value=1),
    FieldSpec(CHART_SECTION, "reference_candle_span", "float", _P.reference_candle_span, min_value=_TINY),
    FieldSpec(CHART_SECTION, "window_fill", "float", _P.window_fill, min_value=_TINY, max_value=1.0),
    FieldSpec(CHART_SECTION, "outlier_sigmas", "float", _P.outlier_sigmas, min_value=_TINY),
    FieldSpec(CHART_SECTION, "price_fill", "float", _P.price_fill, min_value=_TINY, max_value=1.0),
    FieldSpec(CHART_SECTION, "grid_divisions", "int", _P.grid_divisions, min_value=1),
    FieldSpec(CHART_SECTION, "grid_spacings", "int_list", _P.grid_spacings, min_value=1),
    FieldSpec(CHART_SECTION, "label_every", "int", _P.label_every, min_value=1),
    FieldSpec(CHART_SECTION, "label_skip_fraction", "float", _P.label_skip_fraction, min_value=0.0, max_value=1.0),
    FieldSpec(CHART_SECTION, "top_margin", "float", _P.top_margin, min_value=0.0, max_value=1.0),
    FieldSpec(CHART_SECTION, "axis_fraction", "float", _P.axis_fraction, min_value=0.0, max_value=1.0),
    FieldSpec(CHART_SECTION, "label_row_fraction", "float", _P.label_row_fraction, min_value=0.0, max_value=1.0),
    FieldSpec(CHART_SECTION, "label_gap_fraction", "float", _P.label_gap_fraction, min_value=0.0, max_value=1.0),
    FieldSpec(CHART_SECTION, "font_size_pt", "int", _P.font_size_pt, min_value=1),
    FieldSpec(CHART_SECTION, "min_font_size_pt", "int", _P.min_font_size_pt, min_value=1),
    FieldSpec(CHART_SECTION, "animation_duration", "int", _P.animation_duration, min_value=0),
    FieldSpec(
        CHART_SECTION,
        "log_level",
        "enum",
        "INFO",
        allowed=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
    ),
    FieldSpec(CHART_SECTION, "strict_config_validation", "bool", False),
]


def validate_chart_config(config, *, strict: bool = False) -> ConfigValidationReport:
    """Validate the [CHART] section.

    strict:
      - True: missing keys and bad types become errors
      - False: missing keys and bad types use safe defaults (warning)

    ``report.values`` holds the coerced value of every key, defaults filled in.
    """
    rep = ConfigValidationReport()

    if not config.has_section(CHART_SECTION):
        msg = f"Missing section: {CHART_SECTION}"
        if strict:
            rep.errors.append(msg)
        else:
            rep.warnings.append(msg + "; using defaults")

    for spec in _SCHEMA:
        rep.values[spec.key] = _validate_field(config, spec, rep, strict=strict)

    # Cross-field check.
    if rep.values["min_font_size_pt"] > rep.values["font_size_pt"]:
        rep.warnings.append(f"{CHART_SECTION}.min_font_size_pt exceeds font_size_pt; labels never scale")

    return rep
