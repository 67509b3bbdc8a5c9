import argparse
import json
import logging
import sys
from typing import Optional, Sequence

import pandas as pd

from candlechart.charting import ChartLayoutError, ChartPolicy, Viewport, build_draw_plan
from candlechart.config_io import load_chart_config
from candlechart.config_validate import validate_chart_config
from candlechart.logging_utils import configure_logging, get_component_logger, with_context
from candlechart.market_data import CandleSeries

EXIT_OK = 0
EXIT_SKIPPED = 1
EXIT_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="candlechart", description="Lay out a candlestick chart as a JSON draw plan.")
    p.add_argument("--csv", required=True, help="Quote CSV with Date/Open/High/Low/Close columns, oldest first")
    p.add_argument("--width", type=int, default=None, help="Viewport width (default: reference width)")
    p.add_argument("--height", type=int, default=None, help="Viewport height (default: derived from width)")
    p.add_argument("--config", default=None, help="chart.ini with a [CHART] section")
    p.add_argument("--symbol", default="-", help="Symbol name for log context")
    p.add_argument("--log-level", default=None, help="Override CHART.log_level")
    p.add_argument("--log-dir", default=None, help="Also write candlechart.log here")
    p.add_argument("--output", default=None, help="Write the plan here instead of stdout")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    # 1) Load config
    config = load_chart_config(args.config)
    rep = validate_chart_config(config)
    strict = bool(rep.values.get("strict_config_validation"))
    if strict:
        rep = validate_chart_config(config, strict=True)
    level_name = (args.log_level or rep.values.get("log_level") or "INFO").upper()
    configure_logging(args.log_dir, level=getattr(logging, level_name, logging.INFO))
    log = with_context(get_component_logger(__name__, "cli"), symbol=args.symbol)

    # 2) Validate config (strict mode optional)
    for warning in rep.warnings:
        log.warning("[CONFIG] %s", warning)
    if rep.errors:
        for err in rep.errors:
            log.error("[CONFIG] %s", err)
        if strict:
            log.error("Configuration validation failed in strict mode")
            return EXIT_ERROR
    policy = ChartPolicy.from_values(rep.values)

    # 3) Load quotes
    try:
        df = pd.read_csv(args.csv, dtype=str)
        series = CandleSeries.from_frame(df)
    except (OSError, ValueError) as exc:
        log.error("Could not read quotes from %s: %s", args.csv, exc)
        return EXIT_ERROR
    log.info("Loaded %d candles from %s", len(series), args.csv)

    # 4) Lay out
    width = args.width if args.width is not None else policy.reference_width
    viewport = Viewport.for_width(width, policy.reference_width, policy.reference_height)
    if args.height is not None:
        viewport = Viewport(viewport.width, args.height)

    try:
        plan = build_draw_plan(series, viewport, policy)
    except (ChartLayoutError, ValueError) as exc:
        log.error("Layout failed: %s", exc)
        return EXIT_ERROR

    if plan is None:
        log.info("Not enough history for a %dx%d viewport; nothing to draw", viewport.width, viewport.height)
        return EXIT_SKIPPED

    # 5) Emit
    text = json.dumps(plan.to_dict(), indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        log.info("Wrote draw plan to %s", args.output)
    else:
        sys.stdout.write(text + "\n")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
