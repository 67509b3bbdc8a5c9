"""Centralized logging configuration helpers.

Keeps logging setup consistent between the CLI host and library modules.
Library modules only obtain loggers; handlers are installed by the host.
"""

from __future__ import annotations

import logging
import os
from typing import Optional


class _ContextDefaultsFilter(logging.Filter):
    """Ensure commonly-used structured fields exist on every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = "app"
        if not hasattr(record, "symbol"):
            record.symbol = "-"
        if not hasattr(record, "viewport"):
            record.viewport = "-"
        return True


def configure_logging(log_dir: Optional[str] = None, level: int = logging.INFO) -> None:
    """Configure root logging once with console + optional file sink."""
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_dir:
        try:
            os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(os.path.join(log_dir, "candlechart.log"), encoding="utf-8"))
        except OSError:
            # Best effort: fallback to console-only logging.
            pass

    context_filter = _ContextDefaultsFilter()
    for handler in handlers:
        handler.addFilter(context_filter)

    logging.basicConfig(
        level=level,
        format=(
            "%(asctime)s | %(levelname)s | %(name)s | "
            "component=%(component)s symbol=%(symbol)s viewport=%(viewport)s | "
            "%(message)s"
        ),
        handlers=handlers,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_component_logger(name: str, component: str) -> logging.LoggerAdapter:
    """Return a logger adapter that injects the component field."""
    return logging.LoggerAdapter(get_logger(name), {"component": component})


def with_context(log: logging.LoggerAdapter, **fields: str) -> logging.LoggerAdapter:
    """Return a copy of *log* carrying extra structured fields (e.g. viewport)."""
    return logging.LoggerAdapter(log.logger, {**(log.extra or {}), **fields})
