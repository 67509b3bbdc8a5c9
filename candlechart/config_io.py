"""Chart config I/O.

Reads and writes the single ``chart.ini`` file. Values missing from the file
fall back to the defaults from ``config_defaults``.
"""

from __future__ import annotations

import configparser
import os
from typing import Optional

from .config_defaults import default_chart_config
from .logging_utils import get_component_logger

log = get_component_logger(__name__, "config")


def _read_ini_with_fallback(cfg: configparser.ConfigParser, path: str) -> str:
    """Read an INI file robustly across common Windows encodings."""
    for enc in ("utf-8", "utf-8-sig", "cp1252", "latin-1"):
        try:
            cfg.read(path, encoding=enc)
            return enc
        except UnicodeDecodeError:
            continue

    # Last resort: avoid hard crash
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        cfg.read_file(f, source=path)
    return "utf-8+replace"


def load_chart_config(path: Optional[str] = None) -> configparser.ConfigParser:
    """Return the defaults overlaid with *path* (if given and present)."""
    cfg = default_chart_config()
    if not path:
        return cfg
    if not os.path.exists(path):
        log.warning("Config file %s not found; using defaults", path)
        return cfg
    enc = _read_ini_with_fallback(cfg, path)
    log.debug("Loaded %s (encoding=%s)", path, enc)
    return cfg


def write_chart_config(cfg: configparser.ConfigParser, path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        cfg.write(f)


def ensure_chart_config(path: str) -> configparser.ConfigParser:
    """Create *path* with defaults if missing, then load it."""
    if not os.path.exists(path):
        write_chart_config(default_chart_config(), path)
        log.info("Wrote default chart config to %s", path)
    return load_chart_config(path)

