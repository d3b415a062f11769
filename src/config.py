"""Runtime configuration loaded from the environment (and .env)."""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv

from constants import DEFAULT_MAX_LAG_DAYS

load_dotenv()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def get_default_max_lag() -> int:
    """Return the lag-sweep width in days.

    Reads INSIGHTS_MAX_LAG_DAYS, falling back to DEFAULT_MAX_LAG_DAYS.
    """
    raw = os.getenv("INSIGHTS_MAX_LAG_DAYS")
    if raw is None or raw.strip() == "":
        return DEFAULT_MAX_LAG_DAYS
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"INSIGHTS_MAX_LAG_DAYS must be an integer, got {raw!r}")
    if value < 0:
        raise RuntimeError(f"INSIGHTS_MAX_LAG_DAYS must be >= 0, got {value}")
    return value


def get_log_level() -> str:
    level = (os.getenv("INSIGHTS_LOG_LEVEL") or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise RuntimeError(f"INSIGHTS_LOG_LEVEL is not a logging level: {level!r}")
    return level


def configure_logging(level: Optional[str] = None):
    """Configure root logging for scripts and notebooks using the engine."""
    logging.basicConfig(
        level=level or get_log_level(),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
