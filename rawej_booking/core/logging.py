"""Logging setup for the booking data layer."""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "rawej_booking"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# httpx logs every request at INFO; the transport already reports failures
_QUIET_LOGGERS = ("httpx", "httpcore")


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Configure stdout logging once at application startup.

    Args:
        level: Level or level name from settings, e.g. "DEBUG". Unknown names
            fall back to INFO.
    """
    resolved = _coerce_level(level)
    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the package namespace; no name gives the package logger."""
    if name is None or name == PACKAGE_LOGGER:
        return logging.getLogger(PACKAGE_LOGGER)
    if not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
