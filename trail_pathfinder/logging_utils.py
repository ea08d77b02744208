from __future__ import annotations

import logging
from typing import Optional

from pythonjsonlogger import jsonlogger

from trail_pathfinder.config import LOG_LEVEL

ROOT_LOGGER = "trail_pathfinder"


def _parse_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _configure_root() -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)

    # Prevent duplicate handlers (flask reloader imports twice)
    if getattr(logger, "_configured", False):
        return logger

    logger.setLevel(_parse_level(LOG_LEVEL))
    logger.propagate = False

    sh = logging.StreamHandler()
    sh.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(sh)

    logger._configured = True  # type: ignore[attr-defined]
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    root = _configure_root()
    if not name:
        return root
    short = name.rsplit(".", 1)[-1]
    return root.getChild(short)
