"""Stdout logging for the `taskrelay` logger tree."""

from __future__ import annotations

import logging
import os
import sys

LOGGER_NAME = "taskrelay"
_CONFIGURED_ATTR = "_taskrelay_stream_logging"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _parse_level(raw: str) -> int:
    normalized = raw.strip().upper()
    level = logging.getLevelName(normalized)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stdout handler to the `taskrelay` logger.

    `TASKRELAY_LOG_LEVEL` overrides `level`. Safe to call repeatedly.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_parse_level(os.getenv("TASKRELAY_LOG_LEVEL") or level))
    logger.propagate = False

    if not any(getattr(handler, _CONFIGURED_ATTR, False) for handler in logger.handlers):
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        setattr(handler, _CONFIGURED_ATTR, True)
        logger.addHandler(handler)
    return logger
