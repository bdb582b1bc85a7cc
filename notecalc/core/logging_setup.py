"""Application-wide logging configuration."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import Settings

APP_LOGGER = "notecalc"

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Configure the "notecalc" logger.

    Module loggers (logging.getLogger(__name__)) propagate to it. Calling this
    again is a no-op apart from updating the level, so app factories can call
    it freely.
    """
    logger = logging.getLogger(APP_LOGGER)
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)

    # Prevent duplicate handlers on re-import
    if logger.handlers:
        return logger

    logger.propagate = False
    fmt = logging.Formatter(_FORMAT)

    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if settings.log_file:
        log_path = Path(settings.log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            log_path,
            maxBytes=2 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    logger.info("Logging initialized. env=%s log_file=%s", settings.app_env, settings.log_file or "-")
    return logger
