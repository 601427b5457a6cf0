"""Logging setup shared by the UI entry point and services."""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
HANDLER_NAME = "snapdeck-console"


def setup_logger(name: str = "snapdeck", level: Optional[str] = None) -> logging.Logger:
    """
    Configure and return the named logger.

    Safe to call more than once; the stream handler is only attached the first time.

    Args:
        name: Logger name, normally the package root
        level: Level name; defaults to SNAPDECK_LOG_LEVEL or INFO
    """
    logger = logging.getLogger(name)
    level_name = (level or os.environ.get("SNAPDECK_LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    if not any(h.get_name() == HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
