from __future__ import annotations

import logging
from typing import Optional

from trackgen.config import settings


PACKAGE_LOGGER = "trackgen"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _package_logger() -> logging.Logger:
    root = logging.getLogger(PACKAGE_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(getattr(logging, settings.log_level, logging.INFO))
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger nested under ``trackgen``; only the package logger has a handler."""
    root = _package_logger()
    if not name or name == PACKAGE_LOGGER:
        return root
    if not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
