from __future__ import annotations

import logging
import os


def _default_level() -> int:
    level = logging.getLevelName(os.getenv("BRIGHTCARDS_LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """Create or reuse a module-level logger with a simple stream handler."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(fmt="%(asctime)s %(levelname)s %(name)s: %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level if level is not None else _default_level())
    return logger


__all__ = ["get_logger"]
