"""Process-wide logging setup."""

from __future__ import annotations

import logging

_ROOT_NAME = "takeoff"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a single stream handler to the ``takeoff`` logger and return it.

    Safe to call repeatedly; the handler is only installed once. When
    ``level`` is omitted the configured ``log_level`` setting is used.
    """

    logger = logging.getLogger(_ROOT_NAME)
    if level is None:
        from ..config import get_settings

        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if not any(getattr(handler, "_takeoff", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._takeoff = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


__all__ = ["configure_logging"]
