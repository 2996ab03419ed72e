"""Logger factory with a consistent format across modules.

Verbosity follows ``settings.env`` (``dev`` → DEBUG, ``prod`` → WARNING)
unless ``settings.log_level`` is set explicitly.

Usage:
    from semantic_rag.utils import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys

from semantic_rag.config import settings

_ENV_LEVEL_MAP = {
    "dev": logging.DEBUG,
    "prod": logging.WARNING,
}


def _default_level() -> int:
    if settings.log_level:
        return logging.getLevelName(settings.log_level.upper())
    return _ENV_LEVEL_MAP.get(settings.env, logging.INFO)


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """Create and return a named logger with a standard formatter.

    Args:
        name: Typically ``__name__`` of the calling module.
        level: Explicit level override. If None, derived from settings.

    Returns:
        A configured ``logging.Logger`` instance.
    """
    resolved_level = level if level is not None else _default_level()
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(resolved_level)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.propagate = False

    return logger
