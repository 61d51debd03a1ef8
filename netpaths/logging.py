"""Centralized logging for netpaths.

Every module obtains its logger through ``get_logger(__name__)``. All loggers
hang off a single ``netpaths`` root logger which owns the only handler, so
levels can be changed globally with ``set_global_log_level``.

The initial level comes from the ``NETPATHS_LOG_LEVEL`` environment variable
when it names a standard level (``DEBUG``, ``INFO``, ...), otherwise INFO.
"""

import logging
import os
import sys
import time
from contextlib import contextmanager
from typing import Iterator, Optional

ROOT_LOGGER_NAME = "netpaths"
LOG_LEVEL_ENV = "NETPATHS_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_ROOT_LOGGER_CONFIGURED = False


def _level_from_env(default: int) -> int:
    raw = os.environ.get(LOG_LEVEL_ENV)
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


def setup_root_logger(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach the package handler to the ``netpaths`` logger once.

    Subsequent calls are no-ops until ``reset_logging`` is called.

    Args:
        level: Logging level. Defaults to ``NETPATHS_LOG_LEVEL`` or INFO.
        format_string: Custom format string (optional).
        handler: Custom handler (optional, defaults to a stdout StreamHandler).
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level if level is not None else _level_from_env(logging.INFO))
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    # Propagate so pytest's caplog sees records.
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a child logger of the ``netpaths`` root logger.

    Args:
        name: Logger name, usually ``__name__`` of the calling module.

    Returns:
        Logger that inherits level and handler from the package root.
    """
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the package root logger and its handlers."""
    setup_root_logger()
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def enable_debug_logging() -> None:
    """Switch all netpaths loggers to DEBUG."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Switch all netpaths loggers back to INFO."""
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the package handler and forget prior setup (used by tests)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


@contextmanager
def log_duration(logger: logging.Logger, operation: str) -> Iterator[None]:
    """Log how long the enclosed block took, at DEBUG level.

    Args:
        logger: Logger to write to.
        operation: Short description used in the message.
    """
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.debug("%s finished in %.3f ms", operation, elapsed_ms)


setup_root_logger()
