"""Logging utilities for sugarsync modules."""

import logging
import sys
from typing import Optional

TRANSPORT_LOGGER = 'sugarsync.transport'

# Third-party loggers that only report errors unless verbose output is asked for
_QUIET_LOGGERS = ('aiohttp', 'aiohttp.client', 'aiohttp.internal')

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str) -> logging.Logger:
    """Get a logger that automatically inherits from root logger.

    The logger propagates to the root logger, so it works with
    basicConfig() or configure_logging() without extra setup. A default
    level is only applied when the root logger has no handlers yet.

    Args:
        name: Logger name (typically 'sugarsync.<component>')

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logger.setLevel(logging.WARNING)

    return logger


def configure_logging(verbose: bool = False, stream: Optional[object] = None) -> None:
    """
    Configure logging for a CLI run.

    By default the package logs warnings, and the transport (including
    aiohttp) only logs errors. With verbose=True everything goes to DEBUG.

    Args:
        verbose: Enable debug output for every sugarsync logger
        stream: Stream for the handler (default: stderr)
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format=DEFAULT_FORMAT,
        stream=stream or sys.stderr,
        force=True,
    )

    logging.getLogger('sugarsync').setLevel(level)
    transport_level = logging.DEBUG if verbose else logging.ERROR
    logging.getLogger(TRANSPORT_LOGGER).setLevel(transport_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)


def mask(secret: Optional[str], keep: int = 4) -> str:
    """Shorten a secret (token URL, key) for log output."""
    if not secret:
        return '<none>'
    if len(secret) <= keep:
        return '*' * len(secret)
    return f"...{secret[-keep:]}"
