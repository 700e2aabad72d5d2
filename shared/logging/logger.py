"""Shared logger utility.

Provides a get_logger function that falls back to a plain text configuration
when the JSON formatter has not been installed yet (scripts, tests).
"""

from __future__ import annotations

import logging

_configured = False


def get_logger(name: str, auto_configure: bool = True) -> logging.Logger:
    """Get a preconfigured structured logger.

    Args:
        name: Logger name (usually module name)
        auto_configure: Whether to install the fallback configuration when
            nothing configured logging yet

    Returns:
        Configured logger instance
    """
    global _configured

    if auto_configure and not _configured:
        _configure_minimal_logging()
        _configured = True

    logger = logging.getLogger(name)
    logger.propagate = True
    return logger


def _configure_minimal_logging():
    """Minimal logging configuration as fallback."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def is_configured() -> bool:
    """Check if logging has been configured."""
    return _configured


def mark_configured():
    """Mark logging as configured (called by shared.logging.json.configure_logging)."""
    global _configured
    _configured = True
