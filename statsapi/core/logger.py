from __future__ import annotations

import logging

from shared.logging.logger import get_logger as _shared_get_logger


def get_logger(name: str) -> logging.Logger:
    """Get preconfigured structured logger"""
    return _shared_get_logger(name)
