"""Shared utilities and components for the statistics service."""

from .config import BaseLoggingConfig, BaseServiceConfig
from .constants import Environment, PrometheusMetrics

__all__ = [
    "Environment",
    "PrometheusMetrics",
    "BaseServiceConfig",
    "BaseLoggingConfig",
]
