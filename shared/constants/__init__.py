from .environments import Environment
from .prometheus import PrometheusMetrics

__all__ = ["Environment", "PrometheusMetrics"]
