"""Statistics API for the function server, backed by Prometheus range queries."""

__version__ = "0.3.0"
