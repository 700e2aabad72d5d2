"""Shared configuration base classes.

Provides the logging settings every entrypoint needs so the service config
only declares what is specific to it.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings

from shared.constants.environments import Environment


class BaseLoggingConfig(BaseSettings):
    """Common logging configuration."""

    app_log_level: str = "INFO"
    app_log_redaction_patterns: list[str] = [
        "password",
        "token",
        "secret",
        "key",
        "authorization",
        "cookie",
        "session",
    ]
    app_environment: str = "production"

    @field_validator("app_environment")
    @classmethod
    def _known_environment(cls, value: str) -> str:
        if not Environment.is_known(value):
            raise ValueError(f"Unknown environment '{value}'")
        return value.lower()


class BaseServiceConfig(BaseLoggingConfig):
    """Base configuration for a service.

    The otel_service_name should be overridden by each service.
    """

    otel_service_name: str = "unknown"  # Should be overridden by service


__all__ = ["BaseLoggingConfig", "BaseServiceConfig"]
