from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    PRODUCTION = "production"
    STAGING = "staging"
    TESTING = "testing"
    DEVELOPMENT = "development"

    @classmethod
    def is_known(cls, env: str) -> bool:
        """Check if env names one of the environments above."""
        return env.lower() in {member.value for member in cls}
