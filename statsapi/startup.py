from shared.logging.json import configure_logging
from statsapi.core.config import settings
from statsapi.core.logger import get_logger

logger = get_logger("startup")


def initialize_application():
    """Install JSON logging and record which Prometheus this instance reads."""
    configure_logging(
        service=settings.otel_service_name,
        level=settings.app_log_level,
        environment=settings.app_environment,
        redaction_patterns=settings.app_log_redaction_patterns,
    )
    logger.info(
        "application_initialized",
        extra={
            "prometheus_url": settings.prometheus_base_url,
            "query_timeout_seconds": settings.stats_query_timeout_seconds,
            "otel_service": settings.otel_service_name,
        },
    )
