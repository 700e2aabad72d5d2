from pydantic_settings import SettingsConfigDict

from shared.config import BaseServiceConfig
from shared.constants import PrometheusMetrics


class Settings(BaseServiceConfig):
    model_config = SettingsConfigDict(env_prefix="FN_EXT_")

    # Prometheus
    stats_prom_scheme: str = "http"
    stats_prom_host: str = "localhost"
    stats_prom_port: int = 9090
    stats_user_agent: str = "fn-ext-statsapi"

    # Query timing
    stats_query_timeout_seconds: float = 2.0
    stats_fanout_overhead_seconds: float = 1.0  # on top of one query timeout

    # Time window defaults
    stats_default_window_seconds: int = 300
    stats_default_step_seconds: int = 30
    stats_rolling_window: str = "1m"  # rate() window for histograms

    # Labels attached by the function server
    stats_app_label: str = PrometheusMetrics.APP_LABEL
    stats_route_label: str = PrometheusMetrics.ROUTE_LABEL

    # HTTP server
    stats_listen_host: str = "0.0.0.0"
    stats_listen_port: int = 8080

    otel_service_name: str = "statsapi"

    @property
    def prometheus_base_url(self) -> str:
        return f"{self.stats_prom_scheme}://{self.stats_prom_host}:{self.stats_prom_port}"


settings = Settings()
