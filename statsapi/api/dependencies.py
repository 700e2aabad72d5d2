from datetime import timedelta
from functools import lru_cache

from fastapi import Depends
from statsapi.core.config import settings
from statsapi.infrastructure.prometheus.client import PrometheusClient
from statsapi.metrics.query_builder import QueryBuilder
from statsapi.services.stats_service import StatsAggregator, StatsService


@lru_cache
def get_prometheus_client() -> PrometheusClient:
    """Cached PrometheusClient singleton."""
    return PrometheusClient(
        settings.prometheus_base_url,
        timeout=settings.stats_query_timeout_seconds,
        user_agent=settings.stats_user_agent,
    )


@lru_cache
def get_query_builder() -> QueryBuilder:
    return QueryBuilder(
        app_label=settings.stats_app_label,
        route_label=settings.stats_route_label,
        rolling_window=settings.stats_rolling_window,
    )


def get_stats_service(
    client: PrometheusClient = Depends(get_prometheus_client),
    query_builder: QueryBuilder = Depends(get_query_builder),
) -> StatsService:
    aggregator = StatsAggregator(
        query_builder,
        client,
        timeout=settings.stats_query_timeout_seconds
        + settings.stats_fanout_overhead_seconds,
    )
    return StatsService(
        aggregator,
        default_window=timedelta(seconds=settings.stats_default_window_seconds),
        default_step=timedelta(seconds=settings.stats_default_step_seconds),
    )
