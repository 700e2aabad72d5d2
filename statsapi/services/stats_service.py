import asyncio
import time
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence

from shared.metrics import get_counter, get_histogram
from statsapi.core.logger import get_logger
from statsapi.domain.errors import (
    BackendUnreachableError,
    InvalidParameterError,
    StatsQueryError,
)
from statsapi.domain.models import (
    MetricKind,
    MetricSeries,
    Scope,
    TimeValueSample,
    TimeWindow,
)
from statsapi.infrastructure.prometheus.client import PrometheusClient
from statsapi.metrics.query_builder import QueryBuilder
from statsapi.metrics.scope import resolve_scope
from statsapi.metrics.time_window import (
    DEFAULT_STEP,
    DEFAULT_WINDOW,
    resolve_time_window,
)
from statsapi.services import response
from statsapi.utils.concurrency import run_blocking

STATS_REQUESTS = get_counter(
    "requests_total",
    "Statistics requests by scope and outcome",
    service="stats",
    labelnames=["scope", "outcome"],
)
BACKEND_QUERY_LATENCY = get_histogram(
    "backend_query_duration_seconds",
    "Prometheus range query latency in seconds",
    service="stats",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
    labelnames=["metric"],
)
BACKEND_QUERY_ERRORS = get_counter(
    "backend_query_errors_total",
    "Failed Prometheus range queries",
    service="stats",
    labelnames=["kind"],
)

logger = get_logger("stats.service")


class StatsAggregator:
    """Runs one range query per metric and merges the results.

    Queries run concurrently. The aggregation is all-or-nothing: the first
    failing query cancels the others and its error is raised.
    """

    def __init__(
        self,
        query_builder: QueryBuilder,
        client: PrometheusClient,
        timeout: float,
        metrics: Sequence[MetricKind] = tuple(MetricKind),
    ):
        self.query_builder = query_builder
        self.client = client
        self.timeout = timeout
        self.metrics = tuple(metrics)

    async def _query_metric(
        self, metric: MetricKind, scope: Scope, window: TimeWindow
    ) -> List[TimeValueSample]:
        query = self.query_builder.build(metric, scope)
        start = time.perf_counter()
        try:
            return await run_blocking(self.client.query_range, query, window)
        except StatsQueryError as e:
            BACKEND_QUERY_ERRORS.labels(kind=e.kind.value).inc()
            logger.warning(
                "stats_query_failed",
                extra={"metric": metric.value, "query": query, "kind": e.kind.value},
            )
            raise
        finally:
            BACKEND_QUERY_LATENCY.labels(metric=metric.value).observe(
                time.perf_counter() - start
            )

    async def aggregate(self, scope: Scope, window: TimeWindow) -> MetricSeries:
        tasks = {
            metric: asyncio.create_task(self._query_metric(metric, scope, window))
            for metric in self.metrics
        }
        try:
            done, pending = await asyncio.wait(
                tasks.values(),
                timeout=self.timeout,
                return_when=asyncio.FIRST_EXCEPTION,
            )
        finally:
            for task in tasks.values():
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks.values(), return_exceptions=True)

        failures = [
            tasks[m].exception()
            for m in self.metrics
            if tasks[m] in done and tasks[m].exception() is not None
        ]
        if failures:
            raise failures[0]
        if pending:
            raise BackendUnreachableError(
                self.client.query_range_url,
                f"no answer for {len(pending)} queries within {self.timeout}s",
            )
        return {metric.value: tasks[metric].result() for metric in self.metrics}


class StatsService:
    """Entry point of a statistics request; always yields a response payload."""

    def __init__(
        self,
        aggregator: StatsAggregator,
        default_window: timedelta = DEFAULT_WINDOW,
        default_step: timedelta = DEFAULT_STEP,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.aggregator = aggregator
        self.default_window = default_window
        self.default_step = default_step
        self.clock = clock

    async def get_statistics(
        self,
        starttime: Optional[str] = None,
        endtime: Optional[str] = None,
        step: Optional[str] = None,
        app_name: Optional[str] = None,
        route_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        scope = resolve_scope(app_name, route_name)
        started = time.perf_counter()
        try:
            window = resolve_time_window(
                starttime,
                endtime,
                step,
                now=self.clock,
                default_window=self.default_window,
                default_step=self.default_step,
            )
            series = await self.aggregator.aggregate(scope, window)
        except InvalidParameterError as e:
            STATS_REQUESTS.labels(scope=scope.kind.value, outcome="invalid").inc()
            logger.warning(
                "stats_request_rejected",
                extra={"field": e.field, "error": str(e)},
            )
            return response.failure(e)
        except StatsQueryError as e:
            STATS_REQUESTS.labels(scope=scope.kind.value, outcome="error").inc()
            logger.error(
                "stats_request_failed",
                extra={
                    "kind": e.kind.value,
                    "error": str(e),
                    "app_name": scope.app_name,
                    "route_name": scope.route_name,
                },
            )
            return response.failure(e)

        STATS_REQUESTS.labels(scope=scope.kind.value, outcome="success").inc()
        logger.info(
            "stats_request_completed",
            extra={
                "scope": scope.kind.value,
                "app_name": scope.app_name,
                "route_name": scope.route_name,
                "samples": sum(len(v) for v in series.values()),
                "duration_seconds": round(time.perf_counter() - started, 4),
            },
        )
        return response.success(series)
