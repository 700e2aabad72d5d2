from typing import Dict, List

import requests
from pydantic import ValidationError

from shared.constants import PrometheusMetrics
from statsapi.core.logger import get_logger
from statsapi.domain.errors import BackendUnreachableError, MalformedResponseError
from statsapi.domain.models import TimeValueSample, TimeWindow
from statsapi.infrastructure.prometheus.envelope import (
    QueryRangeResponse,
    extract_samples,
)
from statsapi.metrics.time_window import format_step, format_timestamp

logger = get_logger("prometheus.client")


class PrometheusClient:
    """Blocking range-query client; one GET per call, no retries."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 2.0,
        user_agent: str = "fn-ext-statsapi",
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}

    @property
    def query_range_url(self) -> str:
        return f"{self.base_url}{PrometheusMetrics.QUERY_RANGE_PATH}"

    @staticmethod
    def range_query_params(query: str, window: TimeWindow) -> Dict[str, str]:
        return {
            "query": query,
            "start": format_timestamp(window.start),
            "end": format_timestamp(window.end),
            "step": format_step(window.step),
        }

    def query_range(self, query: str, window: TimeWindow) -> List[TimeValueSample]:
        url = self.query_range_url
        params = self.range_query_params(query, window)
        try:
            resp = requests.get(
                url, params=params, headers=self._headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise BackendUnreachableError(url, str(e)) from e

        body = resp.text
        logger.debug(
            "prometheus_query_range",
            extra={"http_status": resp.status_code, **params},
        )
        try:
            envelope = QueryRangeResponse.model_validate_json(body)
        except ValidationError as e:
            first = e.errors()[0]
            detail = f"HTTP {resp.status_code}, {first['msg']}"
            raise MalformedResponseError(query, body, detail) from e
        return extract_samples(envelope, query, body)

    def ready(self) -> bool:
        try:
            resp = requests.get(
                f"{self.base_url}{PrometheusMetrics.READY_PATH}",
                headers=self._headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(
                "prometheus_not_reachable",
                extra={"base_url": self.base_url, "error": str(e)},
            )
            return False
        return resp.status_code == 200
