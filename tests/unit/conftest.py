from datetime import timedelta

import pytest
from statsapi.domain.models import TimeWindow


@pytest.fixture
def window(fixed_now) -> TimeWindow:
    return TimeWindow(
        start=fixed_now - timedelta(minutes=5),
        end=fixed_now,
        step=timedelta(seconds=30),
    )


class StubPrometheusClient:
    """Answers every range query from a callable or a fixed sample list."""

    base_url = "http://prometheus.test:9090"
    query_range_url = base_url + "/api/v1/query_range"

    def __init__(self, answer=None, ready=True):
        self.answer = answer if answer is not None else []
        self.is_ready = ready
        self.queries = []

    def query_range(self, query, window):
        self.queries.append(query)
        if callable(self.answer):
            return self.answer(query, window)
        return list(self.answer)

    def ready(self):
        return self.is_ready


@pytest.fixture
def stub_client_factory():
    return StubPrometheusClient
