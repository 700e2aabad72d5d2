"""HTTP surface of the statistics API."""

from unittest.mock import patch

import pytest
import requests
from fastapi.testclient import TestClient
from statsapi.api.dependencies import get_prometheus_client
from statsapi.domain.models import MetricKind
from statsapi.infrastructure.prometheus.client import PrometheusClient
from statsapi.main import app

GET = "statsapi.infrastructure.prometheus.client.requests.get"
METRIC_KEYS = {m.value for m in MetricKind}


@pytest.fixture
def override_client():
    def _install(client):
        app.dependency_overrides[get_prometheus_client] = lambda: client
        return client

    yield _install
    app.dependency_overrides.clear()


@pytest.fixture
def api():
    return TestClient(app)


class TestStatisticsEndpoints:
    def test_global_statistics_drop_nan(
        self, api, override_client, matrix_body, http_response
    ):
        override_client(PrometheusClient("http://prometheus.test:9090"))
        body = matrix_body(["1", "NaN", "2", "NaN", "3"])

        with patch(GET, return_value=http_response(body)) as mock_get:
            resp = api.get(
                "/v1/stats",
                params={
                    "starttime": "2017-07-25T11:55:00Z",
                    "endtime": "2017-07-25T12:00:00Z",
                    "step": "15s",
                },
            )

        assert resp.status_code == 200
        payload = resp.json()
        assert payload["status"] == "success"
        assert set(payload["data"]) == METRIC_KEYS
        for samples in payload["data"].values():
            assert [s["value"] for s in samples] == [1.0, 2.0, 3.0]
        assert mock_get.call_count == len(MetricKind)
        assert mock_get.call_args.kwargs["params"]["step"] == "15"

    def test_unparsable_step(self, api, override_client, stub_client_factory):
        client = override_client(stub_client_factory([]))

        resp = api.get("/v1/stats", params={"step": "Wombat"})

        assert resp.status_code == 200
        assert resp.json() == {
            "status": "error",
            "error": 'Unable to parse step parameter: invalid duration "Wombat"',
        }
        assert client.queries == []

    def test_oversized_step(self, api, override_client, stub_client_factory):
        client = override_client(stub_client_factory([]))

        resp = api.get("/v1/stats", params={"step": "99999999999999999h"})

        assert resp.status_code == 200
        assert resp.json() == {
            "status": "error",
            "error": (
                "Unable to parse step parameter: "
                'invalid duration "99999999999999999h"'
            ),
        }
        assert client.queries == []

    def test_endtime_at_earliest_instant(
        self, api, override_client, matrix_body, http_response
    ):
        override_client(PrometheusClient("http://prometheus.test:9090"))

        with patch(GET, return_value=http_response(matrix_body())) as mock_get:
            resp = api.get("/v1/stats", params={"endtime": "0001-01-01T00:00:00Z"})

        assert resp.status_code == 200
        assert resp.json()["status"] == "success"
        params = mock_get.call_args.kwargs["params"]
        assert params["start"] == "0001-01-01T00:00:00Z"
        assert params["end"] == "0001-01-01T00:00:00Z"

    def test_unparsable_starttime(self, api, override_client, stub_client_factory):
        override_client(stub_client_factory([]))

        resp = api.get("/v1/apps/myapp/stats", params={"starttime": "yesterday"})

        error = resp.json()["error"]
        assert error.startswith("Unable to parse starttime parameter: ")

    def test_route_never_invoked(
        self, api, override_client, matrix_body, http_response
    ):
        override_client(PrometheusClient("http://prometheus.test:9090"))

        with patch(GET, return_value=http_response(matrix_body())) as mock_get:
            resp = api.get("/v1/apps/myapp/routes/never-called/stats")

        assert resp.json() == {
            "status": "success",
            "data": {key: [] for key in METRIC_KEYS},
        }
        queries = [c.kwargs["params"]["query"] for c in mock_get.call_args_list]
        assert all('fn_path="/never-called"' in q for q in queries)

    def test_nested_route_path(self, api, override_client, stub_client_factory):
        client = override_client(stub_client_factory([]))

        api.get("/v1/apps/myapp/routes/v2/hello/stats")

        assert all('fn_path="/v2/hello"' in q for q in client.queries)

    @pytest.mark.parametrize(
        "path",
        [
            "/v1/statistics",
            "/v1/apps/myapp/statistics",
            "/v1/apps/myapp/routes/hello/statistics",
        ],
    )
    def test_statistics_alias(self, api, override_client, stub_client_factory, path):
        override_client(stub_client_factory([]))

        resp = api.get(path)

        assert resp.status_code == 200
        assert resp.json()["status"] == "success"

    def test_backend_down_is_error_body(self, api, override_client):
        override_client(PrometheusClient("http://prometheus.test:9090"))

        with patch(GET, side_effect=requests.ConnectionError("refused")):
            resp = api.get("/v1/apps/myapp/stats")

        assert resp.status_code == 200
        payload = resp.json()
        assert payload["status"] == "error"
        assert "Unable to query Prometheus at http://prometheus.test:9090" in (
            payload["error"]
        )
        assert "data" not in payload


class TestHealthEndpoints:
    def test_healthz(self, api):
        assert api.get("/v1/healthz").json() == {"status": "ok"}

    def test_ready(self, api, override_client, stub_client_factory):
        override_client(stub_client_factory(ready=True))

        resp = api.get("/v1/readyz")

        assert resp.status_code == 200
        assert resp.json()["status"] == "ready"

    def test_not_ready(self, api, override_client, stub_client_factory):
        override_client(stub_client_factory(ready=False))

        assert api.get("/v1/readyz").status_code == 503

    def test_metrics_exposition(self, api):
        resp = api.get("/metrics")

        assert resp.status_code == 200
        assert "stats_requests_total" in resp.text
