import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

FIXED_NOW = datetime(2017, 7, 25, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    """The instant every test clock reports."""
    return FIXED_NOW


@pytest.fixture
def clock(fixed_now):
    return lambda: fixed_now


@pytest.fixture
def matrix_body():
    """Build a query_range JSON body.

    ``series`` is a list of value lists; each value list becomes one result
    series with samples 15 seconds apart.
    """

    def _build(*series, status="success", start=1500983700.0):
        result = [
            {
                "metric": {},
                "values": [[start + 15 * i, v] for i, v in enumerate(values)],
            }
            for values in series
        ]
        return json.dumps(
            {"status": status, "data": {"resultType": "matrix", "result": result}}
        )

    return _build


@pytest.fixture
def http_response():
    """Stand-in for requests.Response with the attributes the client reads."""

    def _build(body: str, status_code: int = 200):
        resp = MagicMock()
        resp.text = body
        resp.status_code = status_code
        return resp

    return _build
