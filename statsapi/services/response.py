"""Wire format of the statistics endpoint.

Success: ``{"status": "success", "data": {"<metric>": [{"time", "value"}]}}``
Error:   ``{"status": "error", "error": "<message>"}``
"""

import json
from typing import Any, Dict, Union

from statsapi.domain.models import ErrorResponse, MetricSeries, SuccessResponse


def success(series: MetricSeries) -> Dict[str, Any]:
    return SuccessResponse(data=series).model_dump()


def failure(error: Union[Exception, str]) -> Dict[str, Any]:
    return ErrorResponse(error=str(error)).model_dump()


def render(payload: Dict[str, Any]) -> str:
    """Serialize strictly; values JSON cannot hold become the error shape."""
    try:
        return json.dumps(payload, allow_nan=False)
    except ValueError as e:
        return json.dumps(failure(f"Unable to encode statistics as JSON: {e}"))
