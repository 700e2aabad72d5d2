"""Models for the JSON returned by ``/api/v1/query_range``.

    {"status": "success",
     "data": {"resultType": "matrix",
              "result": [{"metric": {...}, "values": [[1500000000.1, "1"], ...]}]}}

On failure ``status`` is ``"error"`` and ``errorType``/``error`` describe it.
"""

import math
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from statsapi.domain.errors import (
    AmbiguousResultError,
    BackendQueryError,
    MalformedResponseError,
)
from statsapi.domain.models import TimeValueSample

STATUS_SUCCESS = "success"
RESULT_TYPE_MATRIX = "matrix"


class MatrixResult(BaseModel):
    metric: Dict[str, str] = Field(default_factory=dict)
    values: List[Tuple[float, str]] = Field(default_factory=list)


class QueryRangeData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    result_type: str = Field(RESULT_TYPE_MATRIX, alias="resultType")
    result: List[MatrixResult] = Field(default_factory=list)


class QueryRangeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    data: Optional[QueryRangeData] = None
    error_type: str = Field("", alias="errorType")
    error: str = ""


def extract_samples(
    envelope: QueryRangeResponse, query: str, body: str
) -> List[TimeValueSample]:
    """Flatten the single series of a range query into time/value samples.

    No series means the metric has no samples in the window. Samples whose
    value is NaN are dropped, the rest keep the order Prometheus sent.
    """
    if envelope.status != STATUS_SUCCESS:
        raise BackendQueryError(envelope.error_type, envelope.error)
    if envelope.data is None:
        raise MalformedResponseError(query, body, "missing data")
    if envelope.data.result_type != RESULT_TYPE_MATRIX:
        raise MalformedResponseError(
            query, body, f"expected a matrix, got {envelope.data.result_type}"
        )

    result = envelope.data.result
    if len(result) > 1:
        raise AmbiguousResultError(query, body)
    if not result:
        return []

    samples: List[TimeValueSample] = []
    for timestamp, raw_value in result[0].values:
        try:
            value = float(raw_value)
        except ValueError as e:
            raise MalformedResponseError(
                query, body, f"Error converting {raw_value} to a float"
            ) from e
        if math.isnan(value):
            continue
        samples.append(TimeValueSample(time=int(timestamp), value=value))
    return samples
