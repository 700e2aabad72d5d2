from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QueryShape(str, Enum):
    """How a metric is turned into PromQL."""

    COUNTER = "counter"  # counters and gauges: plain sum
    HISTOGRAM = "histogram"  # mean from rolling rate of _sum / _count


class MetricKind(str, Enum):
    """Statistics returned by the API; the value is the JSON key."""

    COMPLETED = "completed"
    FAILED = "failed"
    DURATIONS = "durations"
    CALLS = "calls"
    ERRORS = "errors"
    TIMEDOUT = "timedout"

    @property
    def shape(self) -> QueryShape:
        if self is MetricKind.DURATIONS:
            return QueryShape.HISTOGRAM
        return QueryShape.COUNTER


class ScopeKind(str, Enum):
    GLOBAL = "global"
    APP = "app"
    ROUTE = "route"


class Scope(BaseModel):
    """Aggregation granularity of one statistics request."""

    model_config = ConfigDict(frozen=True)

    app_name: Optional[str] = None
    route_name: Optional[str] = None

    @model_validator(mode="after")
    def _route_needs_app(self) -> "Scope":
        if self.route_name is not None and self.app_name is None:
            raise ValueError("a route scope requires an application name")
        return self

    @property
    def kind(self) -> ScopeKind:
        if self.app_name is None:
            return ScopeKind.GLOBAL
        if self.route_name is None:
            return ScopeKind.APP
        return ScopeKind.ROUTE


class TimeWindow(BaseModel):
    """Resolved range query window."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    step: timedelta

    @model_validator(mode="after")
    def _check_bounds(self) -> "TimeWindow":
        if self.end < self.start:
            raise ValueError("end must not be before start")
        if self.step <= timedelta(0):
            raise ValueError("step must be positive")
        return self


class TimeValueSample(BaseModel):
    time: int = Field(..., description="Unix time in seconds")
    value: float


MetricSeries = Dict[str, List[TimeValueSample]]


class SuccessResponse(BaseModel):
    status: Literal["success"] = "success"
    data: MetricSeries


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    error: str
