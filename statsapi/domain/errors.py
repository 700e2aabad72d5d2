"""Errors raised while answering a statistics request.

Each error carries a kind plus the context needed to diagnose it, so callers
match on type or ``kind`` rather than on message text. ``str(error)`` is the
message returned to the client.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_PARAMETER = "invalid_parameter"
    BACKEND_UNREACHABLE = "backend_unreachable"
    BACKEND_ERROR = "backend_error"
    MALFORMED_RESPONSE = "malformed_response"
    AMBIGUOUS_RESULT = "ambiguous_result"


class StatsQueryError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidParameterError(StatsQueryError):
    """A request parameter is malformed or the window is inconsistent."""

    kind = ErrorKind.INVALID_PARAMETER

    def __init__(
        self,
        field: str,
        message: str,
        start: str | None = None,
        end: str | None = None,
    ):
        super().__init__(message)
        self.field = field
        self.start = start
        self.end = end

    @classmethod
    def unparsable(cls, field: str, detail: str) -> "InvalidParameterError":
        return cls(field, f"Unable to parse {field} parameter: {detail}")

    @classmethod
    def end_before_start(cls, end: str, start: str) -> "InvalidParameterError":
        return cls(
            "endtime",
            f"endtime ({end}) is before starttime ({start})",
            start=start,
            end=end,
        )


class BackendUnreachableError(StatsQueryError):
    """Prometheus could not be reached or did not answer in time."""

    kind = ErrorKind.BACKEND_UNREACHABLE

    def __init__(self, url: str, detail: str):
        super().__init__(f"Unable to query Prometheus at {url}: {detail}")
        self.url = url
        self.detail = detail


class BackendQueryError(StatsQueryError):
    """Prometheus answered with status other than success."""

    kind = ErrorKind.BACKEND_ERROR

    def __init__(self, error_type: str, error: str):
        super().__init__(f"Error from Prometheus: {error_type}: {error}")
        self.error_type = error_type
        self.error = error


class MalformedResponseError(StatsQueryError):
    """Prometheus returned something that is not a range query envelope."""

    kind = ErrorKind.MALFORMED_RESPONSE

    def __init__(self, query: str, body: str, detail: str):
        super().__init__(
            f"Unexpected response from Prometheus: {detail}: "
            f"query={query}, returned JSON={body}"
        )
        self.query = query
        self.body = body
        self.detail = detail


class AmbiguousResultError(StatsQueryError):
    """The selector matched more than one series."""

    kind = ErrorKind.AMBIGUOUS_RESULT

    def __init__(self, query: str, body: str):
        super().__init__(
            "data array returned by Prometheus has more than one element: "
            f"query={query}, returned JSON={body}"
        )
        self.query = query
        self.body = body
