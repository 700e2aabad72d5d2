"""Start/end/step resolution for range queries.

Timestamps are RFC 3339 with optional fractional seconds and a mandatory
offset (``2017-07-25T10:15:30.123Z``, ``2017-07-25T11:15:30+01:00``).
Durations use unit suffixes and may be compound (``500ms``, ``30s``,
``1m30s``, ``1.5h``).
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from statsapi.domain.errors import InvalidParameterError
from statsapi.domain.models import TimeWindow

DEFAULT_WINDOW = timedelta(minutes=5)
DEFAULT_STEP = timedelta(seconds=30)
_MIN_STEP = timedelta(milliseconds=1)  # steps are sent with ms resolution

_TIMESTAMP_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})T(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})$"
)

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_timestamp(raw: str) -> datetime:
    match = _TIMESTAMP_RE.match(raw)
    if not match:
        raise ValueError(
            f'"{raw}" is not an RFC 3339 timestamp '
            "(expected e.g. 2017-07-25T10:15:30.123Z)"
        )
    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    offset = match.group("offset")
    if offset == "Z":
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    parsed = datetime.strptime(
        f"{match.group('date')}T{match.group('time')}", "%Y-%m-%dT%H:%M:%S"
    )
    return parsed.replace(microsecond=int(fraction), tzinfo=tz)


def parse_duration(raw: str) -> timedelta:
    """Parse a unit-suffixed duration of at least one millisecond."""
    if not raw:
        raise ValueError('invalid duration ""')
    pos = 0
    total = 0.0
    while pos < len(raw):
        match = _DURATION_PART_RE.match(raw, pos)
        if not match:
            raise ValueError(f'invalid duration "{raw}"')
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    try:
        duration = timedelta(seconds=total)
    except OverflowError as e:
        raise ValueError(f'invalid duration "{raw}"') from e
    if duration < _MIN_STEP:
        raise ValueError(f'duration "{raw}" is shorter than 1ms')
    return duration


def format_timestamp(value: datetime) -> str:
    """Millisecond precision, trailing zeros trimmed, Z for UTC."""
    # strftime does not zero-pad years before 1000 on every platform
    text = value.replace(microsecond=0, tzinfo=None).isoformat()
    millis = value.microsecond // 1000
    if millis:
        text += f".{millis:03d}".rstrip("0")
    offset = value.utcoffset()
    if not offset:
        return text + "Z"
    sign = "-" if offset < timedelta(0) else "+"
    minutes = int(abs(offset).total_seconds()) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def format_step(step: timedelta) -> str:
    """Step as seconds, the form Prometheus accepts for every version."""
    return f"{step.total_seconds():.3f}".rstrip("0").rstrip(".")


def _window_start(end: datetime, window: timedelta) -> datetime:
    """``end - window``, clamped to the earliest representable instant."""
    try:
        return end - window
    except OverflowError:
        return datetime.min.replace(tzinfo=end.tzinfo)


def resolve_time_window(
    raw_start: Optional[str] = None,
    raw_end: Optional[str] = None,
    raw_step: Optional[str] = None,
    now: Optional[Callable[[], datetime]] = None,
    default_window: timedelta = DEFAULT_WINDOW,
    default_step: timedelta = DEFAULT_STEP,
) -> TimeWindow:
    """Parse the request parameters, then fill in whatever is missing.

    Every supplied parameter is parsed before any default is applied so a
    malformed value is reported against its own field. A parameter that is
    present but empty counts as supplied.
    """
    clock = now or (lambda: datetime.now(timezone.utc))

    start = end = step = None
    if raw_start is not None:
        try:
            start = parse_timestamp(raw_start)
        except ValueError as e:
            raise InvalidParameterError.unparsable("starttime", str(e)) from e
    if raw_end is not None:
        try:
            end = parse_timestamp(raw_end)
        except ValueError as e:
            raise InvalidParameterError.unparsable("endtime", str(e)) from e
    if raw_step is not None:
        try:
            step = parse_duration(raw_step)
        except ValueError as e:
            raise InvalidParameterError.unparsable("step", str(e)) from e

    if start is None and end is None:
        end = clock()
        start = _window_start(end, default_window)
    elif start is None:
        start = _window_start(end, default_window)
    elif end is None:
        end = clock()

    if end < start:
        raise InvalidParameterError.end_before_start(
            format_timestamp(end), format_timestamp(start)
        )

    return TimeWindow(start=start, end=end, step=step or default_step)
