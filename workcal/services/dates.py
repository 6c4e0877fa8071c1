"""Calendar-day normalization.

Every value handed to the calendar core passes through here first. A
"calendar day" is the year/month/day of a value as seen in the local zone
(the configured zone, else the zone of the running process), never the
UTC date of the instant.

Accepted inputs are aware or naive ``datetime`` objects (naive means local
wall time), ``date`` objects, ISO-8601 strings and epoch milliseconds.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterator, Union

from dateutil import parser as date_parser
from dateutil import tz

from workcal.config import get_local_zone
from workcal.domain.errors import InvalidDateError
from workcal.domain.patterns import weekday_index
from workcal.logging import get_logger

logger = get_logger(__name__)

DateInput = Union[datetime, date, str, int, float]


def _zone(zone: tzinfo | None) -> tzinfo:
    return zone if zone is not None else get_local_zone()


def to_local_datetime(value: DateInput, zone: tzinfo | None = None) -> datetime:
    """Return *value* as an aware datetime in the local zone."""
    zone = _zone(zone)

    if isinstance(value, bool):
        raise InvalidDateError(value, "booleans are not dates")

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=zone)
        try:
            return value.astimezone(zone)
        except OverflowError as exc:
            raise InvalidDateError(value, "outside the supported date range") from exc

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=zone)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidDateError(value, "empty string")
        try:
            parsed = date_parser.isoparse(text)
        except (ValueError, OverflowError) as exc:
            raise InvalidDateError(value, str(exc)) from exc
        return to_local_datetime(parsed, zone)

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidDateError(value, "not a finite timestamp")
        try:
            return datetime.fromtimestamp(value / 1000, tz=zone)
        except (ValueError, OverflowError, OSError) as exc:
            raise InvalidDateError(value, str(exc)) from exc

    raise InvalidDateError(value, f"unsupported type {type(value).__name__}")


def to_calendar_day(value: DateInput, zone: tzinfo | None = None) -> date:
    """Return the local calendar day of *value*."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return to_local_datetime(value, zone).date()


def _at(day: date, zone: tzinfo, *clock: int) -> datetime:
    try:
        return tz.resolve_imaginary(
            datetime(day.year, day.month, day.day, *clock, tzinfo=zone)
        )
    except OverflowError as exc:
        raise InvalidDateError(day, "outside the supported date range") from exc


def to_local_midnight(value: DateInput, zone: tzinfo | None = None) -> datetime:
    """Return 00:00:00.000 local time on the calendar day of *value*.

    Built from the local year/month/day components, so 23:59:59.999 on day D
    stays on day D.
    """
    zone = _zone(zone)
    return _at(to_calendar_day(value, zone), zone)


def to_local_end_of_day(value: DateInput, zone: tzinfo | None = None) -> datetime:
    """Return 23:59:59.999 local time on the calendar day of *value*."""
    zone = _zone(zone)
    return _at(to_calendar_day(value, zone), zone, 23, 59, 59, 999000)


def normalize_backend_end_date(value: DateInput, zone: tzinfo | None = None) -> datetime:
    """Map a scheduling-backend end instant to midnight of the same day.

    The backend stores a task's end as the end of its last working day
    (``...T23:59:59.999``). That instant still belongs to the last day, so
    it normalizes to that day's midnight and never rolls over to the next.
    """
    zone = _zone(zone)
    local = to_local_datetime(value, zone)
    normalized = _at(local.date(), zone)
    if local.hour == 23 and local.minute == 59:
        logger.debug(
            "backend_end_of_day_normalized",
            source=local.isoformat(),
            normalized=normalized.isoformat(),
        )
    return normalized


def get_calendar_days_diff(
    start: DateInput, end: DateInput, zone: tzinfo | None = None
) -> int:
    """Whole calendar days from *start* to *end* (negative if end is earlier).

    Only the normalized calendar days take part, so neither the time of day
    nor a DST transition inside the range changes the result.
    """
    zone = _zone(zone)
    return (to_calendar_day(end, zone) - to_calendar_day(start, zone)).days


def is_today(
    value: DateInput, now: datetime | None = None, zone: tzinfo | None = None
) -> bool:
    zone = _zone(zone)
    current = now if now is not None else datetime.now(zone)
    return to_calendar_day(value, zone) == to_calendar_day(current, zone)


def day_of_week(value: DateInput, zone: tzinfo | None = None) -> int:
    """Weekday of the calendar day of *value*, 0 = Sunday .. 6 = Saturday."""
    return weekday_index(to_calendar_day(value, zone))


def iter_calendar_days(
    start: DateInput, end: DateInput, zone: tzinfo | None = None
) -> Iterator[date]:
    """Yield every calendar day from *start* to *end*, both inclusive."""
    zone = _zone(zone)
    current = to_calendar_day(start, zone)
    last = to_calendar_day(end, zone)
    if current > last:
        return
    while True:
        yield current
        if current == last:
            break
        current += timedelta(days=1)
