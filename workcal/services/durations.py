"""Calendar-aware duration and finish-date arithmetic."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from workcal.config import get_config
from workcal.domain.errors import CalendarError
from workcal.domain.models import Duration, DurationUnit, WorkCalendar
from workcal.services.catalog import CalendarCatalog
from workcal.services.dates import (
    DateInput,
    iter_calendar_days,
    to_calendar_day,
    to_local_midnight,
)

WEEKS_PER_MONTH = 4.33


def hours_per_unit(unit: DurationUnit, calendar: WorkCalendar) -> float:
    """Working hours one *unit* stands for under *calendar*."""
    if unit == DurationUnit.HOURS:
        return 1.0
    if unit == DurationUnit.DAYS:
        return float(calendar.hours_per_day)
    week = calendar.hours_per_day * calendar.working_days_per_week
    if unit == DurationUnit.WEEKS:
        return float(week)
    return week * WEEKS_PER_MONTH


def calculate_duration_with_calendar(
    catalog: CalendarCatalog,
    start: DateInput,
    end: DateInput,
    calendar: WorkCalendar,
    unit: DurationUnit = DurationUnit.DAYS,
) -> Duration:
    """Working time between *start* and *end* (calendar days, inclusive)."""
    total_hours = sum(
        (catalog.get_working_hours(calendar, day) for day in iter_calendar_days(start, end)),
        0.0,
    )
    per_unit = hours_per_unit(unit, calendar)
    value = total_hours / per_unit if per_unit else 0.0
    return Duration(value=value, unit=unit)


def calculate_finish_date_with_calendar(
    catalog: CalendarCatalog,
    start: DateInput,
    duration: Duration,
    calendar: WorkCalendar,
) -> datetime:
    """Local midnight of the day on which *duration* of work is completed.

    Walks forward from the calendar day of *start*, consuming each day's
    working hours. A non-positive duration finishes on the start day.

    Raises:
        CalendarError: the calendar offers no working time within
            ``max_scan_days`` of the start, or before ``date.max``.
    """
    current = to_calendar_day(start)
    remaining = duration.value * hours_per_unit(duration.unit, calendar)
    limit = get_config().max_scan_days

    for _ in range(limit):
        remaining -= catalog.get_working_hours(calendar, current)
        if remaining <= 0:
            return to_local_midnight(current)
        if current == date.max:
            break
        current += timedelta(days=1)

    raise CalendarError(
        f"Calendar {calendar.id!r} has no room for {duration.value:g} "
        f"{duration.unit} within {limit} days of {to_calendar_day(start)}"
    )
