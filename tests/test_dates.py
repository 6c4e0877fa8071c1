"""Tests for calendar-day normalization."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from dateutil import tz

from workcal.config import configure_workcal
from workcal.domain.errors import CalendarError, InvalidDateError
from workcal.services.dates import (
    day_of_week,
    get_calendar_days_diff,
    is_today,
    iter_calendar_days,
    normalize_backend_end_date,
    to_calendar_day,
    to_local_end_of_day,
    to_local_midnight,
)

MSK = tz.gettz("Europe/Moscow")
NEW_YORK = tz.gettz("America/New_York")
SAO_PAULO = tz.gettz("America/Sao_Paulo")

# 2026-04-05T20:59:59.999Z, i.e. 23:59:59.999 in Moscow
END_OF_APRIL_5_MSK_MS = 1775422799999


# ---------------------------------------------------------------------------
# to_local_midnight
# ---------------------------------------------------------------------------


def test_midnight_of_aware_datetime():
    result = to_local_midnight(datetime(2026, 4, 11, 14, 30, tzinfo=timezone.utc), zone=MSK)
    assert result == datetime(2026, 4, 11, tzinfo=MSK)
    assert (result.hour, result.minute, result.second, result.microsecond) == (0, 0, 0, 0)


def test_midnight_of_iso_string():
    result = to_local_midnight("2026-04-11T14:30:00.000Z", zone=MSK)
    assert result == datetime(2026, 4, 11, tzinfo=MSK)


def test_midnight_of_epoch_milliseconds():
    result = to_local_midnight(END_OF_APRIL_5_MSK_MS, zone=MSK)
    assert result == datetime(2026, 4, 5, tzinfo=MSK)


def test_midnight_of_date():
    assert to_local_midnight(date(2026, 4, 5), zone=MSK) == datetime(2026, 4, 5, tzinfo=MSK)


def test_midnight_is_idempotent():
    once = to_local_midnight("2026-04-11T00:00:00", zone=MSK)
    assert to_local_midnight(once, zone=MSK) == once


def test_naive_datetime_is_local_wall_time():
    result = to_local_midnight(datetime(2026, 4, 5, 23, 59), zone=NEW_YORK)
    assert result.date() == date(2026, 4, 5)
    assert result.tzinfo is NEW_YORK


def test_late_evening_behind_utc_keeps_local_day():
    """23:30 in New York is already the next day in UTC; the local day wins."""
    value = datetime(2026, 3, 7, 23, 30, tzinfo=NEW_YORK)
    assert value.astimezone(timezone.utc).date() == date(2026, 3, 8)
    assert to_local_midnight(value, zone=NEW_YORK).date() == date(2026, 3, 7)


def test_midnight_skipped_by_dst_resolves_forward():
    # Brazil's 2018 DST started at 00:00 on November 4th.
    result = to_local_midnight(date(2018, 11, 4), zone=SAO_PAULO)
    assert result.date() == date(2018, 11, 4)
    assert result.hour == 1


def test_uses_configured_zone_by_default():
    configure_workcal(timezone="Europe/Moscow")
    assert to_local_midnight("2026-04-05T20:59:59.999Z").date() == date(2026, 4, 5)


# ---------------------------------------------------------------------------
# End-of-day boundary
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "value",
    [
        datetime(2026, 4, 5, 23, 59, 59, 999000, tzinfo=MSK),
        datetime(2026, 4, 5, 23, 59, tzinfo=MSK),
        datetime(2026, 4, 5, 23, 58, 59, 999000, tzinfo=MSK),
        datetime(2026, 4, 5, 14, 30, tzinfo=MSK),
        "2026-04-05T23:59:59.999+03:00",
        "2026-04-05T20:59:59.999Z",
        END_OF_APRIL_5_MSK_MS,
    ],
)
def test_end_of_day_stays_on_same_day(value):
    expected = datetime(2026, 4, 5, tzinfo=MSK)
    assert to_local_midnight(value, zone=MSK) == expected
    assert normalize_backend_end_date(value, zone=MSK) == expected


def test_backend_end_date_round_trips_through_end_of_day():
    for offset in range(40):
        day = date(2026, 3, 1) + timedelta(days=offset)
        end = to_local_end_of_day(day, zone=NEW_YORK)
        assert normalize_backend_end_date(end, zone=NEW_YORK).date() == day


def test_end_of_day_components():
    result = to_local_end_of_day("2026-04-05T08:00:00+03:00", zone=MSK)
    assert result.date() == date(2026, 4, 5)
    assert (result.hour, result.minute, result.second, result.microsecond) == (
        23,
        59,
        59,
        999000,
    )


# ---------------------------------------------------------------------------
# Day arithmetic
# ---------------------------------------------------------------------------


def test_days_diff_simple():
    assert get_calendar_days_diff(date(2026, 4, 6), date(2026, 4, 10)) == 4


def test_days_diff_is_antisymmetric():
    a = datetime(2026, 1, 30, 17, 45, tzinfo=MSK)
    b = datetime(2026, 4, 2, 3, 10, tzinfo=MSK)
    assert get_calendar_days_diff(a, b, zone=MSK) == -get_calendar_days_diff(b, a, zone=MSK)


def test_days_diff_ignores_time_of_day():
    start = datetime(2026, 4, 6, tzinfo=MSK)
    end = datetime(2026, 4, 9, tzinfo=MSK)
    base = get_calendar_days_diff(start, end, zone=MSK)
    for hours in (1, 9, 13, 23):
        shifted = get_calendar_days_diff(start + timedelta(hours=hours), end, zone=MSK)
        assert shifted == base
        shifted = get_calendar_days_diff(start, end + timedelta(hours=hours), zone=MSK)
        assert shifted == base


def test_days_diff_across_dst_transition():
    # US clocks spring forward on 2026-03-08.
    start = datetime(2026, 3, 7, 12, tzinfo=NEW_YORK)
    end = datetime(2026, 3, 9, 12, tzinfo=NEW_YORK)
    assert get_calendar_days_diff(start, end, zone=NEW_YORK) == 2
    # ...and fall back on 2026-11-01.
    start = datetime(2026, 10, 31, tzinfo=NEW_YORK)
    end = datetime(2026, 11, 2, tzinfo=NEW_YORK)
    assert get_calendar_days_diff(start, end, zone=NEW_YORK) == 2


def test_same_day_diff_is_zero():
    assert get_calendar_days_diff("2026-04-05T00:00:00", "2026-04-05T23:59:59.999") == 0


def test_iter_calendar_days_is_inclusive():
    days = list(iter_calendar_days(date(2026, 4, 10), date(2026, 4, 13)))
    assert days == [date(2026, 4, 10), date(2026, 4, 11), date(2026, 4, 12), date(2026, 4, 13)]


def test_iter_calendar_days_empty_when_reversed():
    assert list(iter_calendar_days(date(2026, 4, 13), date(2026, 4, 10))) == []


def test_day_of_week_sunday_is_zero():
    assert day_of_week(date(2026, 4, 5)) == 0
    assert day_of_week(date(2026, 4, 6)) == 1
    assert day_of_week(date(2026, 4, 11)) == 6


def test_to_calendar_day_of_aware_string():
    assert to_calendar_day("2026-04-05T21:30:00Z", zone=MSK) == date(2026, 4, 6)


def test_is_today():
    now = datetime(2026, 4, 5, 10, 0, tzinfo=MSK)
    assert is_today(datetime(2026, 4, 5, 23, 59, tzinfo=MSK), now=now, zone=MSK)
    assert is_today(date(2026, 4, 5), now=now, zone=MSK)
    assert not is_today(date(2026, 4, 6), now=now, zone=MSK)


# ---------------------------------------------------------------------------
# Invalid input
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "value",
    ["not a date", "", "   ", "2026-13-45", True, None, float("nan"), float("inf"), [2026, 4, 5]],
)
def test_invalid_input_raises(value):
    with pytest.raises(InvalidDateError):
        to_local_midnight(value, zone=MSK)


def test_invalid_date_error_hierarchy():
    with pytest.raises(ValueError):
        to_calendar_day("garbage")
    with pytest.raises(CalendarError):
        get_calendar_days_diff("garbage", date(2026, 4, 5))


@pytest.mark.parametrize(
    "value",
    [
        "9999-12-31T23:00:00Z",
        datetime(9999, 12, 31, 23, tzinfo=timezone.utc),
    ],
)
def test_out_of_range_instant_raises(value):
    with pytest.raises(InvalidDateError):
        to_local_midnight(value, zone=MSK)


def test_end_of_last_representable_day_raises():
    with pytest.raises(InvalidDateError):
        to_local_end_of_day(date(9999, 12, 31), zone=NEW_YORK)


def test_iter_calendar_days_up_to_date_max():
    days = list(iter_calendar_days(date(9999, 12, 30), date(9999, 12, 31)))
    assert days == [date(9999, 12, 30), date(9999, 12, 31)]
    assert list(iter_calendar_days(date.max, date.max)) == [date.max]
