"""Exceptions raised by the calendar core."""

from __future__ import annotations


class CalendarError(Exception):
    """Base class for all calendar errors."""


class InvalidDateError(CalendarError, ValueError):
    """A value could not be normalized to a calendar day."""

    def __init__(self, value: object, reason: str | None = None) -> None:
        self.value = value
        message = f"Invalid date value: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
