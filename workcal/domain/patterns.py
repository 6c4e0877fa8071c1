"""Schedule patterns: the part of a calendar that repeats.

A pattern answers one question: which rule applies to a given calendar day.
Two variants exist. ``WeeklyPattern`` is the classic 7-slot week.
``CyclicPattern`` rotates ``on_days`` working days with ``off_days`` rest
days from an anchor date, independently of the weekday (2/2, 3/1, 15/15 ...).
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting both camelCase and snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def weekday_index(day: date) -> int:
    """0 = Sunday .. 6 = Saturday."""
    return (day.weekday() + 1) % 7


class WorkingHours(CamelModel):
    model_config = ConfigDict(frozen=True)

    start: str
    end: str
    break_start: str | None = None
    break_end: str | None = None


class WorkingDayRule(CamelModel):
    model_config = ConfigDict(frozen=True)

    day_of_week: int = Field(ge=0, le=6)
    is_working: bool
    working_hours: WorkingHours | None = None


def order_weekly_rules(rules: Iterable[WorkingDayRule]) -> tuple[WorkingDayRule, ...]:
    """Sort rules by weekday, requiring exactly one rule per weekday 0..6."""
    ordered = tuple(sorted(rules, key=lambda rule: rule.day_of_week))
    if [rule.day_of_week for rule in ordered] != list(range(7)):
        raise ValueError("a weekly pattern needs exactly one rule per weekday 0-6")
    return ordered


class SchedulePattern(Protocol):
    def rule_for(self, day: date) -> WorkingDayRule | None: ...


class WeeklyPattern:
    """Weekly pattern indexed by weekday."""

    def __init__(self, rules: Iterable[WorkingDayRule]) -> None:
        self._rules: dict[int, WorkingDayRule] = {r.day_of_week: r for r in rules}

    def rule_for(self, day: date) -> WorkingDayRule | None:
        return self._rules.get(weekday_index(day))


class CyclicPattern(CamelModel):
    """Rotating pattern projected from an anchor date.

    The anchor is the first working day of a cycle. Days before the anchor
    keep the same phase.
    """

    model_config = ConfigDict(frozen=True)

    anchor_date: date
    on_days: int = Field(ge=1)
    off_days: int = Field(ge=0)
    working_hours: WorkingHours | None = None

    @property
    def cycle_length(self) -> int:
        return self.on_days + self.off_days

    def is_on(self, day: date) -> bool:
        return (day - self.anchor_date).days % self.cycle_length < self.on_days

    def rule_for(self, day: date) -> WorkingDayRule:
        working = self.is_on(day)
        return WorkingDayRule(
            day_of_week=weekday_index(day),
            is_working=working,
            working_hours=self.working_hours if working else None,
        )

