"""Domain models for work calendars, consumed tasks/resources and conflicts."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from workcal.domain.patterns import (
    CamelModel,
    CyclicPattern,
    SchedulePattern,
    WeeklyPattern,
    WorkingDayRule,
    WorkingHours,
    order_weekly_rules,
)
from workcal.services.dates import to_calendar_day

try:
    from enum import StrEnum
except ImportError:  # pragma: no cover - fallback for older Python runtimes

    class StrEnum(str, Enum):
        pass


class CalendarTemplateType(StrEnum):
    STANDARD = "standard"
    TWENTY_FOUR_SEVEN = "24_7"
    NIGHT_SHIFT = "night_shift"
    TWO_TWO = "2_2"
    THREE_ONE = "3_1"
    FOUR_THREE = "4_3"
    SHIFT_FIFTEEN = "shift_15_15"
    SHIFT_THIRTY = "shift_30_30"
    SIX_DAYS = "6_1"
    CUSTOM = "custom"


class ExceptionType(StrEnum):
    WORKING = "working"
    NON_WORKING = "non-working"


class ResourceType(StrEnum):
    WORK = "work"
    MATERIAL = "material"
    COST = "cost"


class DurationUnit(StrEnum):
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Calendar definition
# ---------------------------------------------------------------------------


class CalendarException(CamelModel):
    """A single calendar day overriding the repeating pattern."""

    model_config = ConfigDict(frozen=True)

    day: date = Field(alias="date")
    type: ExceptionType
    start_time: str | None = None
    end_time: str | None = None

    @field_validator("day", mode="before")
    @classmethod
    def _to_calendar_day(cls, value: Any) -> date:
        return to_calendar_day(value)


class CalendarTemplate(CamelModel):
    model_config = ConfigDict(frozen=True)

    type: CalendarTemplateType
    name: str
    description: str
    short_description: str
    hours_per_day: float
    working_days_per_week: float
    working_days: tuple[WorkingDayRule, ...]
    default_work_time: WorkingHours
    # Rotating archetypes only.
    on_days: int | None = None
    off_days: int | None = None

    @field_validator("working_days")
    @classmethod
    def _one_rule_per_weekday(
        cls, rules: tuple[WorkingDayRule, ...]
    ) -> tuple[WorkingDayRule, ...]:
        return order_weekly_rules(rules)

    @property
    def is_rotating(self) -> bool:
        return self.on_days is not None and self.off_days is not None


class WorkCalendar(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    template_type: CalendarTemplateType = CalendarTemplateType.CUSTOM
    working_days: tuple[WorkingDayRule, ...]
    exceptions: tuple[CalendarException, ...] = ()
    hours_per_day: float = 8
    working_days_per_week: float = 5
    is_base: bool = False
    cycle: CyclicPattern | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("working_days")
    @classmethod
    def _one_rule_per_weekday(
        cls, rules: tuple[WorkingDayRule, ...]
    ) -> tuple[WorkingDayRule, ...]:
        return order_weekly_rules(rules)

    @field_validator("exceptions")
    @classmethod
    def _one_exception_per_day(
        cls, exceptions: tuple[CalendarException, ...]
    ) -> tuple[CalendarException, ...]:
        by_day: dict[date, CalendarException] = {}
        for exception in exceptions:
            by_day[exception.day] = exception
        return tuple(by_day.values())

    @property
    def schedule(self) -> SchedulePattern:
        if self.cycle is not None:
            return self.cycle
        return WeeklyPattern(self.working_days)

    def exception_for(self, day: date) -> CalendarException | None:
        for exception in self.exceptions:
            if exception.day == day:
                return exception
        return None


# ---------------------------------------------------------------------------
# Consumed entities
# ---------------------------------------------------------------------------


class Task(CamelModel):
    id: str | None = None
    name: str | None = None
    start_date: datetime
    end_date: datetime
    is_summary: bool = False
    is_milestone: bool = False
    assigned_resource_ids: list[str] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("assigned_resource_ids", mode="before")
    @classmethod
    def _ids_as_str(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        return value


class Resource(CamelModel):
    id: str
    name: str = ""
    type: ResourceType = ResourceType.WORK
    calendar_id: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("type", mode="before")
    @classmethod
    def _lower_type(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


# ---------------------------------------------------------------------------
# Query results
# ---------------------------------------------------------------------------


class ConflictingResource(CamelModel):
    resource_id: str
    resource_name: str
    calendar_name: str
    reason: str


class ConflictResult(CamelModel):
    has_conflict: bool = False
    conflicting_resources: list[ConflictingResource] = Field(default_factory=list)


class Duration(CamelModel):
    value: float
    unit: DurationUnit = DurationUnit.DAYS


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class CreateCalendarRequest(CamelModel):
    template_type: str | None = None
    name: str | None = None
    anchor_date: date | None = None


class DayQueryRequest(CamelModel):
    calendar: WorkCalendar
    day: datetime = Field(alias="date")


class DayQueryResponse(CamelModel):
    day: date = Field(alias="date")
    is_working: bool
    working_hours: float


class DescribeResponse(CamelModel):
    short_description: str
    matching_template: CalendarTemplateType


class ConflictCheckRequest(CamelModel):
    task: Task
    resources: list[Resource] = Field(default_factory=list)
    calendars: list[WorkCalendar] = Field(default_factory=list)


class WorkingHoursRequest(CamelModel):
    task: Task
    calendar: WorkCalendar


class WorkingHoursResponse(CamelModel):
    hours: float
