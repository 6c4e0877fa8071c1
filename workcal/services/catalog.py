"""Calendar catalog: templates, calendar creation and per-day evaluation."""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Sequence

from workcal.config import get_config
from workcal.domain.models import (
    CalendarException,
    CalendarTemplate,
    CalendarTemplateType,
    ExceptionType,
    WorkCalendar,
)
from workcal.domain.patterns import CyclicPattern, WorkingDayRule, WorkingHours
from workcal.logging import get_logger
from workcal.services.dates import DateInput, to_calendar_day
from workcal.services.templates import DEFAULT_TEMPLATES, STANDARD

logger = get_logger(__name__)

DAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

SYSTEM_CALENDAR_IDS: dict[str, CalendarTemplateType] = {
    "standard": CalendarTemplateType.STANDARD,
    "night_shift": CalendarTemplateType.NIGHT_SHIFT,
    "24_7": CalendarTemplateType.TWENTY_FOUR_SEVEN,
}

_CLOCK = re.compile(r"^(\d{1,2}):(\d{2})$")
_NAME_DISALLOWED = re.compile(r"[^a-zA-Zа-яА-ЯёЁ0-9\s_-]")
_WHITESPACE = re.compile(r"\s+")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def monday_first(day_of_week: int) -> int:
    """Sort key placing Monday first and Sunday last."""
    return (day_of_week + 6) % 7


# ---------------------------------------------------------------------------
# Clock arithmetic
# ---------------------------------------------------------------------------


def parse_clock(text: str | None) -> int | None:
    """Minutes after midnight for an "HH:mm" string, None when malformed."""
    if not isinstance(text, str):
        return None
    match = _CLOCK.match(text.strip())
    if match is None:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 24 or minutes > 59 or (hours == 24 and minutes):
        return None
    return hours * 60 + minutes


def hours_between(start: str | None, end: str | None) -> float | None:
    """Length of the span start..end in hours; an end before start wraps past midnight."""
    start_minutes = parse_clock(start)
    end_minutes = parse_clock(end)
    if start_minutes is None or end_minutes is None:
        return None
    span = end_minutes - start_minutes
    if span < 0:
        span += 24 * 60
    return span / 60


def shift_hours(hours: WorkingHours) -> float | None:
    """Shift length minus its break, None when any clock value is malformed."""
    total = hours_between(hours.start, hours.end)
    if total is None:
        return None
    if hours.break_start is None or hours.break_end is None:
        return total
    pause = hours_between(hours.break_start, hours.break_end)
    if pause is None:
        return None
    return total - pause


# ---------------------------------------------------------------------------
# Names and ids
# ---------------------------------------------------------------------------


def sanitize_name(name: Any) -> str:
    """Reduce a calendar name to an id-safe segment.

    Never raises. Names that reduce to nothing become the configured
    fallback name.
    """
    fallback = get_config().fallback_name
    if not isinstance(name, str):
        return fallback
    cleaned = _NAME_DISALLOWED.sub("", name.strip()).strip()
    cleaned = _WHITESPACE.sub("_", cleaned).lower()
    return cleaned or fallback


def generate_calendar_id(name: Any) -> str:
    """``<namespace>_<8 hex>_<sanitized name>``."""
    token = uuid.uuid4().hex[:8]
    return f"{get_config().id_namespace}_{token}_{sanitize_name(name)}"


def is_system_calendar_id(calendar_id: str | None) -> bool:
    return calendar_id in SYSTEM_CALENDAR_IDS


def is_custom_calendar_id(calendar_id: str | None) -> bool:
    if not calendar_id:
        return False
    return calendar_id.startswith(f"{get_config().id_namespace}_")


def template_type_for_calendar_id(calendar_id: str | None) -> CalendarTemplateType:
    if not calendar_id:
        return CalendarTemplateType.CUSTOM
    return SYSTEM_CALENDAR_IDS.get(calendar_id.lower(), CalendarTemplateType.CUSTOM)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class CalendarCatalog:
    """Read-only set of calendar templates plus the per-day calendar queries.

    Build one instance and hand it to whatever needs it; nothing here keeps
    state beyond the template tuple.
    """

    def __init__(self, templates: Iterable[CalendarTemplate] | None = None) -> None:
        self._templates: tuple[CalendarTemplate, ...] = tuple(
            DEFAULT_TEMPLATES if templates is None else templates
        )

    # -- templates ---------------------------------------------------------

    def get_all_templates(self) -> list[CalendarTemplate]:
        return list(self._templates)

    def get_template_by_type(
        self, template_type: CalendarTemplateType | str | None
    ) -> CalendarTemplate | None:
        for template in self._templates:
            if template.type == template_type:
                return template
        logger.debug("template_not_found", template_type=template_type)
        return None

    def is_matching_template(
        self, working_days: Sequence[WorkingDayRule], template: CalendarTemplate
    ) -> bool:
        """True when *working_days* is still the pattern of *template*.

        Working flags must agree on every weekday, and working days must keep
        the template's start and end times.
        """
        if len(working_days) != len(template.working_days):
            return False
        expected = {rule.day_of_week: rule for rule in template.working_days}
        for rule in working_days:
            other = expected.get(rule.day_of_week)
            if other is None or rule.is_working != other.is_working:
                return False
            if rule.is_working and _clock_range(rule) != _clock_range(other):
                return False
        return True

    def match_template(self, working_days: Sequence[WorkingDayRule]) -> CalendarTemplateType:
        """Template type whose pattern *working_days* matches, else CUSTOM."""
        for template in self._templates:
            if self.is_matching_template(working_days, template):
                return template.type
        return CalendarTemplateType.CUSTOM

    # -- calendar creation -------------------------------------------------

    def create_from_template(
        self,
        template: CalendarTemplate,
        custom_name: str | None = None,
        anchor_date: DateInput | None = None,
    ) -> WorkCalendar:
        """Create a new calendar from *template*.

        Rotating templates are projected cyclically only when *anchor_date*
        (the first working day of a cycle) is given.
        """
        now = _utcnow()
        name = custom_name or template.name

        cycle = None
        if anchor_date is not None:
            if template.is_rotating:
                cycle = CyclicPattern(
                    anchor_date=to_calendar_day(anchor_date),
                    on_days=template.on_days,
                    off_days=template.off_days,
                    working_hours=template.default_work_time,
                )
            else:
                logger.debug("anchor_ignored_for_weekly_template", template=template.type)

        return WorkCalendar(
            id=generate_calendar_id(name),
            name=name,
            description=template.description,
            template_type=template.type,
            working_days=template.working_days,
            exceptions=(),
            hours_per_day=template.hours_per_day,
            working_days_per_week=template.working_days_per_week,
            is_base=False,
            cycle=cycle,
            created_at=now,
            updated_at=now,
        )

    def create_custom_calendar(self, name: str) -> WorkCalendar:
        """Create a calendar seeded with the standard Mon-Fri pattern."""
        now = _utcnow()
        return WorkCalendar(
            id=generate_calendar_id(name),
            name=name,
            description="Custom calendar",
            template_type=CalendarTemplateType.CUSTOM,
            working_days=STANDARD.working_days,
            hours_per_day=8,
            working_days_per_week=5,
            is_base=False,
            created_at=now,
            updated_at=now,
        )

    def get_base_calendars(self) -> list[WorkCalendar]:
        """Built-in calendars that cannot be deleted."""
        calendars = []
        for calendar_id, template_type in SYSTEM_CALENDAR_IDS.items():
            template = self.get_template_by_type(template_type)
            if template is None:
                continue
            calendar = self.create_from_template(template)
            calendars.append(calendar.model_copy(update={"id": calendar_id, "is_base": True}))
        return calendars

    def revise(self, calendar: WorkCalendar, **changes: Any) -> WorkCalendar:
        """Return a validated copy of *calendar* with *changes* applied."""
        data = calendar.model_dump()
        data.update(changes)
        data["updated_at"] = _utcnow()
        return WorkCalendar.model_validate(data)

    def with_exception(
        self, calendar: WorkCalendar, exception: CalendarException
    ) -> WorkCalendar:
        """Add *exception*, replacing any exception on the same calendar day."""
        kept = [e for e in calendar.exceptions if e.day != exception.day]
        return self.revise(calendar, exceptions=[*kept, exception])

    # -- per-day evaluation ------------------------------------------------

    def is_working_day(self, calendar: WorkCalendar, value: DateInput) -> bool:
        day = to_calendar_day(value)
        exception = calendar.exception_for(day)
        if exception is not None:
            return exception.type == ExceptionType.WORKING
        rule = calendar.schedule.rule_for(day)
        return rule.is_working if rule is not None else False

    def get_working_hours(self, calendar: WorkCalendar, value: DateInput) -> float:
        day = to_calendar_day(value)
        if not self.is_working_day(calendar, day):
            return 0.0

        exception = calendar.exception_for(day)
        if (
            exception is not None
            and exception.start_time is not None
            and exception.end_time is not None
        ):
            hours = hours_between(exception.start_time, exception.end_time)
            if hours is not None:
                return hours
            logger.warning(
                "malformed_exception_hours",
                calendar_id=calendar.id,
                day=day.isoformat(),
                start_time=exception.start_time,
                end_time=exception.end_time,
            )

        rule = calendar.schedule.rule_for(day)
        if rule is not None and rule.working_hours is not None:
            hours = shift_hours(rule.working_hours)
            if hours is not None:
                return hours
            logger.warning(
                "malformed_working_hours",
                calendar_id=calendar.id,
                day_of_week=rule.day_of_week,
            )

        return float(calendar.hours_per_day)

    # -- descriptions ------------------------------------------------------

    def generate_short_description(self, calendar: WorkCalendar | CalendarTemplate) -> str:
        active = [rule for rule in calendar.working_days if rule.is_working]
        if not active:
            return "No working days"

        hours = f"{calendar.hours_per_day:g}"
        cycle = getattr(calendar, "cycle", None)
        if cycle is not None:
            return f"{hours}h/day, {cycle.on_days}/{cycle.off_days} rotation"
        if len(active) == 7:
            return f"{hours}h/day, 7/7 (No days off)"

        ordered = sorted(active, key=lambda rule: monday_first(rule.day_of_week))
        labels = ", ".join(DAY_LABELS[rule.day_of_week] for rule in ordered)
        return f"{hours}h/day, {len(active)}/7 ({labels})"


def _clock_range(rule: WorkingDayRule) -> tuple[str | None, str | None]:
    if rule.working_hours is None:
        return None, None
    return rule.working_hours.start, rule.working_hours.end

