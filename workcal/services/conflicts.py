"""Service for detecting conflicts between tasks and resource work calendars."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from workcal.domain.models import (
    ConflictingResource,
    ConflictResult,
    Resource,
    ResourceType,
    Task,
    WorkCalendar,
)
from workcal.domain.patterns import weekday_index
from workcal.logging import get_logger, timed_block
from workcal.services.catalog import DAY_LABELS, CalendarCatalog, monday_first
from workcal.services.dates import iter_calendar_days

logger = get_logger(__name__)

# Monday of the week probed when describing days off.
REASON_PROBE_MONDAY = date(2024, 1, 1)


class ConflictDetector:
    """Checks task date ranges against the calendars of assigned resources."""

    def __init__(self, catalog: CalendarCatalog) -> None:
        self.catalog = catalog

    def check_task_conflict(
        self,
        task: Task,
        resources: Iterable[Resource],
        calendars: Iterable[WorkCalendar],
    ) -> ConflictResult:
        """Report assigned work resources with a non-working day inside the task.

        Summary and milestone tasks, and tasks with no assignments, never
        conflict. Unknown resources, non-work resources and resources whose
        calendar is unknown are skipped.
        """
        if not task.assigned_resource_ids or task.is_summary or task.is_milestone:
            return ConflictResult()

        resources_by_id = {resource.id: resource for resource in resources}
        calendars_by_id = {calendar.id: calendar for calendar in calendars}

        conflicting: list[ConflictingResource] = []
        with timed_block(logger, "task_conflict_check", task_id=task.id):
            for resource_id in task.assigned_resource_ids:
                resource = resources_by_id.get(resource_id)
                if resource is None or resource.type != ResourceType.WORK:
                    continue

                calendar = calendars_by_id.get(resource.calendar_id or "")
                if calendar is None:
                    logger.debug(
                        "resource_calendar_missing",
                        resource_id=resource_id,
                        calendar_id=resource.calendar_id,
                    )
                    continue

                if self.has_non_working_days(task, calendar):
                    conflicting.append(
                        ConflictingResource(
                            resource_id=resource.id,
                            resource_name=resource.name,
                            calendar_name=calendar.name,
                            reason=self.get_conflict_reason(calendar),
                        )
                    )

        return ConflictResult(
            has_conflict=bool(conflicting), conflicting_resources=conflicting
        )

    def has_non_working_days(self, task: Task, calendar: WorkCalendar) -> bool:
        return any(
            not self.catalog.is_working_day(calendar, day)
            for day in iter_calendar_days(task.start_date, task.end_date)
        )

    def get_conflict_reason(self, calendar: WorkCalendar) -> str:
        """Describe the calendar's days off over one Monday-first week.

        Anchored rotations have no fixed weekly days off and are named by
        their cycle instead.
        """
        if calendar.cycle is not None:
            return f"Rotation {calendar.cycle.on_days}/{calendar.cycle.off_days}"

        days_off = []
        for offset in range(7):
            probe = REASON_PROBE_MONDAY + timedelta(days=offset)
            if not self.catalog.is_working_day(calendar, probe):
                days_off.append(weekday_index(probe))

        if not days_off:
            return "Schedule does not match"
        if len(days_off) == 7:
            return "All days are non-working"

        labels = ", ".join(DAY_LABELS[day] for day in sorted(days_off, key=monday_first))
        return f"Non-working days: {labels}"

    def get_actual_working_hours(self, task: Task, calendar: WorkCalendar) -> float:
        """Working hours the calendar provides over the task's calendar days."""
        return sum(
            (
                self.catalog.get_working_hours(calendar, day)
                for day in iter_calendar_days(task.start_date, task.end_date)
            ),
            0.0,
        )
