"""FastAPI application: stateless HTTP access to the calendar core.

Every request carries the calendars, tasks and resources it is about;
nothing is stored between requests.
"""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from workcal.config import get_config
from workcal.domain.errors import InvalidDateError
from workcal.domain.models import (
    CalendarTemplate,
    ConflictCheckRequest,
    ConflictResult,
    CreateCalendarRequest,
    DayQueryRequest,
    DayQueryResponse,
    DescribeResponse,
    WorkCalendar,
    WorkingHoursRequest,
    WorkingHoursResponse,
)
from workcal.logging import configure_logging, get_logger
from workcal.services.catalog import CalendarCatalog
from workcal.services.conflicts import ConflictDetector
from workcal.services.dates import to_calendar_day

configure_logging(get_config().log_level)
logger = get_logger(__name__)

app = FastAPI(title="Work Calendar Service")

# ── Shared read-only services (created at import time for simplicity) ─
catalog = CalendarCatalog()
conflict_detector = ConflictDetector(catalog)


@app.exception_handler(InvalidDateError)
def invalid_date_handler(request: Request, exc: InvalidDateError) -> JSONResponse:
    logger.info("invalid_date_rejected", path=request.url.path, value=repr(exc.value))
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/templates", response_model=list[CalendarTemplate])
def list_templates() -> list[CalendarTemplate]:
    """Return the built-in calendar templates in their fixed order."""
    return catalog.get_all_templates()


@app.get("/templates/{template_type}", response_model=CalendarTemplate)
def get_template(template_type: str) -> CalendarTemplate:
    template = catalog.get_template_by_type(template_type)
    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@app.get("/calendars/base", response_model=list[WorkCalendar])
def list_base_calendars() -> list[WorkCalendar]:
    """Return the built-in, non-deletable calendars."""
    return catalog.get_base_calendars()


@app.post("/calendars", response_model=WorkCalendar, status_code=201)
def create_calendar(body: CreateCalendarRequest) -> WorkCalendar:
    """Create a calendar from a template, or a custom one when no template is named."""
    if body.template_type is None:
        return catalog.create_custom_calendar(body.name or "")

    template = catalog.get_template_by_type(body.template_type)
    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return catalog.create_from_template(
        template, custom_name=body.name, anchor_date=body.anchor_date
    )


@app.post("/calendars/day", response_model=DayQueryResponse)
def query_day(body: DayQueryRequest) -> DayQueryResponse:
    """Answer whether a date is a working day and how many hours it holds."""
    day = to_calendar_day(body.day)
    return DayQueryResponse(
        date=day,
        is_working=catalog.is_working_day(body.calendar, day),
        working_hours=catalog.get_working_hours(body.calendar, day),
    )


@app.post("/calendars/describe", response_model=DescribeResponse)
def describe_calendar(calendar: WorkCalendar) -> DescribeResponse:
    return DescribeResponse(
        short_description=catalog.generate_short_description(calendar),
        matching_template=catalog.match_template(calendar.working_days),
    )


@app.post("/conflicts/check", response_model=ConflictResult)
def check_conflicts(body: ConflictCheckRequest) -> ConflictResult:
    """Report the assigned resources whose calendar has a day off inside the task."""
    return conflict_detector.check_task_conflict(body.task, body.resources, body.calendars)


@app.post("/tasks/working-hours", response_model=WorkingHoursResponse)
def task_working_hours(body: WorkingHoursRequest) -> WorkingHoursResponse:
    return WorkingHoursResponse(
        hours=conflict_detector.get_actual_working_hours(body.task, body.calendar)
    )
