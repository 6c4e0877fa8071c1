"""Built-in calendar archetypes.

Rotating archetypes (2/2, 3/1, 4/3, 15/15, 30/30) carry ``on_days`` and
``off_days``; their ``working_days`` is only a weekly approximation used
until a calendar is anchored to a start date.
"""

from __future__ import annotations

from workcal.domain.models import CalendarTemplate, CalendarTemplateType
from workcal.domain.patterns import WorkingDayRule, WorkingHours

OFFICE_HOURS = WorkingHours(start="09:00", end="18:00")
OFFICE_HOURS_WITH_LUNCH = WorkingHours(
    start="09:00", end="18:00", break_start="13:00", break_end="14:00"
)
ROUND_THE_CLOCK = WorkingHours(start="00:00", end="24:00")
NIGHT_HOURS = WorkingHours(start="22:00", end="06:00")
DAY_SHIFT_12H = WorkingHours(start="08:00", end="20:00")
SHIFT_HOURS = WorkingHours(start="08:00", end="17:00")


def weekly(working: set[int], hours: WorkingHours) -> tuple[WorkingDayRule, ...]:
    """Seven rules, weekdays in *working* (0 = Sunday) are working days."""
    return tuple(
        WorkingDayRule(
            day_of_week=day,
            is_working=day in working,
            working_hours=hours if day in working else None,
        )
        for day in range(7)
    )


MONDAY_TO_FRIDAY = {1, 2, 3, 4, 5}
EVERY_DAY = set(range(7))

STANDARD = CalendarTemplate(
    type=CalendarTemplateType.STANDARD,
    name="Standard",
    description="Five-day working week with Saturday and Sunday off",
    short_description="8h/day, 5/2, Mon-Fri",
    hours_per_day=8,
    working_days_per_week=5,
    default_work_time=OFFICE_HOURS,
    working_days=weekly(MONDAY_TO_FRIDAY, OFFICE_HOURS_WITH_LUNCH),
)

TWENTY_FOUR_SEVEN = CalendarTemplate(
    type=CalendarTemplateType.TWENTY_FOUR_SEVEN,
    name="24 Hours (24/7)",
    description="Continuous operation without days off (equipment, servers, production lines)",
    short_description="24h/day, 7/7",
    hours_per_day=24,
    working_days_per_week=7,
    default_work_time=ROUND_THE_CLOCK,
    working_days=weekly(EVERY_DAY, ROUND_THE_CLOCK),
)

NIGHT_SHIFT = CalendarTemplate(
    type=CalendarTemplateType.NIGHT_SHIFT,
    name="Night Shift",
    description="Night work from 22:00 to 06:00, five days a week",
    short_description="8h nights, 5/2",
    hours_per_day=8,
    working_days_per_week=5,
    default_work_time=NIGHT_HOURS,
    working_days=weekly(MONDAY_TO_FRIDAY, NIGHT_HOURS),
)

TWO_TWO = CalendarTemplate(
    type=CalendarTemplateType.TWO_TWO,
    name="Shift 2/2",
    description="Two days on, two days off. The cycle repeats every 4 days.",
    short_description="12h/day, 2/2",
    hours_per_day=12,
    working_days_per_week=3.5,
    default_work_time=DAY_SHIFT_12H,
    working_days=weekly({0, 1, 4, 5}, DAY_SHIFT_12H),
    on_days=2,
    off_days=2,
)

THREE_ONE = CalendarTemplate(
    type=CalendarTemplateType.THREE_ONE,
    name="Shift 3/1",
    description="Three days on, one day off. Common for security staff and operators.",
    short_description="8h/day, 3/1",
    hours_per_day=8,
    working_days_per_week=5.25,
    default_work_time=SHIFT_HOURS,
    working_days=weekly({1, 2, 3, 5, 6}, SHIFT_HOURS),
    on_days=3,
    off_days=1,
)

FOUR_THREE = CalendarTemplate(
    type=CalendarTemplateType.FOUR_THREE,
    name="Shift 4/3",
    description="Four days on, three days off",
    short_description="8h/day, 4/3",
    hours_per_day=8,
    working_days_per_week=4,
    default_work_time=SHIFT_HOURS,
    working_days=weekly({1, 2, 3, 4}, SHIFT_HOURS),
    on_days=4,
    off_days=3,
)

SHIFT_FIFTEEN = CalendarTemplate(
    type=CalendarTemplateType.SHIFT_FIFTEEN,
    name="Rotation 15/15",
    description="Rotational work: 15 days on, 15 days off. Typical for oil, gas and construction.",
    short_description="12h/day, 15/15",
    hours_per_day=12,
    working_days_per_week=3.5,
    default_work_time=DAY_SHIFT_12H,
    working_days=weekly(EVERY_DAY, DAY_SHIFT_12H),
    on_days=15,
    off_days=15,
)

SHIFT_THIRTY = CalendarTemplate(
    type=CalendarTemplateType.SHIFT_THIRTY,
    name="Rotation 30/30",
    description="A month on, a month off. Used on remote sites (far north, offshore).",
    short_description="12h/day, 30/30",
    hours_per_day=12,
    working_days_per_week=3.5,
    default_work_time=DAY_SHIFT_12H,
    working_days=weekly(EVERY_DAY, DAY_SHIFT_12H),
    on_days=30,
    off_days=30,
)

SIX_DAYS = CalendarTemplate(
    type=CalendarTemplateType.SIX_DAYS,
    name="Six-Day Week",
    description="Six working days a week, Sunday off",
    short_description="8h/day, 6/1",
    hours_per_day=8,
    working_days_per_week=6,
    default_work_time=OFFICE_HOURS,
    working_days=weekly({1, 2, 3, 4, 5, 6}, OFFICE_HOURS),
)

DEFAULT_TEMPLATES: tuple[CalendarTemplate, ...] = (
    STANDARD,
    TWENTY_FOUR_SEVEN,
    NIGHT_SHIFT,
    TWO_TWO,
    THREE_ONE,
    FOUR_THREE,
    SHIFT_FIFTEEN,
    SHIFT_THIRTY,
    SIX_DAYS,
)
