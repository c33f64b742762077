"""
Calendar rules of a professional: working weekdays and the daily window.

Everything here is a pure read of the professional row; nothing touches the
database.
"""

import datetime as dt
from enum import Enum

from clinicops.core.exceptions import SchedulingError
from clinicops.models.clock import normalize_clock_time
from clinicops.models.user import User, Weekday

# Date-only values are pinned to noon so that no timezone truncation can move
# them onto the neighbouring day.
NORMALIZED_HOUR = 12

_WEEKDAYS = list(Weekday)  # date.weekday(): Monday == 0


class CalendarViolation(str, Enum):
    OUT_OF_WORKING_DAY = "OUT_OF_WORKING_DAY"
    OUT_OF_WORKING_HOURS = "OUT_OF_WORKING_HOURS"


def normalize_day(day: dt.date) -> dt.datetime:
    """Canonical stored representation of a calendar day."""
    return dt.datetime(day.year, day.month, day.day, NORMALIZED_HOUR, 0, 0)


def weekday_for(day: dt.date | dt.datetime) -> Weekday:
    if isinstance(day, dt.datetime):
        day = day.date()
    return _WEEKDAYS[normalize_day(day).weekday()]


def has_schedule_window(professional: User) -> bool:
    return bool(professional.schedule_start_hour and professional.schedule_end_hour)


def schedule_window(professional: User) -> tuple[str, str] | None:
    """Zero-padded (start, end) of the daily window, or None when it is not declared."""
    if not has_schedule_window(professional):
        return None
    return (
        normalize_clock_time(professional.schedule_start_hour),
        normalize_clock_time(professional.schedule_end_hour),
    )


def check_admissible(
    professional: User, day: dt.date | dt.datetime, start_time: str, end_time: str
) -> CalendarViolation | None:
    working_days = {Weekday(d) for d in professional.working_days or []}
    if weekday_for(day) not in working_days:
        return CalendarViolation.OUT_OF_WORKING_DAY
    window = schedule_window(professional)
    if window is None:
        return None
    if start_time < window[0] or end_time > window[1]:
        return CalendarViolation.OUT_OF_WORKING_HOURS
    return None


def ensure_admissible(
    professional: User, day: dt.date | dt.datetime, start_time: str, end_time: str
) -> None:
    violation = check_admissible(professional, day, start_time, end_time)
    if violation is CalendarViolation.OUT_OF_WORKING_DAY:
        weekday = weekday_for(day).value.capitalize()
        raise SchedulingError(
            f"{professional.full_name} does not work on {weekday}",
            violation=violation.value,
        )
    if violation is CalendarViolation.OUT_OF_WORKING_HOURS:
        raise SchedulingError(
            f"{start_time}-{end_time} is outside the working hours of {professional.full_name} "
            f"({'-'.join(schedule_window(professional))})",
            violation=violation.value,
        )
