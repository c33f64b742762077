import datetime as dt
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.core.config import settings
from clinicops.models.user import User
from clinicops.services.appointment_service import get_clinic, get_professional
from clinicops.services.booking_policy import evaluate
from clinicops.services.calendar_rules import check_admissible
from clinicops.services.overlap import get_active_appointments_on_day, intervals_overlap

_DAY_START = "00:00"
_DAY_END = "23:59"


def _to_minutes(clock: str) -> int:
    hours, minutes = clock.split(":")
    return int(hours) * 60 + int(minutes)


def _to_clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def slot_times_for_day(professional: User) -> list[tuple[str, str]]:
    """Slot (start, end) pairs across the professional's window, stepped by their appointment duration."""
    duration = professional.appointment_duration or settings.default_slot_minutes
    window_start = _to_minutes(professional.schedule_start_hour or _DAY_START)
    window_end = _to_minutes(professional.schedule_end_hour or _DAY_END)
    slots: list[tuple[str, str]] = []
    current = window_start
    while current + duration <= window_end:
        slots.append((_to_clock(current), _to_clock(current + duration)))
        current += duration
    return slots


async def get_availability(
    session: AsyncSession, clinic_id: UUID, professional_id: UUID, day: dt.date
) -> list[tuple[str, str, bool]]:
    """Returns (start, end, available) for every slot of the day.

    Empty when the professional does not work on that weekday. A slot is
    available when a booking for exactly that interval would be accepted.
    """
    clinic = await get_clinic(session, clinic_id)
    professional = await get_professional(session, clinic_id, professional_id)
    slots = slot_times_for_day(professional)
    if not slots or check_admissible(professional, day, slots[0][0], slots[0][1]) is not None:
        return []
    booked = await get_active_appointments_on_day(session, professional_id, day)
    out: list[tuple[str, str, bool]] = []
    for start, end in slots:
        overlaps = sum(1 for a in booked if intervals_overlap(a.start_time, a.end_time, start, end))
        out.append((start, end, evaluate(clinic, overlaps) is None))
    return out
