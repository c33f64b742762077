import datetime as dt
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.models.appointment import Appointment, AppointmentStatus


def intervals_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """Half-open [start, end) intersection on zero-padded HH:MM strings; touching ends do not overlap."""
    return start_a < end_b and end_a > start_b


def day_bounds(day: dt.date | dt.datetime) -> tuple[dt.datetime, dt.datetime]:
    """First and last instant of the calendar day, both inclusive."""
    if isinstance(day, dt.datetime):
        day = day.date()
    start = dt.datetime(day.year, day.month, day.day, 0, 0, 0)
    end = dt.datetime(day.year, day.month, day.day, 23, 59, 59, 999999)
    return start, end


async def get_active_appointments_on_day(
    session: AsyncSession,
    professional_id: UUID,
    day: dt.date | dt.datetime,
    exclude_appointment_id: UUID | None = None,
) -> list[Appointment]:
    start, end = day_bounds(day)
    q = select(Appointment).where(
        Appointment.professional_id == professional_id,
        Appointment.date >= start,
        Appointment.date <= end,
        Appointment.status != AppointmentStatus.CANCELED,
    )
    if exclude_appointment_id is not None:
        q = q.where(Appointment.id != exclude_appointment_id)
    result = await session.execute(q.order_by(Appointment.start_time))
    return list(result.scalars().all())


async def count_overlaps(
    session: AsyncSession,
    professional_id: UUID,
    day: dt.date | dt.datetime,
    start_time: str,
    end_time: str,
    exclude_appointment_id: UUID | None = None,
) -> int:
    appointments = await get_active_appointments_on_day(
        session, professional_id, day, exclude_appointment_id
    )
    return sum(
        1 for a in appointments if intervals_overlap(a.start_time, a.end_time, start_time, end_time)
    )
