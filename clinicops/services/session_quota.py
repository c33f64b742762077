import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.core.exceptions import NotFoundError, SessionLimitError
from clinicops.models.appointment import Appointment, AppointmentStatus
from clinicops.models.treatment_plan import TreatmentPlanProcedure

logger = logging.getLogger(__name__)


async def get_procedure(
    session: AsyncSession, procedure_id: UUID, for_update: bool = False
) -> TreatmentPlanProcedure:
    q = select(TreatmentPlanProcedure).where(TreatmentPlanProcedure.id == procedure_id)
    if for_update:
        q = q.with_for_update()
    result = await session.execute(q)
    procedure = result.scalar_one_or_none()
    if procedure is None:
        raise NotFoundError("Treatment plan procedure", procedure_id)
    return procedure


async def get_booked_sessions(session: AsyncSession, procedure_id: UUID) -> list[Appointment]:
    """Non-canceled appointments linked to the procedure, earliest first."""
    result = await session.execute(
        select(Appointment)
        .where(
            Appointment.treatment_plan_procedure_id == procedure_id,
            Appointment.status != AppointmentStatus.CANCELED,
        )
        .order_by(Appointment.date, Appointment.start_time)
    )
    return list(result.scalars().all())


def _format_session(a: Appointment) -> str:
    return f"{a.date:%Y-%m-%d} {a.start_time}"


async def check_quota(session: AsyncSession, procedure_id: UUID) -> TreatmentPlanProcedure:
    """Raise SessionLimitError when every contracted session is already booked."""
    procedure = await get_procedure(session, procedure_id, for_update=True)
    booked = await get_booked_sessions(session, procedure_id)
    if len(booked) >= procedure.contracted_sessions:
        raise SessionLimitError(
            contracted_sessions=procedure.contracted_sessions,
            scheduled_dates=[_format_session(a) for a in booked],
        )
    return procedure


async def recompute_completed(session: AsyncSession, procedure_id: UUID) -> int:
    """Overwrite completed_sessions with the number of linked COMPLETED appointments."""
    procedure = await get_procedure(session, procedure_id, for_update=True)
    result = await session.execute(
        select(func.count())
        .select_from(Appointment)
        .where(
            Appointment.treatment_plan_procedure_id == procedure_id,
            Appointment.status == AppointmentStatus.COMPLETED,
        )
    )
    completed = int(result.scalar_one())
    if procedure.completed_sessions != completed:
        logger.debug(
            "Procedure %s completed_sessions %d -> %d",
            procedure_id,
            procedure.completed_sessions,
            completed,
        )
    procedure.completed_sessions = completed
    session.add(procedure)
    await session.flush()
    return completed
