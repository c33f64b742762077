"""
Scheduling orchestrator: create, reschedule and status changes of appointments.

Every operation is one unit of work. The calendar/overlap/quota reads and the
write happen while the schedule locks of the involved professional (and
treatment-plan procedure) are held, and the transaction is committed before
the locks are released. Any failure rolls the whole unit back, derived
counters included.
"""

import datetime as dt
import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.core.exceptions import ClinicOpsError, NotFoundError, SchedulingError
from clinicops.models.appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentStatus,
    AppointmentUpdate,
)
from clinicops.models.clinic import Clinic, ClinicProfessional
from clinicops.models.patient import Patient
from clinicops.models.treatment_plan import TreatmentPlan, TreatmentPlanProcedure
from clinicops.models.user import User
from clinicops.services.booking_policy import ensure_bookable
from clinicops.services.calendar_rules import ensure_admissible, normalize_day
from clinicops.services.locks import schedule_lock
from clinicops.services.overlap import count_overlaps, day_bounds
from clinicops.services.session_quota import check_quota, get_procedure, recompute_completed

logger = logging.getLogger(__name__)

# Appointments in these states cannot be edited, only moved through update_status.
# CONFIRMED and WAITING are included on purpose; product has not confirmed
# whether front-desk staff should be able to edit them.
NON_EDITABLE_STATUSES = frozenset(
    {
        AppointmentStatus.CANCELED,
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.WAITING,
    }
)
_TERMINAL_STATUSES = frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELED})


def _utc_naive_now() -> dt.datetime:
    return dt.datetime.now(dt.UTC).replace(tzinfo=None)


def _ensure_time_order(start_time: str, end_time: str) -> None:
    if not start_time < end_time:
        raise SchedulingError(f"Start time {start_time} must be before end time {end_time}")


@asynccontextmanager
async def _unit_of_work(session: AsyncSession, lock_keys: Iterable[UUID | None]) -> AsyncIterator[None]:
    async with schedule_lock(lock_keys):
        try:
            yield
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            logger.info("Store constraint rejected scheduling write: %s", e.orig)
            raise SchedulingError(
                "Appointment conflicts with a booking that was just made, pick another slot"
            ) from e
        except ClinicOpsError as e:
            await session.rollback()
            logger.info("Scheduling request rejected: %s", e)
            raise
        except Exception:
            await session.rollback()
            raise


async def get_clinic(session: AsyncSession, clinic_id: UUID) -> Clinic:
    result = await session.execute(select(Clinic).where(Clinic.id == clinic_id))
    clinic = result.scalar_one_or_none()
    if clinic is None:
        raise NotFoundError("Clinic", clinic_id)
    return clinic


async def get_professional(
    session: AsyncSession, clinic_id: UUID, professional_id: UUID, for_update: bool = False
) -> User:
    q = (
        select(User)
        .join(ClinicProfessional, ClinicProfessional.professional_id == User.id)
        .where(
            User.id == professional_id,
            User.is_professional.is_(True),
            ClinicProfessional.clinic_id == clinic_id,
        )
    )
    if for_update:
        q = q.with_for_update(of=User)
    result = await session.execute(q)
    professional = result.scalar_one_or_none()
    if professional is None:
        raise NotFoundError("Professional", professional_id)
    return professional


async def get_appointment(session: AsyncSession, clinic_id: UUID, appointment_id: UUID) -> Appointment:
    result = await session.execute(
        select(Appointment).where(
            Appointment.id == appointment_id,
            Appointment.clinic_id == clinic_id,
        )
    )
    appointment = result.scalar_one_or_none()
    if appointment is None:
        raise NotFoundError("Appointment", appointment_id)
    return appointment


async def _ensure_patient_in_clinic(session: AsyncSession, clinic_id: UUID, patient_id: UUID) -> None:
    result = await session.execute(
        select(Patient.id).where(Patient.id == patient_id, Patient.clinic_id == clinic_id)
    )
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Patient", patient_id)


async def _ensure_slot_admissible(
    session: AsyncSession,
    clinic: Clinic,
    professional: User,
    day: dt.datetime,
    start_time: str,
    end_time: str,
    exclude_appointment_id: UUID | None = None,
) -> None:
    ensure_admissible(professional, day, start_time, end_time)
    overlaps = await count_overlaps(
        session, professional.id, day, start_time, end_time, exclude_appointment_id
    )
    ensure_bookable(clinic, overlaps)


async def _ensure_plan_of_patient(
    session: AsyncSession, clinic_id: UUID, treatment_plan_id: UUID, patient_id: UUID
) -> None:
    result = await session.execute(
        select(TreatmentPlan.patient_id).where(
            TreatmentPlan.id == treatment_plan_id,
            TreatmentPlan.clinic_id == clinic_id,
        )
    )
    plan_patient_id = result.scalar_one_or_none()
    if plan_patient_id is None:
        raise NotFoundError("Treatment plan", treatment_plan_id)
    if plan_patient_id != patient_id:
        raise SchedulingError("Treatment plan belongs to another patient")


async def _resolve_treatment_plan(
    session: AsyncSession,
    clinic_id: UUID,
    patient_id: UUID,
    procedure: TreatmentPlanProcedure,
    treatment_plan_id: UUID | None,
) -> UUID:
    if treatment_plan_id is not None and treatment_plan_id != procedure.treatment_plan_id:
        raise SchedulingError("Treatment plan procedure does not belong to the given treatment plan")
    await _ensure_plan_of_patient(session, clinic_id, procedure.treatment_plan_id, patient_id)
    return procedure.treatment_plan_id


async def create_appointment(
    session: AsyncSession, clinic_id: UUID, data: AppointmentCreate
) -> Appointment:
    _ensure_time_order(data.start_time, data.end_time)
    lock_keys = (data.professional_id, data.treatment_plan_procedure_id)
    async with _unit_of_work(session, lock_keys):
        clinic = await get_clinic(session, clinic_id)
        professional = await get_professional(
            session, clinic_id, data.professional_id, for_update=True
        )
        await _ensure_patient_in_clinic(session, clinic_id, data.patient_id)
        day = normalize_day(data.date)
        await _ensure_slot_admissible(
            session, clinic, professional, day, data.start_time, data.end_time
        )
        treatment_plan_id = data.treatment_plan_id
        if data.treatment_plan_procedure_id is not None:
            procedure = await get_procedure(
                session, data.treatment_plan_procedure_id, for_update=True
            )
            treatment_plan_id = await _resolve_treatment_plan(
                session, clinic_id, data.patient_id, procedure, data.treatment_plan_id
            )
            await check_quota(session, procedure.id)
        elif treatment_plan_id is not None:
            await _ensure_plan_of_patient(session, clinic_id, treatment_plan_id, data.patient_id)
        appointment = Appointment(
            clinic_id=clinic_id,
            patient_id=data.patient_id,
            professional_id=data.professional_id,
            appointment_type_id=data.appointment_type_id,
            date=day,
            start_time=data.start_time,
            end_time=data.end_time,
            notes=data.notes,
            treatment_plan_id=treatment_plan_id,
            treatment_plan_procedure_id=data.treatment_plan_procedure_id,
        )
        session.add(appointment)
        await session.flush()
    logger.info(
        "Appointment %s booked for professional %s on %s %s-%s",
        appointment.id,
        appointment.professional_id,
        data.date,
        appointment.start_time,
        appointment.end_time,
    )
    return appointment


async def update_appointment(
    session: AsyncSession, clinic_id: UUID, appointment_id: UUID, data: AppointmentUpdate
) -> Appointment:
    appointment = await get_appointment(session, clinic_id, appointment_id)
    changes = data.model_dump(exclude_unset=True)
    current_professional_id = appointment.professional_id
    target_professional_id = changes.get("professional_id") or current_professional_id

    async with _unit_of_work(session, (current_professional_id, target_professional_id)):
        await session.refresh(appointment)
        if appointment.status in NON_EDITABLE_STATUSES:
            raise SchedulingError(
                f"Cannot edit an appointment with status {appointment.status.value}"
            )

        day = normalize_day(changes["date"]) if changes.get("date") else appointment.date
        start_time = changes.get("start_time") or appointment.start_time
        end_time = changes.get("end_time") or appointment.end_time
        _ensure_time_order(start_time, end_time)

        is_reschedule = (
            target_professional_id != appointment.professional_id
            or day != appointment.date
            or start_time != appointment.start_time
            or end_time != appointment.end_time
        )
        if is_reschedule:
            clinic = await get_clinic(session, clinic_id)
            professional = await get_professional(
                session, clinic_id, target_professional_id, for_update=True
            )
            await _ensure_slot_admissible(
                session,
                clinic,
                professional,
                day,
                start_time,
                end_time,
                exclude_appointment_id=appointment.id,
            )
        if changes.get("patient_id"):
            if (
                changes["patient_id"] != appointment.patient_id
                and appointment.treatment_plan_id is not None
            ):
                raise SchedulingError(
                    "Appointment is linked to a treatment plan and cannot move to another patient"
                )
            await _ensure_patient_in_clinic(session, clinic_id, changes["patient_id"])
            appointment.patient_id = changes["patient_id"]
        if changes.get("appointment_type_id"):
            appointment.appointment_type_id = changes["appointment_type_id"]
        if "notes" in changes:
            appointment.notes = changes["notes"]

        appointment.professional_id = target_professional_id
        appointment.date = day
        appointment.start_time = start_time
        appointment.end_time = end_time
        appointment.updated_at = _utc_naive_now()
        session.add(appointment)
        await session.flush()

    if is_reschedule:
        logger.info(
            "Appointment %s rescheduled to professional %s on %s %s-%s",
            appointment.id,
            appointment.professional_id,
            appointment.date.date(),
            appointment.start_time,
            appointment.end_time,
        )
    return appointment


async def update_status(
    session: AsyncSession, clinic_id: UUID, appointment_id: UUID, status: AppointmentStatus
) -> Appointment:
    """Move an appointment to any status; no transition graph is enforced."""
    appointment = await get_appointment(session, clinic_id, appointment_id)
    lock_keys = (appointment.professional_id, appointment.treatment_plan_procedure_id)
    async with _unit_of_work(session, lock_keys):
        await session.refresh(appointment)
        previous = appointment.status
        appointment.status = status
        appointment.updated_at = _utc_naive_now()
        session.add(appointment)
        await session.flush()
        if appointment.treatment_plan_procedure_id is not None:
            await recompute_completed(session, appointment.treatment_plan_procedure_id)

    if previous in _TERMINAL_STATUSES and status != previous:
        logger.warning(
            "Appointment %s moved out of terminal status %s to %s",
            appointment.id,
            previous.value,
            status.value,
        )
    else:
        logger.info("Appointment %s status %s -> %s", appointment.id, previous.value, status.value)
    return appointment


async def list_appointments(
    session: AsyncSession,
    clinic_id: UUID,
    start_date: dt.date,
    end_date: dt.date,
    professional_ids: list[UUID] | None = None,
) -> list[Appointment]:
    """Clinic agenda between two calendar days, both inclusive."""
    start, _ = day_bounds(start_date)
    _, end = day_bounds(end_date)
    q = select(Appointment).where(
        Appointment.clinic_id == clinic_id,
        Appointment.date >= start,
        Appointment.date <= end,
    )
    if professional_ids:
        q = q.where(Appointment.professional_id.in_(professional_ids))
    result = await session.execute(q.order_by(Appointment.date, Appointment.start_time))
    return list(result.scalars().all())
