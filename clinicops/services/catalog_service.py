from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.models.catalog import AppointmentType, Procedure
from clinicops.models.clinic import ClinicProfessional
from clinicops.models.patient import Patient
from clinicops.models.treatment_plan import (
    TreatmentPlan,
    TreatmentPlanProcedure,
    TreatmentPlanProcedurePublic,
    TreatmentPlanPublic,
)
from clinicops.models.user import User


async def list_patients_for_clinic(session: AsyncSession, clinic_id: UUID) -> list[Patient]:
    result = await session.execute(
        select(Patient).where(Patient.clinic_id == clinic_id).order_by(Patient.name)
    )
    return list(result.scalars().all())


async def list_professionals_for_clinic(session: AsyncSession, clinic_id: UUID) -> list[User]:
    """Professionals working at the clinic, by name, with their calendar settings."""
    result = await session.execute(
        select(User)
        .join(ClinicProfessional, ClinicProfessional.professional_id == User.id)
        .where(ClinicProfessional.clinic_id == clinic_id, User.is_professional.is_(True))
        .order_by(User.full_name)
    )
    return list(result.scalars().all())


async def list_appointment_types(session: AsyncSession) -> list[AppointmentType]:
    result = await session.execute(select(AppointmentType).order_by(AppointmentType.name))
    return list(result.scalars().all())


async def list_treatment_plans_for_patient(
    session: AsyncSession, clinic_id: UUID, patient_id: UUID
) -> list[TreatmentPlanPublic]:
    """Plans of the patient in this clinic, newest first, with their procedure lines."""
    result = await session.execute(
        select(TreatmentPlan)
        .where(TreatmentPlan.clinic_id == clinic_id, TreatmentPlan.patient_id == patient_id)
        .order_by(TreatmentPlan.created_at.desc())
    )
    plans = list(result.scalars().all())
    if not plans:
        return []
    lines = await session.execute(
        select(TreatmentPlanProcedure, Procedure.name)
        .join(Procedure, Procedure.id == TreatmentPlanProcedure.procedure_id)
        .where(TreatmentPlanProcedure.treatment_plan_id.in_([p.id for p in plans]))
        .order_by(Procedure.name)
    )
    by_plan: dict[UUID, list[TreatmentPlanProcedurePublic]] = {p.id: [] for p in plans}
    for line, procedure_name in lines.all():
        by_plan[line.treatment_plan_id].append(
            TreatmentPlanProcedurePublic(
                id=line.id,
                procedure_id=line.procedure_id,
                procedure_name=procedure_name,
                contracted_sessions=line.contracted_sessions,
                completed_sessions=line.completed_sessions,
            )
        )
    return [
        TreatmentPlanPublic(
            id=p.id,
            patient_id=p.patient_id,
            created_at=p.created_at,
            procedures=by_plan[p.id],
        )
        for p in plans
    ]
