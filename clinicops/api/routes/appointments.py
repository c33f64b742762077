import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.api.deps import get_clinic_id, get_session
from clinicops.api.schemas.appointment import ErrorResponse, StatusUpdateRequest
from clinicops.models.appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentUpdate,
)
from clinicops.models.catalog import AppointmentTypePublic
from clinicops.models.patient import PatientPublic
from clinicops.models.treatment_plan import TreatmentPlanPublic
from clinicops.services.appointment_service import (
    create_appointment,
    list_appointments,
    update_appointment,
    update_status,
)
from clinicops.services.catalog_service import (
    list_appointment_types,
    list_patients_for_clinic,
    list_treatment_plans_for_patient,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
}


def _to_public(a: Appointment) -> AppointmentPublic:
    """Public shape; the stored noon-pinned datetime is reported as a plain date."""
    return AppointmentPublic(
        id=a.id,
        clinic_id=a.clinic_id,
        patient_id=a.patient_id,
        professional_id=a.professional_id,
        appointment_type_id=a.appointment_type_id,
        date=a.date.date(),
        start_time=a.start_time,
        end_time=a.end_time,
        status=a.status,
        treatment_plan_id=a.treatment_plan_id,
        treatment_plan_procedure_id=a.treatment_plan_procedure_id,
        notes=a.notes,
        created_at=a.created_at,
        updated_at=a.updated_at,
    )


@router.post(
    "",
    response_model=AppointmentPublic,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def book_appointment(
    body: AppointmentCreate,
    session: AsyncSession = Depends(get_session),
    clinic_id: UUID = Depends(get_clinic_id),
) -> AppointmentPublic:
    appointment = await create_appointment(session, clinic_id, body)
    return _to_public(appointment)


@router.get("", response_model=list[AppointmentPublic])
async def list_clinic_appointments(
    start_date: date = Query(...),
    end_date: date | None = Query(None),
    professional_id: list[UUID] | None = Query(None),
    session: AsyncSession = Depends(get_session),
    clinic_id: UUID = Depends(get_clinic_id),
) -> list[AppointmentPublic]:
    appointments = await list_appointments(
        session, clinic_id, start_date, end_date or start_date, professional_id
    )
    return [_to_public(a) for a in appointments]


@router.get("/patients", response_model=list[PatientPublic])
async def list_patients(
    session: AsyncSession = Depends(get_session),
    clinic_id: UUID = Depends(get_clinic_id),
) -> list[PatientPublic]:
    patients = await list_patients_for_clinic(session, clinic_id)
    return [PatientPublic(id=p.id, name=p.name) for p in patients]


@router.get("/types", response_model=list[AppointmentTypePublic])
async def list_types(
    session: AsyncSession = Depends(get_session),
    _clinic_id: UUID = Depends(get_clinic_id),
) -> list[AppointmentTypePublic]:
    types = await list_appointment_types(session)
    return [AppointmentTypePublic(id=t.id, name=t.name) for t in types]


@router.get("/treatment-plans/patient/{patient_id}", response_model=list[TreatmentPlanPublic])
async def list_patient_treatment_plans(
    patient_id: UUID,
    session: AsyncSession = Depends(get_session),
    clinic_id: UUID = Depends(get_clinic_id),
) -> list[TreatmentPlanPublic]:
    return await list_treatment_plans_for_patient(session, clinic_id, patient_id)


@router.patch("/{appointment_id}", response_model=AppointmentPublic, responses=_ERROR_RESPONSES)
async def reschedule_appointment(
    appointment_id: UUID,
    body: AppointmentUpdate,
    session: AsyncSession = Depends(get_session),
    clinic_id: UUID = Depends(get_clinic_id),
) -> AppointmentPublic:
    appointment = await update_appointment(session, clinic_id, appointment_id, body)
    return _to_public(appointment)


@router.patch(
    "/{appointment_id}/status",
    response_model=AppointmentPublic,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def change_appointment_status(
    appointment_id: UUID,
    body: StatusUpdateRequest,
    session: AsyncSession = Depends(get_session),
    clinic_id: UUID = Depends(get_clinic_id),
) -> AppointmentPublic:
    appointment = await update_status(session, clinic_id, appointment_id, body.status)
    return _to_public(appointment)
