from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from clinicops.api.deps import get_clinic_id, get_session
from clinicops.api.schemas.appointment import AvailableSlotsResponse, SlotInfo
from clinicops.models.user import ProfessionalPublic
from clinicops.services.availability_service import get_availability
from clinicops.services.catalog_service import list_professionals_for_clinic

router = APIRouter(prefix="/professionals", tags=["professionals"])


@router.get("", response_model=list[ProfessionalPublic])
async def list_professionals(
    session: AsyncSession = Depends(get_session),
    clinic_id: UUID = Depends(get_clinic_id),
) -> list[ProfessionalPublic]:
    professionals = await list_professionals_for_clinic(session, clinic_id)
    return [
        ProfessionalPublic(
            id=p.id,
            full_name=p.full_name,
            working_days=p.working_days,
            schedule_start_hour=p.schedule_start_hour,
            schedule_end_hour=p.schedule_end_hour,
            appointment_duration=p.appointment_duration,
        )
        for p in professionals
    ]


@router.get("/{professional_id}/availability", response_model=AvailableSlotsResponse)
async def available_slots(
    professional_id: UUID,
    date_param: date = Query(..., alias="date"),
    session: AsyncSession = Depends(get_session),
    clinic_id: UUID = Depends(get_clinic_id),
) -> AvailableSlotsResponse:
    """Slots of the professional's day; each has start_time, end_time and available (bool)."""
    slots = await get_availability(session, clinic_id, professional_id, date_param)
    return AvailableSlotsResponse(
        date=date_param.isoformat(),
        professional_id=str(professional_id),
        slots=[SlotInfo(start_time=s, end_time=e, available=avail) for s, e, avail in slots],
    )
