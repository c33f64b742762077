from pydantic import BaseModel

from clinicops.models.appointment import AppointmentStatus


class StatusUpdateRequest(BaseModel):
    status: AppointmentStatus


class SlotInfo(BaseModel):
    start_time: str
    end_time: str
    available: bool


class AvailableSlotsResponse(BaseModel):
    date: str  # YYYY-MM-DD
    professional_id: str
    slots: list[SlotInfo]


class ErrorResponse(BaseModel):
    detail: str
    violation: str | None = None
    contracted_sessions: int | None = None
    scheduled_dates: list[str] | None = None
