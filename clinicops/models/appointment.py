import datetime as dt
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Index
from sqlmodel import Field, SQLModel

from clinicops.models.clock import ClockTime


def _utc_naive_now() -> dt.datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return dt.datetime.now(dt.UTC).replace(tzinfo=None)


class AppointmentStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    WAITING = "WAITING"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_appointments_time_order"),
        Index("ix_appointments_professional_date", "professional_id", "date"),
    )
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    clinic_id: UUID = Field(foreign_key="clinics.id", index=True)
    patient_id: UUID = Field(foreign_key="patients.id", index=True)
    professional_id: UUID = Field(foreign_key="users.id")
    appointment_type_id: UUID = Field(foreign_key="appointment_types.id")
    # Calendar day pinned to 12:00; only the date part is meaningful
    date: dt.datetime
    start_time: str = Field(max_length=5)
    end_time: str = Field(max_length=5)
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED, index=True)
    treatment_plan_id: UUID | None = Field(default=None, foreign_key="treatment_plans.id")
    treatment_plan_procedure_id: UUID | None = Field(
        default=None, foreign_key="treatment_plan_procedures.id", index=True
    )
    notes: str | None = None
    created_at: dt.datetime = Field(default_factory=_utc_naive_now)
    updated_at: dt.datetime = Field(default_factory=_utc_naive_now)


class AppointmentCreate(SQLModel):
    patient_id: UUID
    professional_id: UUID
    appointment_type_id: UUID
    date: dt.date
    start_time: ClockTime
    end_time: ClockTime
    notes: str | None = None
    treatment_plan_id: UUID | None = None
    treatment_plan_procedure_id: UUID | None = None


class AppointmentUpdate(SQLModel):
    """Partial update; fields left unset keep their stored value."""

    patient_id: UUID | None = None
    professional_id: UUID | None = None
    appointment_type_id: UUID | None = None
    date: dt.date | None = None
    start_time: ClockTime | None = None
    end_time: ClockTime | None = None
    notes: str | None = None


class AppointmentPublic(SQLModel):
    id: UUID
    clinic_id: UUID
    patient_id: UUID
    professional_id: UUID
    appointment_type_id: UUID
    date: dt.date
    start_time: str
    end_time: str
    status: AppointmentStatus
    treatment_plan_id: UUID | None = None
    treatment_plan_procedure_id: UUID | None = None
    notes: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime
