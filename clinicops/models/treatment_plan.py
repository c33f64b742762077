from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class TreatmentPlan(SQLModel, table=True):
    __tablename__ = "treatment_plans"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    clinic_id: UUID = Field(foreign_key="clinics.id", index=True)
    patient_id: UUID = Field(foreign_key="patients.id", index=True)
    created_at: datetime = Field(default_factory=_utc_naive_now)


class TreatmentPlanProcedure(SQLModel, table=True):
    __tablename__ = "treatment_plan_procedures"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    treatment_plan_id: UUID = Field(foreign_key="treatment_plans.id", index=True)
    procedure_id: UUID = Field(foreign_key="procedures.id")
    contracted_sessions: int = Field(ge=1)
    # Cache of linked COMPLETED appointments; only session_quota writes it
    completed_sessions: int = 0


class TreatmentPlanProcedurePublic(SQLModel):
    id: UUID
    procedure_id: UUID
    procedure_name: str
    contracted_sessions: int
    completed_sessions: int


class TreatmentPlanPublic(SQLModel):
    id: UUID
    patient_id: UUID
    created_at: datetime
    procedures: list[TreatmentPlanProcedurePublic] = []
