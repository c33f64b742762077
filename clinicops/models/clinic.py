from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class Clinic(SQLModel, table=True):
    __tablename__ = "clinics"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    allow_parallel_appointments: bool = False
    # Only read when allow_parallel_appointments is on
    parallel_appointments_limit: int = Field(default=1, ge=1)


class ClinicProfessional(SQLModel, table=True):
    """Professionals that see patients at a clinic; a professional may work at several."""

    __tablename__ = "clinic_professionals"
    clinic_id: UUID = Field(foreign_key="clinics.id", primary_key=True)
    professional_id: UUID = Field(foreign_key="users.id", primary_key=True, index=True)
