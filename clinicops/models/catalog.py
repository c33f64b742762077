from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class AppointmentType(SQLModel, table=True):
    __tablename__ = "appointment_types"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str


class Procedure(SQLModel, table=True):
    __tablename__ = "procedures"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str


class AppointmentTypePublic(SQLModel):
    id: UUID
    name: str
