from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Weekday(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"


class User(SQLModel, table=True):
    __tablename__ = "users"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    full_name: str
    email: str | None = Field(default=None, index=True)
    is_professional: bool = False
    working_days: list[Weekday] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    # HH:MM bounds of the daily window; both None means bookable all day
    schedule_start_hour: str | None = None
    schedule_end_hour: str | None = None
    appointment_duration: int | None = None  # minutes, drives the availability grid


class ProfessionalPublic(SQLModel):
    id: UUID
    full_name: str
    working_days: list[Weekday]
    schedule_start_hour: str | None
    schedule_end_hour: str | None
    appointment_duration: int | None
