"""
Shared fixtures: a throwaway SQLite database per test and a seeded clinic.

Every service call in the tests runs in its own session, the way each HTTP
request gets its own session in production.
"""

import datetime as dt
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from uuid import UUID

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

import clinicops.models  # noqa: F401 - register tables
from clinicops.models import (
    AppointmentCreate,
    AppointmentType,
    Clinic,
    ClinicProfessional,
    Patient,
    Procedure,
    TreatmentPlan,
    TreatmentPlanProcedure,
    User,
    Weekday,
)
from clinicops.services.appointment_service import create_appointment

TUESDAY = dt.date(2026, 10, 20)
WEDNESDAY = dt.date(2026, 10, 21)
THURSDAY = dt.date(2026, 10, 22)
SUNDAY = dt.date(2026, 10, 25)

WEEKDAYS = [Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY]


@dataclass
class World:
    clinic_id: UUID
    other_clinic_id: UUID
    professional_id: UUID
    second_professional_id: UUID
    other_clinic_professional_id: UUID
    patient_id: UUID
    other_clinic_patient_id: UUID
    appointment_type_id: UUID
    procedure_id: UUID
    treatment_plan_id: UUID
    plan_procedure_id: UUID


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'clinicops-test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def world(session_maker) -> World:
    """Serial clinic with two Mon-Fri 08:00-18:00 professionals and a plan with 3 contracted sessions."""
    clinic = Clinic(name="Clinica Centro")
    other_clinic = Clinic(name="Clinica Norte")
    professional = User(
        full_name="Dra. Ana Souza",
        is_professional=True,
        working_days=list(WEEKDAYS),
        schedule_start_hour="08:00",
        schedule_end_hour="18:00",
        appointment_duration=60,
    )
    second_professional = User(
        full_name="Dr. Bruno Lima",
        is_professional=True,
        working_days=list(WEEKDAYS),
        schedule_start_hour="08:00",
        schedule_end_hour="18:00",
    )
    other_clinic_professional = User(
        full_name="Dra. Fernanda Reis",
        is_professional=True,
        working_days=list(WEEKDAYS),
    )
    memberships = [
        ClinicProfessional(clinic_id=clinic.id, professional_id=professional.id),
        ClinicProfessional(clinic_id=clinic.id, professional_id=second_professional.id),
        ClinicProfessional(
            clinic_id=other_clinic.id, professional_id=other_clinic_professional.id
        ),
    ]
    patient = Patient(clinic_id=clinic.id, name="Carla Dias")
    other_patient = Patient(clinic_id=other_clinic.id, name="Diego Alves")
    appointment_type = AppointmentType(name="Consulta")
    procedure = Procedure(name="Limpeza de pele")
    plan = TreatmentPlan(clinic_id=clinic.id, patient_id=patient.id)
    plan_procedure = TreatmentPlanProcedure(
        treatment_plan_id=plan.id, procedure_id=procedure.id, contracted_sessions=3
    )
    async with session_maker() as session:
        session.add_all(
            [
                clinic,
                other_clinic,
                professional,
                second_professional,
                other_clinic_professional,
                patient,
                other_patient,
                appointment_type,
                procedure,
                plan,
                plan_procedure,
                *memberships,
            ]
        )
        await session.commit()
    return World(
        clinic_id=clinic.id,
        other_clinic_id=other_clinic.id,
        professional_id=professional.id,
        second_professional_id=second_professional.id,
        other_clinic_professional_id=other_clinic_professional.id,
        patient_id=patient.id,
        other_clinic_patient_id=other_patient.id,
        appointment_type_id=appointment_type.id,
        procedure_id=procedure.id,
        treatment_plan_id=plan.id,
        plan_procedure_id=plan_procedure.id,
    )


@pytest_asyncio.fixture
async def configure_clinic(session_maker, world):
    async def _configure(allow_parallel: bool, limit: int = 1) -> None:
        async with session_maker() as session:
            clinic = await session.get(Clinic, world.clinic_id)
            clinic.allow_parallel_appointments = allow_parallel
            clinic.parallel_appointments_limit = limit
            await session.commit()

    return _configure


@pytest_asyncio.fixture
async def book(session_maker, world):
    """Create an appointment in a fresh session; keyword overrides go into AppointmentCreate."""

    async def _book(start_time: str = "09:00", end_time: str = "10:00", day: dt.date = TUESDAY, **overrides):
        payload = {
            "patient_id": world.patient_id,
            "professional_id": world.professional_id,
            "appointment_type_id": world.appointment_type_id,
            "date": day,
            "start_time": start_time,
            "end_time": end_time,
        }
        payload.update(overrides)
        clinic_id = payload.pop("clinic_id", world.clinic_id)
        async with session_maker() as session:
            return await create_appointment(session, clinic_id, AppointmentCreate(**payload))

    return _book
