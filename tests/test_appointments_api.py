import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from clinicops.core.db import get_session
from clinicops.core.security import create_access_token
from clinicops.main import app

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def client(session_maker, world):
    async def _override_get_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = _override_get_session
    token = create_access_token(world.professional_id, world.clinic_id)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {token}"},
    ) as c:
        yield c
    app.dependency_overrides.clear()


def _body(world, **overrides) -> dict:
    body = {
        "patient_id": str(world.patient_id),
        "professional_id": str(world.professional_id),
        "appointment_type_id": str(world.appointment_type_id),
        "date": "2026-10-20",
        "start_time": "9:00",
        "end_time": "10:00",
    }
    body.update(overrides)
    return body


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_missing_token_is_unauthorized(client, world):
    response = await client.post(
        "/api/v1/appointments", json=_body(world), headers={"Authorization": ""}
    )
    assert response.status_code == 401


async def test_token_for_unknown_user_is_unauthorized(client, world):
    token = create_access_token(uuid.uuid4(), world.clinic_id)
    response = await client.get(
        "/api/v1/appointments/patients", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


async def test_book_and_conflict(client, world):
    response = await client.post("/api/v1/appointments", json=_body(world))
    assert response.status_code == 201
    created = response.json()
    assert created["date"] == "2026-10-20"
    assert created["start_time"] == "09:00"
    assert created["status"] == "SCHEDULED"
    assert created["clinic_id"] == str(world.clinic_id)

    response = await client.post(
        "/api/v1/appointments", json=_body(world, start_time="09:30", end_time="10:30")
    )
    assert response.status_code == 400
    assert "already taken" in response.json()["detail"]


async def test_malformed_time_is_422(client, world):
    response = await client.post("/api/v1/appointments", json=_body(world, start_time="25:00"))
    assert response.status_code == 422


async def test_calendar_violation_payload(client, world):
    response = await client.post("/api/v1/appointments", json=_body(world, date="2026-10-25"))
    assert response.status_code == 400
    assert response.json()["violation"] == "OUT_OF_WORKING_DAY"


async def test_unknown_professional_is_404(client, world):
    response = await client.post(
        "/api/v1/appointments", json=_body(world, professional_id=str(uuid.uuid4()))
    )
    assert response.status_code == 404


async def test_session_limit_payload(client, world):
    linked = {"treatment_plan_procedure_id": str(world.plan_procedure_id)}
    for start, end in [("08:00", "09:00"), ("09:00", "10:00"), ("10:00", "11:00")]:
        response = await client.post(
            "/api/v1/appointments", json=_body(world, start_time=start, end_time=end, **linked)
        )
        assert response.status_code == 201

    response = await client.post(
        "/api/v1/appointments", json=_body(world, start_time="11:00", end_time="12:00", **linked)
    )
    assert response.status_code == 400
    payload = response.json()
    assert payload["contracted_sessions"] == 3
    assert payload["scheduled_dates"] == ["2026-10-20 08:00", "2026-10-20 09:00", "2026-10-20 10:00"]


async def test_reschedule_and_status_change(client, world):
    created = (await client.post("/api/v1/appointments", json=_body(world))).json()

    response = await client.patch(
        f"/api/v1/appointments/{created['id']}", json={"start_time": "11:00", "end_time": "12:00"}
    )
    assert response.status_code == 200
    assert response.json()["start_time"] == "11:00"

    response = await client.patch(
        f"/api/v1/appointments/{created['id']}/status", json={"status": "CONFIRMED"}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "CONFIRMED"

    response = await client.patch(f"/api/v1/appointments/{created['id']}", json={"notes": "x"})
    assert response.status_code == 400
    assert "Cannot edit" in response.json()["detail"]


async def test_status_change_unknown_appointment_is_404(client):
    response = await client.patch(
        f"/api/v1/appointments/{uuid.uuid4()}/status", json={"status": "COMPLETED"}
    )
    assert response.status_code == 404


async def test_status_change_rejects_unknown_status(client, world):
    created = (await client.post("/api/v1/appointments", json=_body(world))).json()
    response = await client.patch(
        f"/api/v1/appointments/{created['id']}/status", json={"status": "NO_SHOW"}
    )
    assert response.status_code == 422


async def test_agenda_listing(client, world):
    await client.post("/api/v1/appointments", json=_body(world))
    await client.post("/api/v1/appointments", json=_body(world, date="2026-10-21"))

    response = await client.get("/api/v1/appointments", params={"start_date": "2026-10-20"})
    assert response.status_code == 200
    assert [a["date"] for a in response.json()] == ["2026-10-20"]

    response = await client.get(
        "/api/v1/appointments",
        params={"start_date": "2026-10-20", "end_date": "2026-10-21", "professional_id": str(world.professional_id)},
    )
    assert len(response.json()) == 2


async def test_patients_are_scoped_to_clinic(client, world):
    response = await client.get("/api/v1/appointments/patients")
    assert response.status_code == 200
    assert response.json() == [{"id": str(world.patient_id), "name": "Carla Dias"}]


async def test_appointment_types(client, world):
    response = await client.get("/api/v1/appointments/types")
    assert response.status_code == 200
    assert response.json() == [{"id": str(world.appointment_type_id), "name": "Consulta"}]


async def test_treatment_plans_for_patient(client, world):
    response = await client.get(f"/api/v1/appointments/treatment-plans/patient/{world.patient_id}")
    assert response.status_code == 200
    plans = response.json()
    assert len(plans) == 1
    assert plans[0]["id"] == str(world.treatment_plan_id)
    assert plans[0]["procedures"] == [
        {
            "id": str(world.plan_procedure_id),
            "procedure_id": str(world.procedure_id),
            "procedure_name": "Limpeza de pele",
            "contracted_sessions": 3,
            "completed_sessions": 0,
        }
    ]

    response = await client.get(
        f"/api/v1/appointments/treatment-plans/patient/{world.other_clinic_patient_id}"
    )
    assert response.json() == []


async def test_availability_endpoint(client, world):
    await client.post("/api/v1/appointments", json=_body(world))
    response = await client.get(
        f"/api/v1/professionals/{world.professional_id}/availability", params={"date": "2026-10-20"}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["date"] == "2026-10-20"
    assert payload["slots"][1] == {"start_time": "09:00", "end_time": "10:00", "available": False}
    assert payload["slots"][0]["available"] is True


async def test_professionals_listing_is_scoped_to_clinic(client, world):
    response = await client.get("/api/v1/professionals")
    assert response.status_code == 200
    payload = response.json()
    assert [p["full_name"] for p in payload] == ["Dr. Bruno Lima", "Dra. Ana Souza"]
    ana = payload[1]
    assert ana["id"] == str(world.professional_id)
    assert ana["working_days"] == ["MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY"]
    assert ana["schedule_start_hour"] == "08:00"
    assert ana["schedule_end_hour"] == "18:00"
    assert ana["appointment_duration"] == 60
    assert str(world.other_clinic_professional_id) not in {p["id"] for p in payload}


async def test_professional_of_another_clinic_is_404(client, world):
    response = await client.post(
        "/api/v1/appointments",
        json=_body(world, professional_id=str(world.other_clinic_professional_id)),
    )
    assert response.status_code == 404
    response = await client.get(
        f"/api/v1/professionals/{world.other_clinic_professional_id}/availability",
        params={"date": "2026-10-20"},
    )
    assert response.status_code == 404
