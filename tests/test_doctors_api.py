import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from app.db.models import Doctor, User
from app.db.session import get_pool
from app.main import app
from app.services.doctor_service import DoctorService

AMAL = {
    "firstName": "Amal",
    "lastName": "Said",
    "email": "a.said@example.com",
    "phone": "0550000000",
    "specialization": "Cardiology",
    "licenseNumber": "L123",
    "clinicId": 1,
}


async def create_doctor(client, **overrides):
    response = await client.post("/api/doctors", json={**AMAL, **overrides})
    assert response.status_code == 200, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_doctor_then_read_it_back(client):
    response = await client.post("/api/doctors", json=AMAL)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Doctor added successfully"
    assert body["data"]["fullName"] == "Amal Said"
    assert body["data"]["specialization"] == "Cardiology"

    doctor_id = body["data"]["doctorId"]
    response = await client.get(f"/api/doctors/{doctor_id}")
    assert response.status_code == 200
    doctor = response.json()["data"]
    assert doctor["specialization"] == "Cardiology"
    assert doctor["full_name"] == "Amal Said"
    assert doctor["clinic_name"] == "Central Clinic"


@pytest.mark.asyncio
async def test_create_doctor_applies_defaults(client, pool):
    data = await create_doctor(client)
    async with pool.lease() as lease:
        doctor = (await lease.connection.execute(
            select(Doctor).where(Doctor.doctor_id == data["doctorId"])
        )).one()
    assert doctor.qualifications == ""
    assert doctor.experience_years == 0
    assert doctor.consultation_fee == 0
    assert doctor.is_available is False


@pytest.mark.asyncio
async def test_duplicate_email_returns_error_envelope(client, pool):
    await create_doctor(client)

    response = await client.post("/api/doctors", json={**AMAL, "licenseNumber": "L999"})
    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "already exists" in body["error"]

    async with pool.lease() as lease:
        rows = (await lease.connection.execute(
            select(User.user_id).where(User.email == AMAL["email"])
        )).all()
    assert len(rows) == 1
    assert pool.in_use == 0


@pytest.mark.asyncio
async def test_create_doctor_unknown_clinic_fails_cleanly(client, row_count):
    response = await client.post("/api/doctors", json={**AMAL, "clinicId": 999})
    assert response.status_code == 500
    body = response.json()
    assert body == {"success": False, "error": "Could not register doctor"}
    assert await row_count(User) == 0


@pytest.mark.asyncio
async def test_create_doctor_rejects_missing_fields(client):
    response = await client.post("/api/doctors", json={"firstName": "Amal"})
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert "lastName" in body["error"] or "last_name" in body["error"]


@pytest.mark.asyncio
async def test_list_doctors(client):
    await create_doctor(client)
    await create_doctor(
        client, firstName="Bassam", lastName="Kareem", email="bassam@example.com", licenseNumber="L200"
    )

    response = await client.get("/api/doctors")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert [d["full_name"] for d in body["data"]] == ["Amal Said", "Bassam Kareem"]


@pytest.mark.asyncio
async def test_get_missing_doctor_is_404(client):
    response = await client.get("/api/doctors/12345")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Doctor not found"}


@pytest.mark.asyncio
async def test_update_doctor(client):
    data = await create_doctor(client)

    response = await client.put(
        f"/api/doctors/{data['doctorId']}",
        json={"firstName": "Amal", "lastName": "Saeed", "consultationFee": 150, "isAvailable": True},
    )
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["fullName"] == "Amal Saeed"

    doctor = (await client.get(f"/api/doctors/{data['doctorId']}")).json()["data"]
    assert doctor["full_name"] == "Amal Saeed"
    assert doctor["consultation_fee"] == 150
    assert doctor["is_available"] is True


@pytest.mark.asyncio
async def test_update_doctor_requires_both_names(client):
    data = await create_doctor(client)
    response = await client.put(f"/api/doctors/{data['doctorId']}", json={"firstName": "Only"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_doctor_to_taken_email_is_rejected(client):
    first = await create_doctor(client)
    await create_doctor(
        client, firstName="Bassam", lastName="Kareem", email="bassam@example.com", licenseNumber="L200"
    )

    response = await client.put(f"/api/doctors/{first['doctorId']}", json={"email": "bassam@example.com"})
    assert response.status_code == 500
    assert response.json()["success"] is False

    doctor = (await client.get(f"/api/doctors/{first['doctorId']}")).json()["data"]
    assert doctor["email"] == AMAL["email"]


@pytest.mark.asyncio
async def test_update_missing_doctor_is_404(client):
    response = await client.put("/api/doctors/777", json={"specialization": "Neurology"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_doctor_removes_identity_too(client, row_count):
    data = await create_doctor(client)

    response = await client.delete(f"/api/doctors/{data['doctorId']}")
    assert response.status_code == 200
    assert response.json()["message"] == "Doctor deleted successfully"
    assert await row_count(Doctor) == 0
    assert await row_count(User) == 0

    response = await client.delete(f"/api/doctors/{data['doctorId']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_search_doctors(client):
    await create_doctor(client)
    await create_doctor(
        client,
        firstName="Bassam",
        lastName="Kareem",
        email="bassam@example.com",
        licenseNumber="L200",
        specialization="Neurology",
    )

    response = await client.get("/api/search/doctors", params={"q": "cardio"})
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["data"][0]["full_name"] == "Amal Said"

    response = await client.get("/api/search/doctors", params={"q": "central"})
    assert response.json()["count"] == 2

    response = await client.get("/api/search/doctors", params={"q": "%"})
    assert response.json()["count"] == 0


@pytest.mark.asyncio
async def test_unexpected_error_uses_error_envelope(pool, monkeypatch):
    async def broken(self):
        raise OperationalError("SELECT", {}, Exception("server closed the connection unexpectedly"))

    monkeypatch.setattr(DoctorService, "get_doctors", broken)
    app.dependency_overrides[get_pool] = lambda: pool
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/api/doctors")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"success": False, "error": "An unexpected error occurred"}
    assert "server closed" not in response.text
    assert pool.in_use == 0
