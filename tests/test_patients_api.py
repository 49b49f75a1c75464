import pytest

from app.db.models import Patient, User

OMAR = {
    "firstName": "Omar",
    "lastName": "Haddad",
    "email": "omar.haddad@example.com",
    "phone": "0551111111",
    "dateOfBirth": "1985-04-12",
    "gender": "male",
    "bloodType": "A+",
    "allergies": "penicillin",
}


async def create_patient(client, **overrides):
    response = await client.post("/api/patients", json={**OMAR, **overrides})
    assert response.status_code == 200, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_patient_then_read_it_back(client):
    data = await create_patient(client)
    assert data["fullName"] == "Omar Haddad"
    assert data["patientId"]
    assert data["identityId"]

    response = await client.get(f"/api/patients/{data['patientId']}")
    assert response.status_code == 200
    patient = response.json()["data"]
    assert patient["full_name"] == "Omar Haddad"
    assert patient["blood_type"] == "A+"
    assert patient["date_of_birth"] == "1985-04-12"
    assert patient["registration_date"]


@pytest.mark.asyncio
async def test_duplicate_patient_email_is_rejected(client, row_count):
    await create_patient(client)

    response = await client.post("/api/patients", json=OMAR)
    assert response.status_code == 500
    assert response.json()["success"] is False
    assert await row_count(User) == 1
    assert await row_count(Patient) == 1


@pytest.mark.asyncio
async def test_create_patient_rejects_bad_email(client, row_count):
    response = await client.post("/api/patients", json={**OMAR, "email": "not-an-email"})
    assert response.status_code == 422
    assert response.json()["success"] is False
    assert await row_count(User) == 0


@pytest.mark.asyncio
async def test_list_patients_ordered_by_name(client):
    await create_patient(client)
    await create_patient(client, firstName="Hana", lastName="Aziz", email="hana@example.com")

    response = await client.get("/api/patients")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert [p["full_name"] for p in body["data"]] == ["Hana Aziz", "Omar Haddad"]


@pytest.mark.asyncio
async def test_get_missing_patient_is_404(client):
    response = await client.get("/api/patients/999")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Patient not found"}


@pytest.mark.asyncio
async def test_delete_patient_removes_identity_too(client, row_count):
    data = await create_patient(client)

    response = await client.delete(f"/api/patients/{data['patientId']}")
    assert response.status_code == 200
    assert await row_count(Patient) == 0
    assert await row_count(User) == 0

    response = await client.delete(f"/api/patients/{data['patientId']}")
    assert response.status_code == 404
