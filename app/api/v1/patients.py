from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_registration_service
from app.db.session import get_session
from app.schemas.common import ApiResponse
from app.schemas.patient import PatientCreate
from app.services.patient_service import PatientService
from app.services.registration_service import RegistrationService

router = APIRouter()

async def get_patient_service(session: AsyncSession = Depends(get_session)) -> PatientService:
    return PatientService(session)

@router.get("", response_model=ApiResponse, response_model_exclude_none=True)
async def read_patients(service: PatientService = Depends(get_patient_service)):
    patients = await service.get_patients()
    return ApiResponse(count=len(patients), data=patients)

@router.get("/{patient_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def read_patient(patient_id: int, service: PatientService = Depends(get_patient_service)):
    return ApiResponse(data=await service.get_patient(patient_id))

@router.post("", response_model=ApiResponse, response_model_exclude_none=True)
async def create_patient(
    payload: PatientCreate,
    registrar: RegistrationService = Depends(get_registration_service),
):
    result = await registrar.register(payload.identity(), payload.profile_fields(), role="patient")
    return ApiResponse(
        message="Patient added successfully",
        data={
            "identityId": result.identity_id,
            "patientId": result.profile_id,
            "fullName": result.full_name,
            "email": result.email,
            "phone": result.phone,
            "bloodType": payload.blood_type,
        },
    )

@router.delete("/{patient_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def delete_patient(patient_id: int, service: PatientService = Depends(get_patient_service)):
    await service.delete_patient(patient_id)
    return ApiResponse(message="Patient deleted successfully")
