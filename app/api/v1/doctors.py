from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_registration_service
from app.db.session import get_session
from app.schemas.common import ApiResponse
from app.schemas.doctor import DoctorCreate, DoctorUpdate
from app.services.doctor_service import DoctorService
from app.services.registration_service import RegistrationService

router = APIRouter()

async def get_doctor_service(session: AsyncSession = Depends(get_session)) -> DoctorService:
    return DoctorService(session)

@router.get("", response_model=ApiResponse, response_model_exclude_none=True)
async def read_doctors(service: DoctorService = Depends(get_doctor_service)):
    doctors = await service.get_doctors()
    return ApiResponse(count=len(doctors), data=doctors)

@router.get("/{doctor_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def read_doctor(doctor_id: int, service: DoctorService = Depends(get_doctor_service)):
    return ApiResponse(data=await service.get_doctor(doctor_id))

@router.post("", response_model=ApiResponse, response_model_exclude_none=True)
async def create_doctor(
    payload: DoctorCreate,
    registrar: RegistrationService = Depends(get_registration_service),
):
    result = await registrar.register(payload.identity(), payload.profile_fields(), role="doctor")
    return ApiResponse(
        message="Doctor added successfully",
        data={
            "identityId": result.identity_id,
            "doctorId": result.profile_id,
            "fullName": result.full_name,
            "email": result.email,
            "phone": result.phone,
            "specialization": payload.specialization,
            "licenseNumber": payload.license_number,
            "clinicId": payload.clinic_id,
        },
    )

@router.put("/{doctor_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def update_doctor(
    doctor_id: int,
    payload: DoctorUpdate,
    service: DoctorService = Depends(get_doctor_service),
):
    data = await service.update_doctor(doctor_id, payload)
    return ApiResponse(message="Doctor updated successfully", data=data)

@router.delete("/{doctor_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def delete_doctor(doctor_id: int, service: DoctorService = Depends(get_doctor_service)):
    await service.delete_doctor(doctor_id)
    return ApiResponse(message="Doctor deleted successfully")
