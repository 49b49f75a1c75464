from fastapi import APIRouter, Depends, Query

from app.api.v1.doctors import get_doctor_service
from app.schemas.common import ApiResponse
from app.services.doctor_service import DoctorService

router = APIRouter()

@router.get("/doctors", response_model=ApiResponse, response_model_exclude_none=True)
async def search_doctors(
    q: str = Query("", max_length=100),
    service: DoctorService = Depends(get_doctor_service),
):
    doctors = await service.search_doctors(q)
    return ApiResponse(count=len(doctors), data=doctors)
