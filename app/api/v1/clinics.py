from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session
from app.schemas.common import ApiResponse
from app.services.clinic_service import ClinicService

router = APIRouter()

@router.get("", response_model=ApiResponse, response_model_exclude_none=True)
async def read_clinics(
    skip: int = 0,
    limit: int = 100,
    session: AsyncSession = Depends(get_session)
):
    service = ClinicService(session)
    clinics = await service.get_clinics(skip=skip, limit=limit)
    return ApiResponse(count=len(clinics), data=[clinic.model_dump() for clinic in clinics])
