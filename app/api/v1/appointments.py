from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session
from app.schemas.appointment import AppointmentCreate
from app.schemas.common import ApiResponse
from app.services.appointment_service import AppointmentService

router = APIRouter()

async def get_appointment_service(session: AsyncSession = Depends(get_session)) -> AppointmentService:
    return AppointmentService(session)

@router.get("/today")
async def read_today_appointments(service: AppointmentService = Depends(get_appointment_service)):
    today = date.today()
    appointments = await service.get_appointments_for_day(today)
    return {
        "success": True,
        "date": today.isoformat(),
        "count": len(appointments),
        "data": appointments,
    }

@router.post("", response_model=ApiResponse, response_model_exclude_none=True)
async def create_appointment(
    payload: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = await service.create_appointment(payload)
    return ApiResponse(
        message="Appointment added successfully",
        data={
            "appointmentId": appointment.appointment_id,
            "appointmentDate": appointment.appointment_date,
            "appointmentTime": appointment.appointment_time,
        },
    )
