from pydantic import Field
from datetime import date, time

from app.schemas.common import CamelModel

class AppointmentCreate(CamelModel):
    patient_id: int
    doctor_id: int
    clinic_id: int = 1
    appointment_date: date
    appointment_time: time
    symptoms: str = ""
    fee: float = Field(default=0, ge=0)
    appointment_type: str = Field(default="consultation", max_length=30)
