from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime, time

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    appointment_id: Optional[int] = Field(default=None, primary_key=True)
    patient_id: int = Field(foreign_key="patients.patient_id")
    doctor_id: int = Field(foreign_key="doctors.doctor_id")
    clinic_id: int = Field(foreign_key="clinics.clinic_id")
    appointment_date: date = Field(index=True)
    appointment_time: time
    status: str = Field(default="scheduled", max_length=20) # scheduled, completed, cancelled
    symptoms: Optional[str] = None
    fee: float = Field(default=0)
    appointment_type: str = Field(default="consultation", max_length=30)
    created_at: datetime = Field(default_factory=datetime.utcnow)
