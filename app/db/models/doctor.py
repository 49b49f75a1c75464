from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, time

class Doctor(SQLModel, table=True):
    __tablename__ = "doctors"
    doctor_id: Optional[int] = Field(default=None, primary_key=True)
    # One profile per identity
    user_id: int = Field(foreign_key="users.user_id", unique=True)
    clinic_id: int = Field(foreign_key="clinics.clinic_id")
    specialization: str = Field(max_length=100)
    license_number: str = Field(unique=True, max_length=50)
    qualifications: Optional[str] = None
    experience_years: int = Field(default=0)
    consultation_fee: float = Field(default=0)
    is_available: bool = Field(default=True)
    available_from: Optional[time] = None
    available_to: Optional[time] = None
    max_patients_per_day: int = Field(default=20)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
