from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

class Patient(SQLModel, table=True):
    __tablename__ = "patients"
    patient_id: Optional[int] = Field(default=None, primary_key=True)
    # One profile per identity
    user_id: int = Field(foreign_key="users.user_id", unique=True)
    national_id: Optional[str] = Field(default=None, max_length=30)
    emergency_contact: Optional[str] = Field(default=None, max_length=100)
    blood_type: Optional[str] = Field(default=None, max_length=5)
    allergies: Optional[str] = None
    chronic_diseases: Optional[str] = None
    insurance_provider: Optional[str] = Field(default=None, max_length=100)
    insurance_number: Optional[str] = Field(default=None, max_length=50)
    created_at: datetime = Field(default_factory=datetime.utcnow)
