from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

class Clinic(SQLModel, table=True):
    __tablename__ = "clinics"
    clinic_id: Optional[int] = Field(default=None, primary_key=True)
    clinic_name: str = Field(max_length=200)
    address: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=30)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
