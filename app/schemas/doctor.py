from pydantic import Field, model_validator
from typing import Optional
from datetime import time

from app.schemas.common import CamelModel
from app.schemas.user import IdentityCreate

class DoctorCreate(IdentityCreate):
    specialization: str = Field(min_length=1, max_length=100)
    license_number: str = Field(min_length=1, max_length=50)
    qualifications: str = ""
    experience_years: int = Field(default=0, ge=0)
    consultation_fee: float = Field(default=0, ge=0)
    clinic_id: int = 1
    is_available: bool = False
    available_from: Optional[time] = None
    available_to: Optional[time] = None

    def identity(self) -> IdentityCreate:
        return IdentityCreate.model_validate(self.model_dump(include=set(IdentityCreate.model_fields)))

    def profile_fields(self) -> dict:
        return self.model_dump(exclude=set(IdentityCreate.model_fields))

class DoctorUpdate(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, min_length=3, max_length=200, pattern=r"^[^@\s]*@[^@\s]+$")
    phone: Optional[str] = Field(default=None, max_length=30)
    specialization: Optional[str] = Field(default=None, min_length=1, max_length=100)
    license_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    qualifications: Optional[str] = None
    experience_years: Optional[int] = Field(default=None, ge=0)
    consultation_fee: Optional[float] = Field(default=None, ge=0)
    is_available: Optional[bool] = None

    @model_validator(mode="after")
    def check_name_pair(self):
        if (self.first_name is None) != (self.last_name is None):
            raise ValueError("firstName and lastName must be updated together")
        return self
