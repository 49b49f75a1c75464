from pydantic import Field
from typing import Optional

from app.schemas.user import IdentityCreate

class PatientCreate(IdentityCreate):
    national_id: Optional[str] = Field(default=None, max_length=30)
    emergency_contact: Optional[str] = Field(default=None, max_length=100)
    blood_type: Optional[str] = Field(default=None, max_length=5)
    allergies: Optional[str] = None
    chronic_diseases: Optional[str] = None
    insurance_provider: Optional[str] = Field(default=None, max_length=100)
    insurance_number: Optional[str] = Field(default=None, max_length=50)

    def identity(self) -> IdentityCreate:
        return IdentityCreate.model_validate(self.model_dump(include=set(IdentityCreate.model_fields)))

    def profile_fields(self) -> dict:
        return self.model_dump(exclude=set(IdentityCreate.model_fields))
