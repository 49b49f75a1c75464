from pydantic import Field
from datetime import date
from typing import Optional

from app.schemas.common import CamelModel

class IdentityCreate(CamelModel):
    """Shared person attributes written to the users table."""
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=200, pattern=r"^[^@\s]*@[^@\s]+$")
    phone: Optional[str] = Field(default=None, max_length=30)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(default=None, max_length=10)
    address: Optional[str] = None
