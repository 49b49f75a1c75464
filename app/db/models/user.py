from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime

class User(SQLModel, table=True):
    __tablename__ = "users"
    user_id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True, max_length=100)
    password_hash: str
    email: str = Field(unique=True, index=True, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=30)
    user_type: str = Field(max_length=20) # doctor, patient, staff, admin
    full_name: str = Field(max_length=200)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(default=None, max_length=10)
    address: Optional[str] = None
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
