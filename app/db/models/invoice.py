from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

class Invoice(SQLModel, table=True):
    __tablename__ = "invoices"
    invoice_id: Optional[int] = Field(default=None, primary_key=True)
    patient_id: int = Field(foreign_key="patients.patient_id")
    appointment_id: Optional[int] = Field(default=None, foreign_key="appointments.appointment_id")
    amount: float = Field(default=0)
    status: str = Field(default="pending", max_length=20) # pending, paid, cancelled
    created_at: datetime = Field(default_factory=datetime.utcnow)
