from sqlmodel import SQLModel
from .clinic import Clinic
from .user import User
from .doctor import Doctor
from .patient import Patient
from .appointment import Appointment
from .invoice import Invoice

__all__ = [
    "SQLModel",
    "Clinic",
    "User",
    "Doctor",
    "Patient",
    "Appointment",
    "Invoice",
]
