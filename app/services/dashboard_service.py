import asyncio
from datetime import date, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import func, select

from app.core.exceptions import DatabaseConnectionError
from app.core.logger import logger
from app.db.models import Appointment, Clinic, Doctor, Invoice, Patient
from app.db.pool import ConnectionPool

class DashboardService:
    """Aggregate counters for the dashboard, one lease per query."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    def _queries(self, today: date) -> dict:
        return {
            "totalDoctors": select(func.count(Doctor.doctor_id)),
            "totalPatients": select(func.count(Patient.patient_id)),
            "totalAppointments": select(func.count(Appointment.appointment_id)),
            "todayAppointments": select(func.count(Appointment.appointment_id)).where(
                Appointment.appointment_date == today
            ),
            "activeClinics": select(func.count(Clinic.clinic_id)).where(Clinic.is_active == True),
            "pendingPayments": select(func.count(Invoice.invoice_id)).where(Invoice.status == "pending"),
        }

    async def _count(self, key: str, stmt) -> int:
        try:
            async with self.pool.lease() as lease:
                result = await lease.connection.execute(stmt)
                return result.scalar() or 0
        except (SQLAlchemyError, DatabaseConnectionError) as exc:
            logger.warning(f"Dashboard counter '{key}' failed, reporting 0: {exc}")
            return 0

    async def get_stats(self) -> dict:
        queries = self._queries(date.today())
        counts = await asyncio.gather(*(self._count(key, stmt) for key, stmt in queries.items()))
        return {
            "data": dict(zip(queries.keys(), counts)),
            "timestamp": datetime.now().isoformat(timespec="seconds"),
        }
