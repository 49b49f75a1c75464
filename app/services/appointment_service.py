from datetime import date
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlmodel import select

from app.core.exceptions import ClinicError, NotFoundError
from app.core.logger import logger
from app.db.models import Appointment, Clinic, Doctor, Patient, User
from app.schemas.appointment import AppointmentCreate

class AppointmentService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_appointments_for_day(self, day: date) -> List[dict]:
        patient_user = aliased(User)
        doctor_user = aliased(User)
        stmt = (
            select(
                Appointment.appointment_id,
                patient_user.full_name.label("patient_name"),
                doctor_user.full_name.label("doctor_name"),
                Appointment.appointment_date,
                Appointment.appointment_time,
                Appointment.status,
                Appointment.symptoms,
                Appointment.fee,
                Appointment.appointment_type,
                Clinic.clinic_name,
            )
            .join(Patient, Appointment.patient_id == Patient.patient_id)
            .join(patient_user, Patient.user_id == patient_user.user_id)
            .join(Doctor, Appointment.doctor_id == Doctor.doctor_id)
            .join(doctor_user, Doctor.user_id == doctor_user.user_id)
            .join(Clinic, Appointment.clinic_id == Clinic.clinic_id)
            .where(Appointment.appointment_date == day)
            .order_by(Appointment.appointment_time)
        )
        result = await self.session.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def create_appointment(self, data: AppointmentCreate) -> Appointment:
        # 1. Validate references
        if not await self.session.get(Patient, data.patient_id):
            raise NotFoundError("Patient not found", patient_id=data.patient_id)
        if not await self.session.get(Doctor, data.doctor_id):
            raise NotFoundError("Doctor not found", doctor_id=data.doctor_id)
        if not await self.session.get(Clinic, data.clinic_id):
            raise NotFoundError("Clinic not found", clinic_id=data.clinic_id)

        # 2. Create Appointment
        appointment = Appointment(**data.model_dump(), status="scheduled")
        self.session.add(appointment)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.error(
                f"Could not create appointment: {exc.orig}",
                extra={"sql": exc.statement},
            )
            raise ClinicError("Could not create appointment") from exc
        await self.session.refresh(appointment)

        logger.info(f"Created appointment {appointment.appointment_id}")
        return appointment
