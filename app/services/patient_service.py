from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import func, select

from app.core.exceptions import ClinicError, NotFoundError
from app.core.logger import logger
from app.db.models import Patient, User

PATIENT_COLUMNS = (
    Patient.patient_id,
    User.full_name,
    User.email,
    User.phone,
    User.date_of_birth,
    User.gender,
    User.address,
    Patient.national_id,
    Patient.emergency_contact,
    Patient.blood_type,
    Patient.allergies,
    Patient.chronic_diseases,
    Patient.insurance_provider,
    Patient.insurance_number,
    func.date(Patient.created_at).label("registration_date"),
)

class PatientService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_patients(self, limit: int = 100) -> List[dict]:
        stmt = (
            select(*PATIENT_COLUMNS)
            .join(User, Patient.user_id == User.user_id)
            .order_by(User.full_name)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def get_patient(self, patient_id: int) -> dict:
        stmt = (
            select(*PATIENT_COLUMNS)
            .join(User, Patient.user_id == User.user_id)
            .where(Patient.patient_id == patient_id)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if not row:
            raise NotFoundError("Patient not found", patient_id=patient_id)
        return dict(row)

    async def delete_patient(self, patient_id: int) -> None:
        patient = await self.session.get(Patient, patient_id)
        if not patient:
            raise NotFoundError("Patient not found", patient_id=patient_id)
        user = await self.session.get(User, patient.user_id)

        try:
            await self.session.delete(patient)
            await self.session.flush()
            if user is not None:
                await self.session.delete(user)
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.error(
                f"Delete of patient {patient_id} rolled back: {exc.orig}",
                extra={"patient_id": patient_id, "sql": exc.statement},
            )
            raise ClinicError("Patient still has related records and cannot be deleted", patient_id=patient_id) from exc

        logger.info(f"Deleted patient {patient_id}", extra={"patient_id": patient_id})
