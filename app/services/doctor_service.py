from datetime import datetime
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import or_, select

from app.core.exceptions import ClinicError, DuplicateIdentityError, NotFoundError
from app.core.logger import logger
from app.core.utils import build_full_name, like_pattern
from app.db.models import Clinic, Doctor, User
from app.schemas.doctor import DoctorUpdate

LIST_COLUMNS = (
    Doctor.doctor_id,
    User.full_name,
    User.email,
    User.phone,
    Doctor.specialization,
    Doctor.license_number,
    Doctor.experience_years,
    Doctor.consultation_fee,
    Doctor.is_available,
    Doctor.qualifications,
    Doctor.available_from,
    Doctor.available_to,
    Clinic.clinic_name,
    Clinic.clinic_id,
)

DETAIL_COLUMNS = LIST_COLUMNS + (
    User.date_of_birth,
    User.gender,
    User.address,
    Doctor.max_patients_per_day,
)

SEARCH_COLUMNS = (
    Doctor.doctor_id,
    User.full_name,
    User.email,
    User.phone,
    Doctor.specialization,
    Doctor.license_number,
    Doctor.is_available,
    Clinic.clinic_name,
)

IDENTITY_FIELDS = {"email", "phone"}


def _doctor_query(*columns):
    return (
        select(*columns)
        .join(User, Doctor.user_id == User.user_id)
        .join(Clinic, Doctor.clinic_id == Clinic.clinic_id)
    )


class DoctorService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_doctors(self) -> List[dict]:
        stmt = _doctor_query(*LIST_COLUMNS).order_by(User.full_name)
        result = await self.session.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def get_doctor(self, doctor_id: int) -> dict:
        stmt = _doctor_query(*DETAIL_COLUMNS).where(Doctor.doctor_id == doctor_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if not row:
            raise NotFoundError("Doctor not found", doctor_id=doctor_id)
        return dict(row)

    async def search_doctors(self, term: str, limit: int = 20) -> List[dict]:
        pattern = like_pattern(term)
        stmt = (
            _doctor_query(*SEARCH_COLUMNS)
            .where(
                or_(
                    User.full_name.ilike(pattern, escape="\\"),
                    Doctor.specialization.ilike(pattern, escape="\\"),
                    Clinic.clinic_name.ilike(pattern, escape="\\"),
                )
            )
            .order_by(User.full_name)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def _load(self, doctor_id: int) -> tuple[Doctor, User]:
        doctor = await self.session.get(Doctor, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found", doctor_id=doctor_id)
        user = await self.session.get(User, doctor.user_id)
        return doctor, user

    async def update_doctor(self, doctor_id: int, doctor_update: DoctorUpdate) -> dict:
        doctor, user = await self._load(doctor_id)

        update_data = doctor_update.model_dump(exclude_unset=True)
        first_name = update_data.pop("first_name", None)
        last_name = update_data.pop("last_name", None)
        now = datetime.utcnow()

        if first_name is not None and last_name is not None:
            user.full_name = build_full_name(first_name, last_name)
        for key in IDENTITY_FIELDS & update_data.keys():
            setattr(user, key, update_data.pop(key))
        user.updated_at = now

        for key, value in update_data.items():
            setattr(doctor, key, value)
        doctor.updated_at = now

        # Identity and profile change together or not at all
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.error(
                f"Update of doctor {doctor_id} rolled back: {exc.orig}",
                extra={"doctor_id": doctor_id, "sql": exc.statement},
            )
            if "email" in str(exc.orig).lower():
                raise DuplicateIdentityError(role="doctor", field="email") from exc
            raise ClinicError("Could not update doctor", doctor_id=doctor_id) from exc

        logger.info(f"Updated doctor: {user.full_name}", extra={"doctor_id": doctor_id})
        return {
            "doctorId": doctor.doctor_id,
            "identityId": user.user_id,
            "fullName": user.full_name,
            "email": user.email,
            "phone": user.phone,
            "specialization": doctor.specialization,
        }

    async def delete_doctor(self, doctor_id: int) -> None:
        doctor, user = await self._load(doctor_id)

        # Profile first, then its identity, in one transaction
        try:
            await self.session.delete(doctor)
            await self.session.flush()
            if user is not None:
                await self.session.delete(user)
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.error(
                f"Delete of doctor {doctor_id} rolled back: {exc.orig}",
                extra={"doctor_id": doctor_id, "sql": exc.statement},
            )
            raise ClinicError("Doctor still has related records and cannot be deleted", doctor_id=doctor_id) from exc

        logger.info(f"Deleted doctor {doctor_id}", extra={"doctor_id": doctor_id})
