from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.db.models import Clinic

class ClinicService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_clinics(self, active_only: bool = True, skip: int = 0, limit: int = 100) -> List[Clinic]:
        query = select(Clinic)
        if active_only:
            query = query.where(Clinic.is_active == True)
        query = query.order_by(Clinic.clinic_name).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return result.scalars().all()
