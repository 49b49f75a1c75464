from fastapi import Depends

from app.core.config import settings
from app.db.pool import ConnectionPool
from app.db.session import get_pool
from app.services.dashboard_service import DashboardService
from app.services.registration_service import RegistrationService

def get_registration_service(pool: ConnectionPool = Depends(get_pool)) -> RegistrationService:
    return RegistrationService(
        pool,
        default_password=settings.DEFAULT_PASSWORD,
        bcrypt_rounds=settings.BCRYPT_ROUNDS,
        transaction_timeout=settings.TRANSACTION_TIMEOUT,
    )

def get_dashboard_service(pool: ConnectionPool = Depends(get_pool)) -> DashboardService:
    return DashboardService(pool)
