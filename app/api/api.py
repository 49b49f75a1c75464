from fastapi import APIRouter
from sqlalchemy.engine import make_url

from app.api.v1 import appointments, clinics, dashboard, doctors, patients, search
from app.core.config import settings

api_router = APIRouter()

@api_router.get("", include_in_schema=False)
async def api_index():
    return {
        "success": True,
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "database": make_url(settings.DATABASE_URL).database,
        "status": "running",
        "endpoints": {
            "doctors": f"{settings.API_PREFIX}/doctors",
            "patients": f"{settings.API_PREFIX}/patients",
            "appointments": f"{settings.API_PREFIX}/appointments/today",
            "dashboard": f"{settings.API_PREFIX}/dashboard/stats",
            "search": f"{settings.API_PREFIX}/search/doctors?q=",
            "clinics": f"{settings.API_PREFIX}/clinics",
        },
    }

api_router.include_router(clinics.router, prefix="/clinics", tags=["clinics"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["doctors"])
api_router.include_router(patients.router, prefix="/patients", tags=["patients"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(search.router, prefix="/search", tags=["search"])
