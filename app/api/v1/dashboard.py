from fastapi import APIRouter, Depends

from app.api.deps import get_dashboard_service
from app.services.dashboard_service import DashboardService

router = APIRouter()

@router.get("/stats")
async def read_dashboard_stats(service: DashboardService = Depends(get_dashboard_service)):
    stats = await service.get_stats()
    return {"success": True, **stats}
