"""
Health check routes for monitoring.
"""
from fastapi import APIRouter, Depends
from hot22_dashboard.core.dependencies import get_dashboard_service
from hot22_dashboard.services.dashboard_service import DashboardService

router = APIRouter(prefix="/v1/api", tags=["Health"])


@router.get("/health")
async def health_check(dashboard_service: DashboardService = Depends(get_dashboard_service)):
    """Health check endpoint for monitoring, including the HOT22 backend."""
    return await dashboard_service.check_health()
