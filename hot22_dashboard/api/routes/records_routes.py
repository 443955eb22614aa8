"""
Record API routes.
Handles paginated browsing of parsed HOT22 records and backend statistics.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from hot22_dashboard.core.dependencies import get_dashboard_service
from hot22_dashboard.models.dto.dashboard_dto import RecordPageResponse, StatsSummaryResponse
from hot22_dashboard.models.query import SortDirection
from hot22_dashboard.services.dashboard_service import DashboardService

router = APIRouter(prefix="/v1/api")


@router.get("/records/{record_type}", tags=["Records"], response_model=RecordPageResponse)
async def get_records(
    record_type: str,
    page: int = Query(default=1, ge=1, description="1-based page number"),
    limit: Optional[int] = Query(default=None, ge=1, le=1000, description="Records per page"),
    sort_by: Optional[str] = Query(default=None, description="Field to sort by"),
    sort_order: Optional[SortDirection] = Query(default=None, description="asc or desc"),
    search: Optional[str] = Query(default=None, description="Free-text search"),
    agent_code: Optional[str] = Query(default=None, description="Issuing office"),
    start_date: Optional[str] = Query(default=None, description="Earliest issue date"),
    end_date: Optional[str] = Query(default=None, description="Latest issue date"),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    """
    Retrieve one page of records of a HOT22 record type.

    - **page**: Page number (default 1)
    - **limit**: Records per page (default from settings, max 1000)
    - **sort_by** / **sort_order**: Sorting
    - **search**, **agent_code**, **start_date**, **end_date**: Filters
    """
    filters = {
        "search": search,
        "agentCode": agent_code,
        "startDate": start_date,
        "endDate": end_date,
    }
    return await dashboard_service.get_records_page(
        record_type.upper(),
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        filters=filters
    )


@router.delete("/records", tags=["Records"])
async def delete_all_records(dashboard_service: DashboardService = Depends(get_dashboard_service)):
    """Delete every parsed record from the backend."""
    ok = await dashboard_service.delete_all_records()
    return {"ok": ok}


@router.get("/stats", tags=["Records"], response_model=StatsSummaryResponse)
async def get_stats(dashboard_service: DashboardService = Depends(get_dashboard_service)):
    """Record counts per collection."""
    return await dashboard_service.get_stats()
