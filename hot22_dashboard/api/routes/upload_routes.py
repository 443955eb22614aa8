"""
Upload API routes.
Handles HOT22 file uploads, the current pipeline state and upload history.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from hot22_dashboard.core.dependencies import get_dashboard_service
from hot22_dashboard.models.dto.dashboard_dto import (
    HistoryListResponse,
    NotificationResponse,
    UploadErrorLogResponse,
    UploadJobResponse,
)
from hot22_dashboard.services.dashboard_service import DashboardService

router = APIRouter(prefix="/v1/api")


@router.post("/uploads", tags=["Uploads"], response_model=UploadJobResponse)
async def upload_hot22_file(
    file: UploadFile = File(..., description="HOT22 text file"),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    """
    Upload a HOT22 file and wait for the backend to process it.

    The file is checked for extension and size before it is sent on.
    A backend failure is reported in the returned job state.
    """
    size = file.size
    if size is None:
        file.file.seek(0, 2)
        size = file.file.tell()
    file.file.seek(0)

    return await dashboard_service.upload_file(file.file, file.filename, size, file.content_type)


@router.get("/uploads/current", tags=["Uploads"], response_model=UploadJobResponse)
async def get_current_upload(dashboard_service: DashboardService = Depends(get_dashboard_service)):
    """State of the upload pipeline."""
    return dashboard_service.current_upload()


@router.post("/uploads/reset", tags=["Uploads"], response_model=UploadJobResponse)
async def reset_upload(dashboard_service: DashboardService = Depends(get_dashboard_service)):
    """Clear a finished upload so a new one can start."""
    return dashboard_service.reset_upload()


@router.get("/uploads/history", tags=["Uploads"], response_model=HistoryListResponse)
async def get_upload_history(dashboard_service: DashboardService = Depends(get_dashboard_service)):
    """Most recent uploads first."""
    return dashboard_service.get_history()


@router.delete("/uploads/history", tags=["Uploads"], status_code=status.HTTP_204_NO_CONTENT)
async def clear_upload_history(dashboard_service: DashboardService = Depends(get_dashboard_service)):
    dashboard_service.clear_history()


@router.get("/uploads/{upload_id}/errors", tags=["Uploads"], response_model=UploadErrorLogResponse)
async def get_upload_errors(
    upload_id: str,
    record_type: Optional[str] = Query(default=None, description="Only errors of this record type"),
    page: int = Query(default=1, ge=1, description="Page of errors within each record type"),
    limit: int = Query(default=20, ge=1, le=1000, description="Errors per page"),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    """
    Retrieve the stored error log of a past upload.

    Errors are grouped by record type; severity is rated against the records processed.
    """
    return await dashboard_service.get_upload_errors(
        upload_id,
        record_type=record_type.upper() if record_type else None,
        page=page,
        limit=limit
    )


@router.get("/notifications", tags=["Notifications"], response_model=List[NotificationResponse])
async def get_notifications(dashboard_service: DashboardService = Depends(get_dashboard_service)):
    return dashboard_service.get_notifications()
