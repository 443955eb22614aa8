"""
Shared test fixtures and utilities.
"""
import pytest
from unittest.mock import AsyncMock

from hot22_dashboard.models.dto.hot22_dto import (
    DeleteResponse,
    HealthResponse,
    RecordListResponse,
    StatsResponse,
    UploadErrorsResponse,
    UploadResponse,
)
from hot22_dashboard.repositories.api_repository import Hot22ApiRepository

MB = 1024 * 1024


def make_upload_response(total_processed=100, total_saved=95, total_errors=5, errors_by_type=None):
    """Backend upload payload in its camelCase wire shape."""
    payload = {
        "results": {
            "summary": {
                "totalProcessed": total_processed,
                "totalSaved": total_saved,
                "totalErrors": total_errors,
                "processingTime": 1250,
                "recordTypes": {
                    "BKS24": {"processed": 60, "saved": 57, "errors": 3},
                    "BAR65": {"processed": 40, "saved": 38, "errors": 2},
                },
            }
        }
    }
    if errors_by_type is not None:
        payload["results"]["errorsByType"] = errors_by_type
    return UploadResponse.model_validate(payload)


def make_record_page(records, current_page=1, total_records=0, limit=50):
    total_pages = -(-total_records // limit) if total_records else 0
    return RecordListResponse.model_validate({
        "data": records,
        "pagination": {
            "currentPage": current_page,
            "totalPages": total_pages,
            "totalRecords": total_records,
            "hasNextPage": current_page < total_pages,
            "hasPrevPage": current_page > 1,
            "limit": limit,
        },
    })


def make_error_log(upload_id="upl-1", total_processed=200, errors_by_type=None):
    """Stored error log payload as returned by the backend."""
    if errors_by_type is None:
        errors_by_type = {
            "BKS24": {
                "totalErrors": 12,
                "validationErrors": [
                    {"lineNumber": 4, "message": "Invalid ticket number", "rawLine": "BKS24..."},
                    {"lineNumber": 9, "message": "Missing agent code", "rawLine": "BKS24..."},
                ],
                "saveErrors": [],
                "pagination": {"page": 1, "limit": 20, "total": 12},
            },
            "BAR65": {
                "totalErrors": 1,
                "validationErrors": [],
                "saveErrors": [{"message": "Duplicate key"}],
            },
        }
    return UploadErrorsResponse.model_validate({
        "data": {
            "uploadId": upload_id,
            "fileName": "hot22_march.txt",
            "totalProcessed": total_processed,
            "totalErrors": sum(group.get("totalErrors", 0) for group in errors_by_type.values()),
            "errorsByType": errors_by_type,
        }
    })


@pytest.fixture
def mock_api_repo():
    """Hot22ApiRepository with async mocked methods."""
    repo = AsyncMock(spec=Hot22ApiRepository)
    repo.list_records.return_value = make_record_page([], total_records=0)
    repo.upload_file.return_value = make_upload_response()
    repo.get_stats.return_value = StatsResponse(total_records=0, statistics={})
    repo.delete_all_records.return_value = DeleteResponse(ok=True)
    repo.check_health.return_value = HealthResponse(status="healthy", uptime_seconds=10)
    repo.get_upload_errors.return_value = make_error_log()
    return repo
