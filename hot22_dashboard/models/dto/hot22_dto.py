"""
Data Transfer Objects for the HOT22 backend API.
Parses the JSON payloads returned by the external parser/persistence service.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class BackendModel(BaseModel):
    """Backend payloads are camelCase and may carry extra keys."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PaginationInfo(BackendModel):
    current_page: int = Field(1, alias="currentPage")
    total_pages: int = Field(0, alias="totalPages")
    total_records: int = Field(0, alias="totalRecords")
    has_next_page: bool = Field(False, alias="hasNextPage")
    has_prev_page: bool = Field(False, alias="hasPrevPage")
    limit: int = 50


class RecordListResponse(BackendModel):
    data: List[Dict[str, Any]] = Field(default_factory=list)
    pagination: PaginationInfo = Field(default_factory=PaginationInfo)


class RecordTypeSummary(BackendModel):
    processed: int = 0
    saved: int = 0
    errors: int = 0


class UploadSummary(BackendModel):
    total_processed: int = Field(0, alias="totalProcessed")
    total_saved: int = Field(0, alias="totalSaved")
    total_errors: int = Field(0, alias="totalErrors")
    processing_time: int = Field(0, alias="processingTime")
    record_types: Dict[str, RecordTypeSummary] = Field(default_factory=dict, alias="recordTypes")


class RawValidationError(BackendModel):
    line_number: int = Field(0, alias="lineNumber")
    message: str = ""
    raw_line: str = Field("", alias="rawLine")
    details: Optional[Dict[str, Any]] = None


class RawErrorGroup(BackendModel):
    total_errors: int = Field(0, alias="totalErrors")
    validation_errors: List[RawValidationError] = Field(default_factory=list, alias="validationErrors")
    save_errors: List[Any] = Field(default_factory=list, alias="saveErrors")
    pagination: Optional[Dict[str, Any]] = None


class UploadResults(BackendModel):
    summary: UploadSummary = Field(default_factory=UploadSummary)
    errors_by_type: Optional[Dict[str, RawErrorGroup]] = Field(None, alias="errorsByType")


class UploadResponse(BackendModel):
    results: UploadResults = Field(default_factory=UploadResults)


class StatsResponse(BackendModel):
    total_records: int = Field(0, alias="totalRecords")
    collections: Any = None
    statistics: Dict[str, int] = Field(default_factory=dict)


class DeleteResponse(BackendModel):
    ok: bool = False


class HealthResponse(BackendModel):
    status: str = "healthy"
    uptime_seconds: float = Field(0, alias="uptimeSeconds")


class UploadErrorDetails(BackendModel):
    upload_id: str = Field("", alias="uploadId")
    file_name: str = Field("", alias="fileName")
    total_processed: int = Field(0, alias="totalProcessed")
    total_errors: int = Field(0, alias="totalErrors")
    errors_by_type: Dict[str, RawErrorGroup] = Field(default_factory=dict, alias="errorsByType")


class UploadErrorsResponse(BackendModel):
    """Error log of one upload, one page per record type."""
    data: UploadErrorDetails = Field(default_factory=UploadErrorDetails)
