"""
Data Transfer Objects for the dashboard API.
Defines response schemas for the records, upload and history endpoints.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from hot22_dashboard.models.history_entry import HistoryEntry
from hot22_dashboard.models.page_window import PageWindow
from hot22_dashboard.models.record_errors import ErrorGroup
from hot22_dashboard.models.upload_job import UploadJob, UploadState


class PageWindowResponse(BaseModel):
    """Response schema for the page-number window."""
    current_page: int
    total_pages: int
    page_numbers: List[int]
    start_index: int
    end_index: int
    has_next: bool
    has_prev: bool
    page_size: int
    total_items: int
    is_first_page: bool
    is_last_page: bool
    items_on_current_page: int
    text: str

    @classmethod
    def from_window(cls, window: PageWindow, text: str) -> "PageWindowResponse":
        return cls(
            current_page=window.current_page,
            total_pages=window.total_pages,
            page_numbers=list(window.page_numbers),
            start_index=window.start_index,
            end_index=window.end_index,
            has_next=window.has_next,
            has_prev=window.has_prev,
            page_size=window.page_size,
            total_items=window.total_items,
            is_first_page=window.is_first_page,
            is_last_page=window.is_last_page,
            items_on_current_page=window.items_on_current_page,
            text=text
        )


class RecordPageResponse(BaseModel):
    """Response schema for one page of records."""
    record_type: str
    record_type_label: str
    records: List[Dict[str, Any]]
    window: PageWindowResponse
    filters: Dict[str, Any] = Field(default_factory=dict)
    active_filter_count: int = 0
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None


class ValidationErrorResponse(BaseModel):
    line_number: int
    message: str
    raw_line: str = ""
    details: Optional[Dict[str, Any]] = None


class ErrorGroupResponse(BaseModel):
    """Response schema for the errors of one record type."""
    record_type: str
    total_errors: int
    validation_errors: List[ValidationErrorResponse]
    save_errors: List[str]

    @classmethod
    def from_group(cls, group: ErrorGroup) -> "ErrorGroupResponse":
        return cls(
            record_type=group.record_type,
            total_errors=group.total_errors,
            validation_errors=[
                ValidationErrorResponse(
                    line_number=error.line_number,
                    message=error.message,
                    raw_line=error.raw_line,
                    details=error.details
                )
                for error in group.validation_errors
            ],
            save_errors=list(group.save_errors)
        )


class ErrorLogGroupResponse(ErrorGroupResponse):
    """Errors of one record type as stored, with the backend's own count and page."""
    stored_errors: int = 0
    pagination: Optional[Dict[str, Any]] = None


class UploadErrorLogResponse(BaseModel):
    """Response schema for the stored error log of one upload."""
    upload_id: str
    filename: str
    total_processed: int
    total_errors: int
    validation_errors: int
    save_errors: int
    severity: str
    groups: List[ErrorLogGroupResponse]


class RecordTypeCountResponse(BaseModel):
    processed: int
    saved: int
    errors: int


class ProcessingResultResponse(BaseModel):
    total_processed: int
    total_saved: int
    total_errors: int
    processing_time_ms: int
    record_type_counts: Dict[str, RecordTypeCountResponse]
    severity: str


class ErrorInfoResponse(BaseModel):
    kind: str
    message: str
    status_code: Optional[int] = None


class UploadJobResponse(BaseModel):
    """Response schema for the upload pipeline state."""
    state: UploadState
    job_id: Optional[str] = None
    filename: Optional[str] = None
    size: Optional[int] = None
    progress: int = 0
    result: Optional[ProcessingResultResponse] = None
    error: Optional[ErrorInfoResponse] = None
    errors_by_type: List[ErrorGroupResponse] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @classmethod
    def from_job(cls, state: UploadState, job: Optional[UploadJob], severity: Optional[str] = None) -> "UploadJobResponse":
        if job is None:
            return cls(state=state)

        result = None
        if job.result is not None:
            result = ProcessingResultResponse(
                total_processed=job.result.total_processed,
                total_saved=job.result.total_saved,
                total_errors=job.result.total_errors,
                processing_time_ms=job.result.processing_time_ms,
                record_type_counts={
                    record_type: RecordTypeCountResponse(
                        processed=counts.processed, saved=counts.saved, errors=counts.errors
                    )
                    for record_type, counts in job.result.record_type_counts.items()
                },
                severity=severity or "unknown"
            )

        error = None
        if job.error is not None:
            error = ErrorInfoResponse(
                kind=job.error.kind.value, message=job.error.message, status_code=job.error.status_code
            )

        return cls(
            state=state,
            job_id=job.id,
            filename=job.file.name,
            size=job.file.size,
            progress=job.progress,
            result=result,
            error=error,
            errors_by_type=[ErrorGroupResponse.from_group(group) for group in job.error_groups],
            started_at=job.started_at,
            finished_at=job.finished_at
        )


class HistoryEntryResponse(BaseModel):
    """Response schema for one upload history entry."""
    id: str
    filename: str
    timestamp: str
    status: str
    record_count: int
    processing_time_ms: int

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryEntryResponse":
        return cls(
            id=entry.id,
            filename=entry.filename,
            timestamp=entry.timestamp,
            status=entry.status.value,
            record_count=entry.record_count,
            processing_time_ms=entry.processing_time_ms
        )


class HistoryListResponse(BaseModel):
    entries: List[HistoryEntryResponse]
    count: int
    max_history_size: int


class NotificationResponse(BaseModel):
    id: str
    level: str
    message: str
    created_at: str


class StatsSummaryResponse(BaseModel):
    total_records: int
    statistics: Dict[str, int]
