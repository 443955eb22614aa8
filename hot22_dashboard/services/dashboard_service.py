"""
Dashboard Service for business logic.
Orchestrates record browsing, uploads and history between the API and the core components.
"""
from typing import BinaryIO, Dict, List, Optional

from hot22_dashboard.core import config
from hot22_dashboard.core.exceptions import RecordTypeNotFoundException, TransportException
from hot22_dashboard.core.logging_setup import get_logger
from hot22_dashboard.models.dto.dashboard_dto import (
    ErrorGroupResponse,
    ErrorLogGroupResponse,
    HistoryEntryResponse,
    HistoryListResponse,
    NotificationResponse,
    PageWindowResponse,
    RecordPageResponse,
    StatsSummaryResponse,
    UploadErrorLogResponse,
    UploadJobResponse,
)
from hot22_dashboard.models.query import Query
from hot22_dashboard.models.record_type import is_known_record_type, record_type_label
from hot22_dashboard.models.upload_job import FileDescriptor
from hot22_dashboard.repositories.api_repository import Hot22ApiRepository
from hot22_dashboard.services import error_aggregator, filter_coordinator, pagination_engine
from hot22_dashboard.services.history_ledger import HistoryLedger
from hot22_dashboard.services.notification_center import NotificationCenter, NotificationLevel
from hot22_dashboard.services.record_browser import RecordRequest, build_records_cache
from hot22_dashboard.services.request_cache import RequestCache
from hot22_dashboard.services.upload_pipeline import UploadPipeline

logger = get_logger(__name__)


class DashboardService:
    """Service for dashboard operations."""

    def __init__(
        self,
        api_repository: Hot22ApiRepository,
        history_ledger: HistoryLedger = None,
        notifications: NotificationCenter = None,
        records_cache: RequestCache = None,
        upload_pipeline: UploadPipeline = None
    ):
        self.api_repository = api_repository
        if history_ledger is None:
            history_ledger = HistoryLedger(config.settings.max_history_size)
        self.history_ledger = history_ledger
        if notifications is None:
            notifications = NotificationCenter(config.settings.max_notifications)
        self.notifications = notifications
        if records_cache is None:
            records_cache = build_records_cache(api_repository)
        self.records_cache = records_cache
        if upload_pipeline is None:
            upload_pipeline = UploadPipeline(
                api_repository,
                history_ledger=self.history_ledger,
                notifications=self.notifications,
                on_completed=lambda job: self.records_cache.invalidate()
            )
        self.upload_pipeline = upload_pipeline

    async def get_records_page(
        self,
        record_type: str,
        page: int = 1,
        limit: int = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        filters: Optional[Dict[str, str]] = None
    ) -> RecordPageResponse:
        """
        Fetch one page of records and compute its page window.

        Raises:
            RecordTypeNotFoundException: If the record type code is unknown
            TransportException: If the backend call fails
        """
        if not is_known_record_type(record_type):
            raise RecordTypeNotFoundException(f"Unknown record type '{record_type}'")

        query = Query(page_size=limit or config.settings.default_page_size)
        query = filter_coordinator.apply_filters(query, filters or {})
        if sort_by:
            query = filter_coordinator.set_sort(query, sort_by, sort_order or filter_coordinator.DEFAULT_SORT_DIRECTION)
        query = filter_coordinator.set_page(query, page)

        try:
            response = await self.records_cache.fetch(RecordRequest(record_type=record_type, query=query))
        except TransportException as e:
            self.notifications.notify(NotificationLevel.ERROR, e.message)
            raise

        window = pagination_engine.compute_window(
            response.pagination.total_records,
            query.page_size,
            query.page,
            config.settings.max_page_numbers
        )
        return RecordPageResponse(
            record_type=record_type,
            record_type_label=record_type_label(record_type),
            records=response.data,
            window=PageWindowResponse.from_window(window, pagination_engine.pagination_text(window)),
            filters=filter_coordinator.active_filters(query),
            active_filter_count=filter_coordinator.active_filter_count(query),
            sort_by=query.sort_key or None,
            sort_order=query.sort_direction.value if query.sort_key else None
        )

    async def get_stats(self) -> StatsSummaryResponse:
        stats = await self.api_repository.get_stats()
        return StatsSummaryResponse(total_records=stats.total_records, statistics=stats.statistics)

    async def delete_all_records(self) -> bool:
        """Delete every parsed record and drop cached pages."""
        result = await self.api_repository.delete_all_records()
        self.records_cache.invalidate()
        logger.info("records_deleted", ok=result.ok)
        self.notifications.notify(
            NotificationLevel.SUCCESS if result.ok else NotificationLevel.WARNING,
            "All records deleted" if result.ok else "Backend did not confirm deletion"
        )
        return result.ok

    async def get_upload_errors(
        self,
        upload_id: str,
        record_type: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> UploadErrorLogResponse:
        """
        Stored error log of a past upload, grouped by record type with its severity.

        Raises:
            RecordTypeNotFoundException: If the record type filter is unknown
            TransportException: If the backend call fails
        """
        if record_type is not None and not is_known_record_type(record_type):
            raise RecordTypeNotFoundException(f"Unknown record type '{record_type}'")

        response = await self.api_repository.get_upload_errors(upload_id, record_type, page, limit)
        details = response.data
        groups = error_aggregator.aggregate(details.errors_by_type)
        summary = error_aggregator.summarize(groups, details.total_processed)
        # One page per type is returned, so the stored count outranks what was counted here
        total_errors = details.total_errors or summary["total_errors"]

        return UploadErrorLogResponse(
            upload_id=details.upload_id or upload_id,
            filename=details.file_name,
            total_processed=details.total_processed,
            total_errors=total_errors,
            validation_errors=summary["validation_errors"],
            save_errors=summary["save_errors"],
            severity=error_aggregator.severity(total_errors, details.total_processed).value,
            groups=[
                ErrorLogGroupResponse(
                    **ErrorGroupResponse.from_group(group).model_dump(),
                    stored_errors=details.errors_by_type[group.record_type].total_errors or group.total_errors,
                    pagination=details.errors_by_type[group.record_type].pagination
                )
                for group in groups
            ]
        )

    async def check_health(self) -> Dict[str, object]:
        """BFF status plus backend status; an unreachable backend means degraded."""
        try:
            backend = await self.api_repository.check_health()
            backend_status = backend.status
            uptime_seconds = backend.uptime_seconds
        except TransportException as e:
            logger.warning("backend_unhealthy", message=e.message)
            backend_status = "unreachable"
            uptime_seconds = None

        return {
            "status": "healthy" if backend_status == "healthy" else "degraded",
            "service": config.settings.api_title,
            "version": config.settings.api_version,
            "backend": {"status": backend_status, "uptime_seconds": uptime_seconds}
        }

    async def upload_file(self, file: BinaryIO, filename: str, size: int, mime_hint: str = "text/plain") -> UploadJobResponse:
        """
        Run an upload through the pipeline.

        Raises:
            FileValidationException: If the file is rejected client-side
            UploadInProgressException: If another upload is running
            InvalidTransitionException: If the previous upload was not reset
        """
        descriptor = FileDescriptor(name=filename, size=size, mime_hint=mime_hint or "text/plain")
        await self.upload_pipeline.submit(descriptor, file)
        return self.current_upload()

    def current_upload(self) -> UploadJobResponse:
        job = self.upload_pipeline.job
        severity = None
        if job is not None and job.result is not None:
            severity = error_aggregator.severity(job.result.total_errors, job.result.total_processed).value
        return UploadJobResponse.from_job(self.upload_pipeline.state, job, severity)

    def reset_upload(self) -> UploadJobResponse:
        self.upload_pipeline.reset()
        return self.current_upload()

    def get_history(self) -> HistoryListResponse:
        entries = [HistoryEntryResponse.from_entry(entry) for entry in self.history_ledger.entries]
        return HistoryListResponse(
            entries=entries,
            count=len(entries),
            max_history_size=self.history_ledger.max_history_size
        )

    def clear_history(self) -> None:
        self.history_ledger.clear()

    def get_notifications(self) -> List[NotificationResponse]:
        return [
            NotificationResponse(
                id=notification.id,
                level=notification.level.value,
                message=notification.message,
                created_at=notification.created_at
            )
            for notification in self.notifications.notifications
        ]
