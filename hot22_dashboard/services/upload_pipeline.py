"""
Upload pipeline.
State machine driving one HOT22 file through validation, transfer,
server-side processing and result aggregation.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO, Callable, List, Optional

from hot22_dashboard.core import config
from hot22_dashboard.core.exceptions import (
    DynamoDBException,
    FileValidationException,
    InvalidTransitionException,
    TransportException,
    UploadInProgressException,
)
from hot22_dashboard.core.logging_setup import get_logger
from hot22_dashboard.models.dto.hot22_dto import UploadResponse
from hot22_dashboard.models.history_entry import HistoryStatus
from hot22_dashboard.models.record_errors import TransportError
from hot22_dashboard.models.upload_job import (
    FileDescriptor,
    ProcessingResult,
    RecordTypeCount,
    UploadJob,
    UploadState,
)
from hot22_dashboard.repositories.api_repository import Hot22ApiRepository
from hot22_dashboard.services import error_aggregator
from hot22_dashboard.services.history_ledger import HistoryLedger
from hot22_dashboard.services.notification_center import NotificationCenter, NotificationLevel

logger = get_logger(__name__)

ALLOWED_TRANSITIONS = {
    UploadState.IDLE: {UploadState.VALIDATING},
    UploadState.VALIDATING: {UploadState.VALIDATING, UploadState.IDLE, UploadState.UPLOADING},
    UploadState.UPLOADING: {UploadState.PROCESSING, UploadState.FAILED},
    UploadState.PROCESSING: {UploadState.COMPLETED, UploadState.FAILED},
    UploadState.COMPLETED: {UploadState.IDLE},
    UploadState.FAILED: {UploadState.IDLE},
}


@dataclass(frozen=True)
class PipelineEvent:
    """Emitted on every state change and every progress change."""
    state: UploadState
    progress: int
    job: Optional[UploadJob]


Listener = Callable[[PipelineEvent], None]


class UploadPipeline:
    """Sole owner of the current upload job; at most one job is active."""

    def __init__(
        self,
        api_repository: Hot22ApiRepository,
        history_ledger: Optional[HistoryLedger] = None,
        notifications: Optional[NotificationCenter] = None,
        max_size_bytes: int = None,
        accepted_extension: str = None,
        on_completed: Optional[Callable[[UploadJob], None]] = None
    ):
        self.api_repository = api_repository
        if history_ledger is None:
            history_ledger = HistoryLedger(config.settings.max_history_size)
        self.history_ledger = history_ledger
        if notifications is None:
            notifications = NotificationCenter(config.settings.max_notifications)
        self.notifications = notifications
        self.max_size_bytes = max_size_bytes or config.settings.max_upload_size_bytes
        self.accepted_extension = (accepted_extension or config.settings.accepted_upload_extension).lower()
        self.on_completed = on_completed
        self._state = UploadState.IDLE
        self._job: Optional[UploadJob] = None
        self._listeners: List[Listener] = []

    @property
    def state(self) -> UploadState:
        return self._state

    @property
    def job(self) -> Optional[UploadJob]:
        return self._job

    @property
    def progress(self) -> int:
        return self._job.progress if self._job else 0

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def validate(self, file: FileDescriptor) -> None:
        """
        Client-side checks run before any request is made.

        Raises:
            FileValidationException: If the extension or size is not accepted
        """
        if not file.name.lower().endswith(self.accepted_extension):
            raise FileValidationException(
                f"Please select a valid HOT22 text file ({self.accepted_extension})"
            )
        if file.size > self.max_size_bytes:
            limit_mb = self.max_size_bytes / (1024 * 1024)
            raise FileValidationException(
                f"File size ({file.size / (1024 * 1024):.2f}MB) exceeds the {limit_mb:.0f}MB limit"
            )

    def select_file(self, file: FileDescriptor) -> UploadJob:
        """
        Validate a file and make it the pending job.

        A rejected file sends the pipeline back to Idle and is not kept.

        Raises:
            UploadInProgressException: If a transfer or processing is running
            InvalidTransitionException: If the previous job was not reset
            FileValidationException: If the file is rejected
        """
        if self._state.is_busy:
            raise UploadInProgressException(
                f"Upload of '{self._job.file.name}' is still {self._state.value}"
            )
        if self._state.is_terminal:
            raise InvalidTransitionException("Reset the pipeline before starting another upload")

        self._job = None
        self._transition(UploadState.VALIDATING)
        try:
            self.validate(file)
        except FileValidationException as e:
            logger.info("upload_rejected", filename=file.name, size=file.size, reason=e.message)
            self._transition(UploadState.IDLE)
            self.notifications.notify(NotificationLevel.ERROR, e.message)
            raise

        self._job = UploadJob(id=uuid.uuid4().hex, file=file)
        self._emit()
        return self._job

    async def start(self, content: BinaryIO) -> UploadJob:
        """
        Transfer the selected file and wait for the processing result.

        Transport failures do not raise: the job ends in Failed with its error.

        Raises:
            InvalidTransitionException: If no validated file is pending
        """
        if self._state is not UploadState.VALIDATING or self._job is None:
            raise InvalidTransitionException(f"No validated file to upload (state: {self._state.value})")

        job = self._job
        self._transition(UploadState.UPLOADING)
        logger.info("upload_started", job_id=job.id, filename=job.file.name, size=job.file.size)

        try:
            response = await self.api_repository.upload_file(content, job.file.name, self._on_progress)
        except TransportException as e:
            self._fail(TransportError(message=e.message, status_code=e.status_code))
            return job
        except Exception as e:
            # The job must still reach a terminal state or the pipeline stays locked
            logger.exception("upload_transfer_error", job_id=job.id, filename=job.file.name)
            self._fail(TransportError(message=f"Upload failed: {str(e) or type(e).__name__}"))
            return job

        # Transfer done and processing result received are separate signals
        if self._state is UploadState.UPLOADING:
            self._transition(UploadState.PROCESSING)
        self._complete(response)
        return job

    async def submit(self, file: FileDescriptor, content: BinaryIO) -> UploadJob:
        """Select, validate and upload in one call."""
        self.select_file(file)
        return await self.start(content)

    def reset(self) -> None:
        """
        Clear the finished job and return to Idle.

        Raises:
            UploadInProgressException: If a transfer or processing is running
        """
        if self._state.is_busy:
            raise UploadInProgressException("Cannot reset while an upload is in progress")
        if self._state is UploadState.IDLE:
            return
        self._job = None
        self._transition(UploadState.IDLE)

    def _on_progress(self, percent: int) -> None:
        if self._state is not UploadState.UPLOADING or self._job is None:
            return
        percent = max(0, min(100, int(percent)))
        if percent <= self._job.progress:
            return
        self._job.progress = percent
        self._emit()
        if percent == 100:
            self._transition(UploadState.PROCESSING)

    def _complete(self, response: UploadResponse) -> None:
        job = self._job
        summary = response.results.summary
        job.result = ProcessingResult(
            total_processed=summary.total_processed,
            total_saved=summary.total_saved,
            total_errors=summary.total_errors,
            processing_time_ms=summary.processing_time,
            record_type_counts={
                record_type: RecordTypeCount(processed=counts.processed, saved=counts.saved, errors=counts.errors)
                for record_type, counts in summary.record_types.items()
            }
        )
        job.error_groups = tuple(error_aggregator.aggregate(response.results.errors_by_type or {}))
        job.progress = 100
        job.finished_at = datetime.now(timezone.utc)
        self._transition(UploadState.COMPLETED)

        self._record_history(
            job,
            HistoryStatus.SUCCESS,
            record_count=summary.total_saved,
            processing_time_ms=summary.processing_time
        )

        level = error_aggregator.severity(summary.total_errors, summary.total_processed)
        logger.info(
            "upload_completed",
            job_id=job.id,
            processed=summary.total_processed,
            saved=summary.total_saved,
            errors=summary.total_errors,
            severity=level.value
        )
        self.notifications.notify(
            NotificationLevel.SUCCESS if summary.total_errors == 0 else NotificationLevel.WARNING,
            f"Processed {summary.total_processed} records from {job.file.name}: "
            f"{summary.total_saved} saved, {summary.total_errors} errors ({level.value} severity)"
        )
        if self.on_completed is not None:
            self.on_completed(job)

    def _fail(self, error: TransportError) -> None:
        job = self._job
        job.error = error
        job.progress = 0
        job.finished_at = datetime.now(timezone.utc)
        self._transition(UploadState.FAILED)

        self._record_history(job, HistoryStatus.ERROR)
        logger.warning("upload_failed", job_id=job.id, filename=job.file.name, message=error.message)
        self.notifications.notify(NotificationLevel.ERROR, f"Upload of {job.file.name} failed: {error.message}")

    def _record_history(self, job: UploadJob, status: HistoryStatus, **counts) -> None:
        """Append the terminal entry; a storage failure is reported, never fatal to the job."""
        try:
            self.history_ledger.record(filename=job.file.name, status=status, **counts)
        except DynamoDBException as e:
            logger.error("history_persist_failed", job_id=job.id, message=e.message)
            self.notifications.notify(
                NotificationLevel.WARNING,
                f"Upload history for {job.file.name} could not be saved: {e.message}"
            )

    def _transition(self, target: UploadState) -> None:
        if target not in ALLOWED_TRANSITIONS[self._state]:
            raise InvalidTransitionException(f"Cannot move from {self._state.value} to {target.value}")
        self._state = target
        if self._job is not None:
            self._job.status = target
        self._emit()

    def _emit(self) -> None:
        event = PipelineEvent(state=self._state, progress=self.progress, job=self._job)
        for listener in list(self._listeners):
            listener(event)
