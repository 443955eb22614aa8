"""
Upload job domain models.
Represents a single HOT22 file moving through the upload pipeline.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from hot22_dashboard.models.record_errors import ErrorGroup, TransportError


class UploadState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (UploadState.COMPLETED, UploadState.FAILED)

    @property
    def is_busy(self) -> bool:
        """A transfer or server-side processing is running."""
        return self in (UploadState.UPLOADING, UploadState.PROCESSING)


@dataclass(frozen=True)
class FileDescriptor:
    """The file selected by the user."""
    name: str
    size: int
    mime_hint: str = "text/plain"


@dataclass(frozen=True)
class RecordTypeCount:
    processed: int = 0
    saved: int = 0
    errors: int = 0


@dataclass(frozen=True)
class ProcessingResult:
    """Server-side outcome of a completed upload."""
    total_processed: int
    total_saved: int
    total_errors: int
    processing_time_ms: int
    record_type_counts: Mapping[str, RecordTypeCount] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(
            self, "record_type_counts", MappingProxyType(dict(self.record_type_counts))
        )


# ErrorInfo is the transport failure carried by a failed job
ErrorInfo = TransportError


@dataclass
class UploadJob:
    """Mutable job record; only UploadPipeline writes to it."""
    id: str
    file: FileDescriptor
    status: UploadState = UploadState.VALIDATING
    progress: int = 0
    result: Optional[ProcessingResult] = None
    error: Optional[ErrorInfo] = None
    error_groups: Tuple[ErrorGroup, ...] = ()
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    def __repr__(self):
        return f"UploadJob(id={self.id}, file={self.file.name}, status={self.status.value}, progress={self.progress})"
