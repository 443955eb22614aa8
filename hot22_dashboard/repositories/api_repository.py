"""
Abstract base class for the HOT22 backend API.
Defines the network contract consumed by the request cache and the upload pipeline.
"""
from abc import ABC, abstractmethod
from typing import BinaryIO, Callable, Optional
from hot22_dashboard.models.query import Query
from hot22_dashboard.models.dto.hot22_dto import (
    DeleteResponse,
    HealthResponse,
    RecordListResponse,
    StatsResponse,
    UploadErrorsResponse,
    UploadResponse,
)

ProgressCallback = Callable[[int], None]


class Hot22ApiRepository(ABC):
    """Abstract repository interface for backend operations."""

    @abstractmethod
    async def list_records(self, record_type: str, query: Query) -> RecordListResponse:
        """Fetch one page of parsed records of a given type."""
        pass

    @abstractmethod
    async def upload_file(
        self,
        file: BinaryIO,
        filename: str,
        on_progress: Optional[ProgressCallback] = None
    ) -> UploadResponse:
        """Send a HOT22 file for parsing, reporting transfer progress in percent."""
        pass

    @abstractmethod
    async def get_stats(self) -> StatsResponse:
        """Record counts per collection."""
        pass

    @abstractmethod
    async def delete_all_records(self) -> DeleteResponse:
        """Remove every parsed record."""
        pass

    @abstractmethod
    async def check_health(self) -> HealthResponse:
        """Backend liveness."""
        pass

    @abstractmethod
    async def get_upload_errors(
        self,
        upload_id: str,
        record_type: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> UploadErrorsResponse:
        """Stored error log of one upload, paginated per record type."""
        pass
