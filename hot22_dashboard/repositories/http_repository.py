"""
HTTP Repository for the HOT22 backend.
Talks to the external parser/persistence service with httpx.
"""
import os
from typing import Any, BinaryIO, Dict, Optional, Type, TypeVar
import httpx
from pydantic import BaseModel, ValidationError
from hot22_dashboard.core import config
from hot22_dashboard.core.exceptions import TransportException
from hot22_dashboard.core.logging_setup import get_logger
from hot22_dashboard.models.query import Query
from hot22_dashboard.models.dto.hot22_dto import (
    DeleteResponse,
    HealthResponse,
    RecordListResponse,
    StatsResponse,
    UploadErrorsResponse,
    UploadResponse,
)
from hot22_dashboard.repositories.api_repository import Hot22ApiRepository, ProgressCallback

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class ProgressReader:
    """File wrapper that reports the share of bytes read so far."""

    def __init__(self, file: BinaryIO, on_progress: Optional[ProgressCallback] = None):
        self._file = file
        self._on_progress = on_progress
        self._sent = 0
        position = file.tell()
        self.total = file.seek(0, os.SEEK_END)
        file.seek(position)

    def read(self, size: int = -1) -> bytes:
        chunk = self._file.read(size)
        if chunk:
            self._sent += len(chunk)
            self._report()
        return chunk

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        position = self._file.seek(offset, whence)
        if whence == os.SEEK_SET and offset == 0:
            self._sent = 0
        return position

    def tell(self) -> int:
        return self._file.tell()

    def _report(self) -> None:
        if self._on_progress is None or self.total <= 0:
            return
        self._on_progress(min(100, round(self._sent * 100 / self.total)))


class HttpHot22ApiRepository(Hot22ApiRepository):
    """Repository for HOT22 backend HTTP operations."""

    def __init__(
        self,
        base_url: str = None,
        timeout_seconds: float = None,
        upload_timeout_seconds: float = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url or config.settings.api_base_url
        self.timeout_seconds = timeout_seconds or config.settings.api_timeout_seconds
        self.upload_timeout_seconds = upload_timeout_seconds or config.settings.upload_timeout_seconds
        self._transport = transport

    async def list_records(self, record_type: str, query: Query) -> RecordListResponse:
        """
        Fetch one page of records of a given type.

        Args:
            record_type: Record type code, e.g. BKS24
            query: Page, sort and filters

        Returns:
            RecordListResponse with records and pagination

        Raises:
            TransportException: If the request fails
        """
        payload = await self._request("GET", f"/records/{record_type}", params=query.to_params())
        return self._parse(RecordListResponse, payload)

    async def upload_file(
        self,
        file: BinaryIO,
        filename: str,
        on_progress: Optional[ProgressCallback] = None
    ) -> UploadResponse:
        """
        Upload a HOT22 file as multipart form data.

        Args:
            file: Binary file object
            filename: Original filename
            on_progress: Called with the transfer percentage as bytes are sent

        Returns:
            UploadResponse with the processing summary

        Raises:
            TransportException: If the transfer or the server fails
        """
        reader = ProgressReader(file, on_progress)
        payload = await self._request(
            "POST",
            "/upload-hot22",
            files={"file": (filename, reader, "text/plain")},
            timeout=self.upload_timeout_seconds
        )
        return self._parse(UploadResponse, payload)

    async def get_stats(self) -> StatsResponse:
        payload = await self._request("GET", "/stats")
        return self._parse(StatsResponse, payload)

    async def delete_all_records(self) -> DeleteResponse:
        payload = await self._request("DELETE", "/records/all")
        return self._parse(DeleteResponse, payload)

    async def check_health(self) -> HealthResponse:
        payload = await self._request("GET", "/health")
        return self._parse(HealthResponse, payload)

    async def get_upload_errors(
        self,
        upload_id: str,
        record_type: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> UploadErrorsResponse:
        """
        Fetch the stored validation and save errors of one upload.

        Args:
            upload_id: Upload identifier assigned by the backend
            record_type: Only return errors of this record type
            page: Page of errors within each record type
            limit: Errors per page

        Returns:
            UploadErrorsResponse with errors grouped by record type

        Raises:
            TransportException: If the request fails or the upload is unknown
        """
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if record_type:
            params["recordType"] = record_type
        payload = await self._request("GET", f"/api/error-logs/{upload_id}", params=params)
        return self._parse(UploadErrorsResponse, payload)

    async def _request(self, method: str, url: str, timeout: float = None, **kwargs) -> Dict[str, Any]:
        logger.debug("api_request", method=method, url=url)
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=timeout or self.timeout_seconds,
                transport=self._transport
            ) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportException(f"Request to {url} timed out") from e
        except httpx.HTTPError as e:
            raise TransportException(f"Network error calling {url}: {str(e)}") from e
        except (httpx.StreamError, httpx.InvalidURL, OSError) as e:
            raise TransportException(f"Could not send request to {url}: {str(e) or type(e).__name__}") from e

        if not response.is_success:
            message = self._error_message(response)
            logger.warning("api_error", method=method, url=url, status_code=response.status_code, message=message)
            raise TransportException(message, status_code=response.status_code)

        logger.debug("api_response", method=method, url=url, status_code=response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise TransportException(f"Invalid JSON returned by {url}") from e

    def _error_message(self, response: httpx.Response) -> str:
        """Prefer the server's own message over the HTTP reason phrase."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("message", "error", "detail"):
                if body.get(key):
                    return str(body[key])
        return f"Request failed with status {response.status_code} {response.reason_phrase}".strip()

    def _parse(self, model: Type[M], payload: Any) -> M:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise TransportException(f"Unexpected response payload for {model.__name__}: {str(e)}") from e
