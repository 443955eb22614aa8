"""
Global exception handler for the HOT22 Dashboard API.
Provides centralized error handling for all API exceptions.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from .exceptions import (
    DynamoDBException,
    FileValidationException,
    InvalidTransitionException,
    RecordTypeNotFoundException,
    TransportException,
    UploadInProgressException,
)
from .logging_setup import get_logger

logger = get_logger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""

    @app.exception_handler(RecordTypeNotFoundException)
    async def handle_not_found(request: Request, exc: RecordTypeNotFoundException):
        return JSONResponse(
            status_code=404,
            content={"error": "Not Found", "message": exc.message}
        )

    @app.exception_handler(FileValidationException)
    async def handle_file_validation_error(request: Request, exc: FileValidationException):
        return JSONResponse(
            status_code=400,
            content={"error": "File Rejected", "message": exc.message}
        )

    @app.exception_handler(UploadInProgressException)
    async def handle_upload_in_progress(request: Request, exc: UploadInProgressException):
        return JSONResponse(
            status_code=409,
            content={"error": "Upload In Progress", "message": exc.message}
        )

    @app.exception_handler(InvalidTransitionException)
    async def handle_invalid_transition(request: Request, exc: InvalidTransitionException):
        return JSONResponse(
            status_code=409,
            content={"error": "Invalid Upload State", "message": exc.message}
        )

    @app.exception_handler(TransportException)
    async def handle_transport_error(request: Request, exc: TransportException):
        return JSONResponse(
            status_code=502,
            content={"error": "Backend Unavailable", "message": exc.message}
        )

    @app.exception_handler(DynamoDBException)
    async def handle_dynamodb_error(request: Request, exc: DynamoDBException):
        return JSONResponse(
            status_code=500,
            content={"error": "Database Error", "message": exc.message}
        )

    @app.exception_handler(Exception)
    async def handle_generic_error(request: Request, exc: Exception):
        logger.error("unhandled_exception", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "message": "An unexpected error occurred"}
        )
