"""
Custom exceptions for the HOT22 Dashboard service.
Provides specific error types for different failure scenarios.
"""
from typing import Optional


class Hot22DashboardException(Exception):
    """Base exception for all application errors."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class FileValidationException(Hot22DashboardException):
    """Raised when a selected file is rejected before any request is made."""
    pass


class TransportException(Hot22DashboardException):
    """Raised when a backend call fails (network, timeout or non-2xx)."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class RecordTypeNotFoundException(Hot22DashboardException):
    """Raised when a record type code is not a known HOT22 record type."""
    pass


class UploadInProgressException(Hot22DashboardException):
    """Raised when an upload is started while another one is still active."""
    pass


class InvalidTransitionException(Hot22DashboardException):
    """Raised when the upload pipeline is asked for an illegal state change."""
    pass


class DynamoDBException(Hot22DashboardException):
    """Raised when DynamoDB operation fails."""
    pass
