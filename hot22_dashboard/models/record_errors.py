"""
Record error domain models.
Tagged union of the errors an upload can report, plus the per-record-type grouping.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    SAVE = "save"
    TRANSPORT = "transport"


@dataclass(frozen=True)
class ValidationError:
    """A parsed line that failed schema checks on the server."""
    line_number: int
    message: str
    raw_line: str = ""
    details: Optional[Dict[str, Any]] = None
    record_type: str = ""
    kind: ErrorKind = field(default=ErrorKind.VALIDATION, init=False)


@dataclass(frozen=True)
class SaveError:
    """A validated record that could not be persisted."""
    message: str
    record_type: str = ""
    kind: ErrorKind = field(default=ErrorKind.SAVE, init=False)


@dataclass(frozen=True)
class TransportError:
    """The whole request failed (network, timeout or non-2xx)."""
    message: str
    status_code: Optional[int] = None
    kind: ErrorKind = field(default=ErrorKind.TRANSPORT, init=False)


RecordError = Union[ValidationError, SaveError]
UploadError = Union[ValidationError, SaveError, TransportError]


class Severity(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ErrorGroup:
    """Errors of one record type, derived once from the raw error list."""
    record_type: str
    validation_errors: Tuple[ValidationError, ...] = ()
    save_errors: Tuple[str, ...] = ()

    @property
    def total_errors(self) -> int:
        return len(self.validation_errors) + len(self.save_errors)
