"""
Upload history domain model.
One line of the most-recent-first upload log.
"""
from dataclasses import dataclass
from enum import Enum


class HistoryStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class HistoryEntry:
    """Domain model for a finished upload."""
    id: str
    filename: str
    timestamp: str
    status: HistoryStatus
    record_count: int = 0
    processing_time_ms: int = 0

    def __repr__(self):
        return f"HistoryEntry(id={self.id}, filename={self.filename}, status={self.status.value})"
