"""
History ledger.
Bounded, most-recent-first log of finished uploads with optional persistence.
"""
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from hot22_dashboard.core.logging_setup import get_logger
from hot22_dashboard.models.history_entry import HistoryEntry, HistoryStatus
from hot22_dashboard.repositories.history_repository import HistoryRepository

logger = get_logger(__name__)

DEFAULT_MAX_HISTORY_SIZE = 10


class HistoryLedger:
    """Sole owner of the upload history list."""

    def __init__(
        self,
        max_history_size: int = DEFAULT_MAX_HISTORY_SIZE,
        repository: Optional[HistoryRepository] = None
    ):
        if max_history_size < 1:
            raise ValueError(f"max_history_size must be >= 1, got: {max_history_size}")
        self.max_history_size = max_history_size
        self.repository = repository
        self._entries: List[HistoryEntry] = []

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, entry: HistoryEntry) -> List[HistoryEntry]:
        """
        Insert an entry at the front and drop the oldest beyond the limit.

        Args:
            entry: Finished upload

        Returns:
            The ledger, most recent first

        Raises:
            DynamoDBException: If persistence is configured and fails;
                a failed save leaves the ledger unchanged
        """
        if self.repository is not None:
            self.repository.save(entry)

        self._entries.insert(0, entry)
        evicted = self._entries[self.max_history_size:]
        del self._entries[self.max_history_size:]

        if self.repository is not None and evicted:
            self.repository.delete_many([old.id for old in evicted])

        logger.debug("history_appended", entry_id=entry.id, size=len(self._entries), evicted=len(evicted))
        return self.entries

    def record(
        self,
        filename: str,
        status: HistoryStatus,
        record_count: int = 0,
        processing_time_ms: int = 0
    ) -> HistoryEntry:
        """Build an entry stamped with the current time and append it."""
        entry = HistoryEntry(
            id=uuid.uuid4().hex,
            filename=filename,
            timestamp=datetime.now(timezone.utc).isoformat(),
            status=status,
            record_count=record_count,
            processing_time_ms=processing_time_ms
        )
        self.append(entry)
        return entry

    def clear(self) -> None:
        self._entries = []
        if self.repository is not None:
            self.repository.clear()

    def load(self) -> List[HistoryEntry]:
        """Restore persisted entries, newest first, capped at the ledger size."""
        if self.repository is None:
            return self.entries
        stored = self.repository.find_recent(self.max_history_size)
        self._entries = stored[:self.max_history_size]
        return self.entries
