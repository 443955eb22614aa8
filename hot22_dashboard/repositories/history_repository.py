"""
Upload History Repository for DynamoDB operations.
Persists the upload history ledger between restarts.
"""
from typing import List, Optional
import boto3
from botocore.exceptions import ClientError
from hot22_dashboard.core import config
from hot22_dashboard.core.exceptions import DynamoDBException
from hot22_dashboard.models.history_entry import HistoryEntry, HistoryStatus


class HistoryRepository:
    """Repository for upload history DynamoDB operations."""

    def __init__(self, table_name: str = None):
        self.dynamodb = boto3.resource('dynamodb', region_name=config.settings.aws_region)
        self.table = self.dynamodb.Table(table_name or config.settings.upload_history_table_name)

    def save(self, entry: HistoryEntry) -> None:
        """
        Save a history entry.

        Args:
            entry: HistoryEntry domain model

        Raises:
            DynamoDBException: If save operation fails
        """
        try:
            self.table.put_item(Item={
                'entry_id': entry.id,
                'filename': entry.filename,
                'timestamp': entry.timestamp,
                'status': entry.status.value,
                'record_count': entry.record_count,
                'processing_time_ms': entry.processing_time_ms
            })
        except ClientError as e:
            raise DynamoDBException(f"Failed to save history entry: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error saving history entry: {str(e)}") from e

    def find_recent(self, limit: Optional[int] = None) -> List[HistoryEntry]:
        """
        Retrieve the most recent entries, newest first.

        The table is small (bounded by the ledger size), so a full scan is used.

        Raises:
            DynamoDBException: If scan fails
        """
        try:
            items = []
            scan_kwargs = {}
            while True:
                response = self.table.scan(**scan_kwargs)
                items.extend(response.get('Items', []))
                if 'LastEvaluatedKey' not in response:
                    break
                scan_kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']

            items.sort(key=lambda item: item['timestamp'], reverse=True)
            return [self._item_to_entry(item) for item in items[:limit]]

        except ClientError as e:
            raise DynamoDBException(f"Failed to load history: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error loading history: {str(e)}") from e

    def delete_many(self, entry_ids: List[str]) -> None:
        """
        Delete evicted entries.

        Raises:
            DynamoDBException: If delete fails
        """
        try:
            with self.table.batch_writer() as batch:
                for entry_id in entry_ids:
                    batch.delete_item(Key={'entry_id': entry_id})
        except ClientError as e:
            raise DynamoDBException(f"Failed to delete history entries: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error deleting history entries: {str(e)}") from e

    def clear(self) -> None:
        """Remove every stored entry."""
        entries = self.find_recent()
        self.delete_many([entry.id for entry in entries])

    def _item_to_entry(self, item: dict) -> HistoryEntry:
        """Convert DynamoDB item to HistoryEntry domain model."""
        return HistoryEntry(
            id=item['entry_id'],
            filename=item['filename'],
            timestamp=item['timestamp'],
            status=HistoryStatus(item['status']),
            record_count=int(item.get('record_count', 0)),
            processing_time_ms=int(item.get('processing_time_ms', 0))
        )
