import pytest
from moto import mock_aws
import boto3
from hot22_dashboard.repositories.history_repository import HistoryRepository
from hot22_dashboard.models.history_entry import HistoryEntry, HistoryStatus
from hot22_dashboard.services.history_ledger import HistoryLedger
from hot22_dashboard.core import config
from hot22_dashboard.core.exceptions import DynamoDBException


@pytest.fixture
def setup_test_env(monkeypatch):
    monkeypatch.setenv("UPLOAD_HISTORY_TABLE_NAME", "UploadHistory-test")
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    config.settings = config.Settings()
    yield
    config.settings = config.Settings()


@pytest.fixture
def dynamodb_table(setup_test_env):
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        table = dynamodb.create_table(
            TableName="UploadHistory-test",
            KeySchema=[{"AttributeName": "entry_id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "entry_id", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST"
        )
        yield table


def make_entry(entry_id, minute, status=HistoryStatus.SUCCESS):
    return HistoryEntry(
        id=entry_id,
        filename=f"{entry_id}.txt",
        timestamp=f"2024-03-01T10:{minute:02d}:00+00:00",
        status=status,
        record_count=120,
        processing_time_ms=900
    )


class TestHistoryRepository:
    def test_save_success(self, dynamodb_table):
        repo = HistoryRepository()

        repo.save(make_entry("abc", 1))

        response = dynamodb_table.get_item(Key={"entry_id": "abc"})
        assert "Item" in response
        assert response["Item"]["filename"] == "abc.txt"
        assert response["Item"]["status"] == "success"
        assert response["Item"]["record_count"] == 120

    def test_find_recent_newest_first(self, dynamodb_table):
        repo = HistoryRepository()
        repo.save(make_entry("old", 1))
        repo.save(make_entry("new", 30, HistoryStatus.ERROR))
        repo.save(make_entry("mid", 15))

        entries = repo.find_recent()

        assert [entry.id for entry in entries] == ["new", "mid", "old"]
        assert entries[0].status is HistoryStatus.ERROR
        assert entries[0].processing_time_ms == 900

    def test_find_recent_limit(self, dynamodb_table):
        repo = HistoryRepository()
        for minute in range(5):
            repo.save(make_entry(f"e{minute}", minute))

        entries = repo.find_recent(2)

        assert [entry.id for entry in entries] == ["e4", "e3"]

    def test_find_recent_empty(self, dynamodb_table):
        assert HistoryRepository().find_recent() == []

    def test_delete_many(self, dynamodb_table):
        repo = HistoryRepository()
        repo.save(make_entry("keep", 1))
        repo.save(make_entry("drop", 2))

        repo.delete_many(["drop"])

        assert [entry.id for entry in repo.find_recent()] == ["keep"]

    def test_clear(self, dynamodb_table):
        repo = HistoryRepository()
        repo.save(make_entry("a", 1))
        repo.save(make_entry("b", 2))

        repo.clear()

        assert repo.find_recent() == []

    def test_ledger_survives_restart(self, dynamodb_table):
        ledger = HistoryLedger(max_history_size=2, repository=HistoryRepository())
        ledger.append(make_entry("first", 1))
        ledger.append(make_entry("second", 2))
        ledger.append(make_entry("third", 3, HistoryStatus.ERROR))

        restored = HistoryLedger(max_history_size=2, repository=HistoryRepository())
        restored.load()

        assert [entry.id for entry in restored.entries] == ["third", "second"]
        assert restored.entries == ledger.entries
        assert len(dynamodb_table.scan()["Items"]) == 2

    def test_missing_table_raises(self, setup_test_env):
        with mock_aws():
            repo = HistoryRepository()

            with pytest.raises(DynamoDBException):
                repo.save(make_entry("abc", 1))
