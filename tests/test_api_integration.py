"""
Integration tests for API endpoints.
Tests the full request/response cycle including routes, dependencies, and exception handlers.
"""
import pytest
from fastapi.testclient import TestClient
from hot22_dashboard.core.dependencies import get_dashboard_service
from hot22_dashboard.core.exceptions import TransportException
from hot22_dashboard.main import app
from hot22_dashboard.models.dto.hot22_dto import DeleteResponse, StatsResponse
from hot22_dashboard.models.query import SortDirection
from hot22_dashboard.services.dashboard_service import DashboardService
from hot22_dashboard.services.history_ledger import HistoryLedger
from hot22_dashboard.services.notification_center import NotificationCenter
from conftest import make_record_page, make_upload_response


class TestAPIIntegration:
    """Integration test suite for API endpoints."""

    @pytest.fixture
    def dashboard_service(self, mock_api_repo):
        return DashboardService(
            api_repository=mock_api_repo,
            history_ledger=HistoryLedger(max_history_size=10),
            notifications=NotificationCenter()
        )

    @pytest.fixture
    def client(self, dashboard_service):
        app.dependency_overrides[get_dashboard_service] = lambda: dashboard_service
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_health_check(self, client):
        response = client.get("/v1/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "HOT22 Dashboard API"
        assert data["backend"]["status"] == "healthy"

    def test_health_check_degraded(self, client, mock_api_repo):
        mock_api_repo.check_health.side_effect = TransportException("Network error")

        response = client.get("/v1/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["backend"]["status"] == "unreachable"

    def test_get_records(self, client, mock_api_repo):
        mock_api_repo.list_records.return_value = make_record_page(
            [{"TDNR": "0001"}, {"TDNR": "0002"}], current_page=3, total_records=230, limit=20
        )

        response = client.get(
            "/v1/api/records/bks24",
            params={"page": 3, "limit": 20, "sort_by": "DAIS", "sort_order": "asc", "agent_code": "1234567"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["record_type"] == "BKS24"
        assert data["records"] == [{"TDNR": "0001"}, {"TDNR": "0002"}]
        assert data["filters"] == {"agentCode": "1234567"}
        assert data["active_filter_count"] == 1
        assert data["sort_by"] == "DAIS"
        assert data["sort_order"] == "asc"

        window = data["window"]
        assert window["current_page"] == 3
        assert window["total_pages"] == 12
        assert window["page_numbers"] == [1, 2, 3, 4, 5]
        assert window["start_index"] == 40
        assert window["end_index"] == 60
        assert window["text"] == "Showing 41-60 of 230 items"

        record_type, query = mock_api_repo.list_records.call_args.args
        assert record_type == "BKS24"
        assert query.page == 3
        assert query.page_size == 20
        assert query.sort_direction is SortDirection.ASC
        assert query.filter_map == {"agentCode": "1234567"}

    def test_repeated_request_served_from_cache(self, client, mock_api_repo):
        client.get("/v1/api/records/BKS24", params={"search": "SMITH"})
        client.get("/v1/api/records/BKS24", params={"search": "SMITH"})

        assert mock_api_repo.list_records.call_count == 1

    def test_get_records_unknown_type(self, client, mock_api_repo):
        response = client.get("/v1/api/records/XYZ99")

        assert response.status_code == 404
        assert response.json()["error"] == "Not Found"
        mock_api_repo.list_records.assert_not_called()

    def test_get_records_invalid_limit(self, client):
        response = client.get("/v1/api/records/BKS24", params={"limit": 5000})
        assert response.status_code == 422

    def test_get_records_backend_failure(self, client, mock_api_repo):
        mock_api_repo.list_records.side_effect = TransportException("Server error", status_code=500)

        response = client.get("/v1/api/records/BKS24")

        assert response.status_code == 502
        assert response.json()["message"] == "Server error"

        notifications = client.get("/v1/api/notifications").json()
        assert notifications[0]["level"] == "error"

    def test_get_stats(self, client, mock_api_repo):
        mock_api_repo.get_stats.return_value = StatsResponse(total_records=42, statistics={"BKS24": 42})

        response = client.get("/v1/api/stats")

        assert response.status_code == 200
        assert response.json() == {"total_records": 42, "statistics": {"BKS24": 42}}

    def test_delete_all_records_invalidates_cache(self, client, mock_api_repo):
        client.get("/v1/api/records/BKS24")

        response = client.delete("/v1/api/records")
        client.get("/v1/api/records/BKS24")

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert mock_api_repo.list_records.call_count == 2

    def test_delete_not_confirmed(self, client, mock_api_repo):
        mock_api_repo.delete_all_records.return_value = DeleteResponse(ok=False)

        response = client.delete("/v1/api/records")

        assert response.json() == {"ok": False}

    def test_upload_file_success(self, client, mock_api_repo):
        response = client.post(
            "/v1/api/uploads",
            files={"file": ("hot22_march.txt", b"BFH01HEADER\nBKS24RECORD\n", "text/plain")}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "completed"
        assert data["filename"] == "hot22_march.txt"
        assert data["progress"] == 100
        assert data["result"]["total_saved"] == 95
        assert data["result"]["severity"] == "low"
        assert data["result"]["record_type_counts"]["BAR65"]["saved"] == 38
        assert data["error"] is None

        _, filename, _ = mock_api_repo.upload_file.call_args.args
        assert filename == "hot22_march.txt"

        history = client.get("/v1/api/uploads/history").json()
        assert history["count"] == 1
        assert history["entries"][0]["status"] == "success"
        assert history["max_history_size"] == 10

    def test_upload_invalidates_record_cache(self, client, mock_api_repo):
        client.get("/v1/api/records/BKS24")
        client.post("/v1/api/uploads", files={"file": ("a.txt", b"x", "text/plain")})
        client.get("/v1/api/records/BKS24")

        assert mock_api_repo.list_records.call_count == 2

    def test_upload_with_error_groups(self, client, mock_api_repo):
        mock_api_repo.upload_file.return_value = make_upload_response(
            total_processed=10,
            total_saved=7,
            total_errors=3,
            errors_by_type={
                "BKS24": {"validationErrors": [{"lineNumber": 2, "message": "bad"}], "saveErrors": ["dup", "dup"]}
            }
        )

        data = client.post("/v1/api/uploads", files={"file": ("a.txt", b"x", "text/plain")}).json()

        assert data["result"]["severity"] == "high"
        assert data["errors_by_type"][0]["record_type"] == "BKS24"
        assert data["errors_by_type"][0]["total_errors"] == 3

    def test_upload_wrong_extension(self, client, mock_api_repo):
        response = client.post("/v1/api/uploads", files={"file": ("data.csv", b"a,b\n", "text/csv")})

        assert response.status_code == 400
        assert response.json()["error"] == "File Rejected"
        assert client.get("/v1/api/uploads/current").json()["state"] == "idle"
        mock_api_repo.upload_file.assert_not_called()

    def test_upload_backend_failure(self, client, mock_api_repo):
        mock_api_repo.upload_file.side_effect = TransportException("Upload failed", status_code=500)

        response = client.post("/v1/api/uploads", files={"file": ("a.txt", b"x", "text/plain")})

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "failed"
        assert data["progress"] == 0
        assert data["error"] == {"kind": "transport", "message": "Upload failed", "status_code": 500}

        history = client.get("/v1/api/uploads/history").json()
        assert history["entries"][0]["status"] == "error"

    def test_second_upload_requires_reset(self, client):
        client.post("/v1/api/uploads", files={"file": ("a.txt", b"x", "text/plain")})

        response = client.post("/v1/api/uploads", files={"file": ("b.txt", b"x", "text/plain")})
        assert response.status_code == 409

        reset = client.post("/v1/api/uploads/reset")
        assert reset.json()["state"] == "idle"

        response = client.post("/v1/api/uploads", files={"file": ("b.txt", b"x", "text/plain")})
        assert response.status_code == 200

    def test_current_upload_when_idle(self, client):
        response = client.get("/v1/api/uploads/current")

        assert response.status_code == 200
        assert response.json()["state"] == "idle"
        assert response.json()["job_id"] is None

    def test_clear_history(self, client):
        client.post("/v1/api/uploads", files={"file": ("a.txt", b"x", "text/plain")})

        response = client.delete("/v1/api/uploads/history")

        assert response.status_code == 204
        assert client.get("/v1/api/uploads/history").json()["count"] == 0

    def test_pipeline_shares_injected_ledger(self, client, dashboard_service):
        assert dashboard_service.upload_pipeline.history_ledger is dashboard_service.history_ledger
        assert dashboard_service.upload_pipeline.notifications is dashboard_service.notifications

        client.post("/v1/api/uploads", files={"file": ("a.txt", b"x", "text/plain")})

        assert len(dashboard_service.history_ledger) == 1

    def test_get_upload_errors(self, client, mock_api_repo):
        response = client.get("/v1/api/uploads/upl-1/errors")

        assert response.status_code == 200
        data = response.json()
        assert data["upload_id"] == "upl-1"
        assert data["filename"] == "hot22_march.txt"
        assert data["total_errors"] == 13
        assert data["validation_errors"] == 2
        assert data["save_errors"] == 1
        assert data["severity"] == "medium"

        bks24, bar65 = data["groups"]
        assert bks24["record_type"] == "BKS24"
        assert bks24["stored_errors"] == 12
        assert bks24["validation_errors"][0]["line_number"] == 4
        assert bks24["pagination"] == {"page": 1, "limit": 20, "total": 12}
        assert bar65["save_errors"] == ["Duplicate key"]
        assert bar65["pagination"] is None

        mock_api_repo.get_upload_errors.assert_awaited_once_with("upl-1", None, 1, 20)

    def test_get_upload_errors_filtered_by_type(self, client, mock_api_repo):
        response = client.get("/v1/api/uploads/upl-1/errors", params={"record_type": "bks24", "page": 2, "limit": 5})

        assert response.status_code == 200
        mock_api_repo.get_upload_errors.assert_awaited_once_with("upl-1", "BKS24", 2, 5)

    def test_get_upload_errors_unknown_type(self, client, mock_api_repo):
        response = client.get("/v1/api/uploads/upl-1/errors", params={"record_type": "XYZ99"})

        assert response.status_code == 404
        mock_api_repo.get_upload_errors.assert_not_called()

    def test_get_upload_errors_backend_failure(self, client, mock_api_repo):
        mock_api_repo.get_upload_errors.side_effect = TransportException("Upload not found", status_code=404)

        response = client.get("/v1/api/uploads/missing/errors")

        assert response.status_code == 502
        assert response.json()["message"] == "Upload not found"
