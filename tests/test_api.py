from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from core.database import SUPPORT_COLLECTION, database


@pytest.fixture
def broken_client(monkeypatch, failing_db):
    from api.main import app

    monkeypatch.setattr(database, "db", failing_db)
    monkeypatch.setattr(database, "connected", True)
    with TestClient(app) as test_client:
        yield test_client


def _create_support(client, payload):
    response = client.post("/api/support", json=payload)
    assert response.status_code == 201
    return response.json()["data"]


def _create_appointment(client, payload):
    response = client.post("/api/appointments", json=payload)
    assert response.status_code == 201
    return response.json()["data"]


class TestSupportEndpoints:
    def test_create(self, client, support_payload):
        response = client.post("/api/support", json=support_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Support request submitted successfully"
        assert body["data"]["fullName"] == "Jane Doe"
        assert body["data"]["email"] == "jane.doe@example.com"
        assert body["data"]["status"] == "pending"
        assert "errors" not in body

    def test_validation_errors_come_back_together(self, client, api_db):
        response = client.post("/api/support", json={
            "fullName": "J",
            "email": "bad",
            "message": "short",
        })

        assert response.status_code == 400
        body = response.json()
        assert body == {
            "success": False,
            "message": "Validation failed",
            "errors": [
                "Name must be at least 2 characters",
                "Please provide a valid email",
                "Message must be at least 10 characters",
            ],
        }
        assert api_db[SUPPORT_COLLECTION].documents == {}

    def test_missing_body_lists_required_fields(self, client):
        response = client.post("/api/support")

        assert response.status_code == 400
        assert response.json()["errors"] == [
            "Full name is required",
            "Email is required",
            "Message is required",
        ]

    def test_malformed_json(self, client):
        response = client.post(
            "/api/support",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Invalid request body"
        assert body["errors"]

    def test_list_reports_count_and_caps_at_ten(self, client, support_payload):
        for _ in range(12):
            _create_support(client, support_payload)

        response = client.get("/api/support")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 10
        assert len(body["data"]) == 10

    def test_empty_list(self, client):
        body = client.get("/api/support").json()

        assert body == {"success": True, "data": [], "count": 0}

    def test_delete_twice(self, client, support_payload):
        record = _create_support(client, support_payload)

        first = client.delete(f"/api/support/{record['_id']}")
        second = client.delete(f"/api/support/{record['_id']}")

        assert first.status_code == 200
        assert first.json() == {
            "success": True,
            "message": "Support request deleted successfully",
        }
        assert second.status_code == 404
        assert second.json() == {"success": False, "message": "Support request not found"}

    def test_support_requests_cannot_be_updated(self, client, support_payload):
        record = _create_support(client, support_payload)

        response = client.put(f"/api/support/{record['_id']}", json={"status": "resolved"})

        assert response.status_code == 405
        assert response.json()["success"] is False


class TestAppointmentEndpoints:
    def test_create_and_fetch(self, client, appointment_payload):
        created = _create_appointment(client, appointment_payload)

        response = client.get(f"/api/appointments/{created['_id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == created
        assert created["appointmentDate"] == "2026-11-02T10:30:00"
        assert created["appointmentType"] == "checkup"

    def test_create_rejects_bad_enum(self, client, appointment_payload):
        appointment_payload["appointmentType"] = "surgery"

        response = client.post("/api/appointments", json=appointment_payload)

        assert response.status_code == 400
        assert len(response.json()["errors"]) == 1
        assert "surgery" in response.json()["errors"][0]

    def test_list_orders_by_appointment_date(self, client, appointment_payload):
        for date in ("2026-11-02T10:00:00", "2026-12-24T09:00:00", "2026-10-01T16:00:00"):
            _create_appointment(client, dict(appointment_payload, appointmentDate=date))

        body = client.get("/api/appointments").json()

        assert body["count"] == 3
        assert [a["appointmentDate"] for a in body["data"]] == [
            "2026-12-24T09:00:00",
            "2026-11-02T10:00:00",
            "2026-10-01T16:00:00",
        ]

    def test_update_status(self, client, appointment_payload):
        created = _create_appointment(client, appointment_payload)

        response = client.put(
            f"/api/appointments/{created['_id']}", json={"status": "confirmed"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Appointment updated successfully"
        assert body["data"]["status"] == "confirmed"
        assert body["data"]["createdAt"] == created["createdAt"]
        assert body["data"]["notes"] == "First visit"

    def test_update_validation_failure(self, client, appointment_payload):
        created = _create_appointment(client, appointment_payload)

        response = client.put(
            f"/api/appointments/{created['_id']}", json={"notes": "x" * 501}
        )

        assert response.status_code == 400
        assert response.json()["errors"] == ["Notes cannot exceed 500 characters"]
        assert client.get(f"/api/appointments/{created['_id']}").json()["data"] == created

    def test_update_unknown_appointment(self, client):
        response = client.put(f"/api/appointments/{ObjectId()}", json={"status": "confirmed"})

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Appointment not found"}

    @pytest.mark.parametrize("appointment_id", ["not-an-id", str(ObjectId())])
    def test_get_unknown_appointment(self, client, appointment_id):
        response = client.get(f"/api/appointments/{appointment_id}")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_delete_twice(self, client, appointment_payload):
        created = _create_appointment(client, appointment_payload)

        assert client.delete(f"/api/appointments/{created['_id']}").status_code == 200
        assert client.delete(f"/api/appointments/{created['_id']}").status_code == 404


class TestSystemEndpoints:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "running" in response.json()["message"]

    def test_health_connected(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "OK",
            "message": "CareConnect API is running",
            "database": "Connected",
        }

    def test_health_disconnected(self, broken_client):
        response = broken_client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["database"] == "Disconnected"

    def test_health_recovers_after_failed_startup(self, monkeypatch, fake_db):
        from api.main import app

        down = MagicMock()
        down.admin.command = AsyncMock(side_effect=Exception("connection refused"))
        up = MagicMock()
        up.admin.command = AsyncMock(return_value={"ok": 1})
        up.__getitem__.return_value = fake_db
        monkeypatch.setattr(database, "client", None)
        monkeypatch.setattr(database, "db", None)
        monkeypatch.setattr(database, "connected", False)

        with patch("core.database.AsyncIOMotorClient", side_effect=[down, up]):
            with TestClient(app) as test_client:
                assert not database.connected

                response = test_client.get("/api/health")

        assert response.json()["database"] == "Connected"
        down.close.assert_called_once()

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Resource not found"}


class TestStorageFailure:
    def test_list_returns_500_with_detail(self, broken_client):
        response = broken_client.get("/api/support")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Error fetching support requests"
        assert "connection reset" in body["error"]

    def test_create_returns_500(self, broken_client, appointment_payload):
        response = broken_client.post("/api/appointments", json=appointment_payload)

        assert response.status_code == 500
        assert response.json()["message"] == "Error creating appointment"

    def test_validation_still_runs_first(self, broken_client):
        response = broken_client.post("/api/support", json={})

        assert response.status_code == 400
