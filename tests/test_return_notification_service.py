"""Tests for return notification HTTP service."""

from fastapi.testclient import TestClient
import pytest

from return_notification import routes
from return_notification.entities import Contractor, ContractorType
from return_notification.main import app
from return_notification.observability import get_metrics


def _request(**overrides: object) -> dict:
    data: dict[str, object] = {
        "resellerId": 7,
        "notificationType": 2,
        "complaintId": 101,
        "complaintNumber": "RT-101",
        "creatorId": 11,
        "expertId": 12,
        "clientId": 21,
        "consumptionId": 301,
        "consumptionNumber": "CN_301",
        "agreementNumber": "AG-2026-9",
        "date": "2026-10-01",
        "differences": {"from": 1, "to": 0},
    }
    return {"data": data | overrides}


@pytest.fixture(autouse=True)
def reset_runtime() -> None:
    get_metrics().reset()
    routes._directory.reset()
    routes._directory.put(
        Contractor(
            id=21,
            type=ContractorType.CUSTOMER,
            name="Anna",
            email="anna@example.com",
            mobile="+15555550123",
        )
    )
    routes._directory.put(Contractor(id=11, type=ContractorType.EMPLOYEE, name="Ivan"))
    routes._directory.put(Contractor(id=12, type=ContractorType.EMPLOYEE, name="Olga"))


def test_health() -> None:
    client = TestClient(app)

    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["service"] == "return-notification-service"


def test_status_change_reports_every_channel_sent() -> None:
    client = TestClient(app)

    response = client.post("/notifications/return-status", json=_request())
    assert response.status_code == 200
    body = response.json()

    assert body == {
        "employeeEmail": {"success": True, "attempted": True, "errors": []},
        "clientEmail": {"success": True, "attempted": True, "errors": []},
        "clientSms": {"success": True, "attempted": True, "errors": []},
    }


def test_channel_failures_are_returned_as_data(monkeypatch: pytest.MonkeyPatch) -> None:
    client = TestClient(app)

    def failing_sms(*args: object) -> tuple[bool, str | None]:
        raise TimeoutError("sms gateway timeout")

    monkeypatch.setattr(routes._collaborators, "send_sms", failing_sms)

    response = client.post("/notifications/return-status", json=_request())
    assert response.status_code == 200
    body = response.json()

    assert body["employeeEmail"]["success"] is True
    assert body["clientEmail"]["success"] is True
    assert body["clientSms"]["success"] is False
    assert body["clientSms"]["errors"] == [
        {
            "message": "sms gateway timeout",
            "code": "TRANSPORT_ERROR",
            "data": {"exception": "TimeoutError"},
        }
    ]


def test_new_position_marks_client_channels_not_attempted() -> None:
    client = TestClient(app)
    request = _request(notificationType=1)
    del request["data"]["differences"]

    response = client.post("/notifications/return-status", json=request)
    assert response.status_code == 200
    body = response.json()

    assert body["employeeEmail"]["success"] is True
    assert body["clientEmail"] == {"success": False, "attempted": False, "errors": []}
    assert body["clientSms"] == {"success": False, "attempted": False, "errors": []}


def test_validation_failure_returns_first_field() -> None:
    client = TestClient(app)
    request = _request(date="01.10.2026")
    del request["data"]["differences"]["to"]

    response = client.post("/notifications/return-status", json=request)
    assert response.status_code == 400
    error = response.json()["error"]

    assert error["code"] == "VALIDATION_FAILED"
    assert error["details"] == [
        {"field": "date", "issue": "pattern mismatch", "pattern": r"\d{4}-\d{2}-\d{2}"}
    ]


def test_seller_client_is_rejected() -> None:
    client = TestClient(app)
    routes._directory.put(Contractor(id=21, type=ContractorType.SELLER, name="Shop"))

    response = client.post(
        "/notifications/return-status",
        json=_request(),
        headers={"x-trace-id": "trace-returns-0001"},
    )
    assert response.status_code == 400
    error = response.json()["error"]

    assert error["code"] == "CLIENT_IS_SELLER"
    assert error["trace_id"] == "trace-returns-0001"


def test_empty_template_data_is_internal_error() -> None:
    client = TestClient(app)

    response = client.post(
        "/notifications/return-status",
        json=_request(differences={"from": 7, "to": 0}),
    )
    assert response.status_code == 500
    error = response.json()["error"]

    assert error["code"] == "EMPTY_TEMPLATE_DATA"
    assert error["details"] == [{"field": "DIFFERENCES", "issue": "empty"}]


def test_missing_data_body_is_unprocessable() -> None:
    client = TestClient(app)

    response = client.post("/notifications/return-status", json={"payload": {}})
    assert response.status_code == 422


def test_metrics_count_channels_and_rejections(monkeypatch: pytest.MonkeyPatch) -> None:
    client = TestClient(app)
    monkeypatch.setattr(
        routes._collaborators,
        "permitted_emails",
        lambda reseller_id, permit: [],
    )

    assert client.post("/notifications/return-status", json=_request()).status_code == 200
    assert client.post("/notifications/return-status", json=_request(clientId=99)).status_code == 400

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "returns_notification_requests_total 2" in metrics.text
    assert "returns_notification_rejected_total 1" in metrics.text
    assert 'returns_notification_channel_failed_total{channel="employee_email"} 1' in metrics.text
    assert 'returns_notification_channel_sent_total{channel="client_sms"} 1' in metrics.text


def test_registered_contractors_are_used_for_notifications() -> None:
    client = TestClient(app)
    routes._directory.reset()

    assert client.post("/notifications/return-status", json=_request()).json()["error"]["code"] == (
        "CLIENT_NOT_FOUND"
    )

    contractors = [
        {"id": 21, "type": "customer", "name": "Anna", "email": "anna@example.com", "mobile": "+15555550123"},
        {"id": 11, "type": "employee", "name": "Ivan"},
        {"id": 12, "type": "employee", "name": "Olga"},
    ]
    for contractor in contractors:
        response = client.put(f"/contractors/{contractor['id']}", json=contractor)
        assert response.status_code == 200

    stored = client.get("/contractors/21")
    assert stored.status_code == 200
    assert stored.json()["type"] == "customer"
    assert stored.json()["email"] == "anna@example.com"

    response = client.post("/notifications/return-status", json=_request())
    assert response.status_code == 200
    assert response.json()["clientSms"]["success"] is True


def test_contractor_registration_rejects_bad_input() -> None:
    client = TestClient(app)

    mismatch = client.put("/contractors/5", json={"id": 6, "type": "customer"})
    assert mismatch.status_code == 400

    unknown_type = client.put("/contractors/5", json={"id": 5, "type": "partner"})
    assert unknown_type.status_code == 422

    missing = client.get("/contractors/404")
    assert missing.status_code == 404
