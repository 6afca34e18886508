from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.db.models.wms.tasking import CorrectiveTask
from app.events.outbox import OutboxEvent


def _raise_missing(client, headers, add_line_item):
    add_line_item("ORD-2", "SKU-B", location="BIN-3")
    client.post("/pick/report-issue", headers=headers,
                json={"orderId": "ORD-2", "sku": "SKU-B", "binId": "BIN-3", "issueType": "ITEM_MISSING"})


def test_issue_task_shows_up_in_queue(client, auth_headers, add_line_item) -> None:
    _raise_missing(client, auth_headers, add_line_item)

    response = client.get("/tasks", params={"status": "pending"}, headers=auth_headers)

    body = response.json()
    assert body["count"] == 1
    task = body["data"][0]
    assert task["title"] == "Bin Audit Required: BIN-3"
    assert task["priority"] == "high"
    assert task["assignee"] == "picker-1"
    assert task["binId"] == "BIN-3"
    assert task["pickIssueId"]


def test_completing_a_task_stamps_completion(client, auth_headers, add_line_item, session) -> None:
    _raise_missing(client, auth_headers, add_line_item)
    task_id = client.get("/tasks", headers=auth_headers).json()["data"][0]["id"]

    response = client.patch(f"/tasks/{task_id}", json={"status": "completed"}, headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "completed"
    assert data["completedAt"] is not None
    event = session.query(OutboxEvent).filter_by(topic="CorrectiveTaskUpdated").one()
    assert event.payload["previous_status"] == "pending"

    reopened = client.patch(f"/tasks/{task_id}", json={"status": "in_progress"}, headers=auth_headers).json()["data"]
    assert reopened["completedAt"] is None


def test_invalid_task_status_is_rejected(client, auth_headers, add_line_item) -> None:
    _raise_missing(client, auth_headers, add_line_item)
    task_id = client.get("/tasks", headers=auth_headers).json()["data"][0]["id"]

    response = client.patch(f"/tasks/{task_id}", json={"status": "done"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid task status 'done'"


def test_unknown_task_is_not_found(client, auth_headers) -> None:
    response = client.get("/tasks/does-not-exist", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["statusCode"] == 404


def test_manual_task_creation(client, auth_headers) -> None:
    response = client.post("/tasks", json={"title": "Recount aisle 4", "priority": "low", "binId": "BIN-40"},
                           headers=auth_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["assignee"] == "picker-1"
    assert data["priority"] == "low"
    assert data["status"] == "pending"

    missing_title = client.post("/tasks", json={"priority": "low"}, headers=auth_headers)
    assert missing_title.status_code == 400


def test_non_string_task_fields_are_rejected(client, auth_headers, add_line_item, session) -> None:
    _raise_missing(client, auth_headers, add_line_item)
    task_id = client.get("/tasks", headers=auth_headers).json()["data"][0]["id"]

    response = client.patch(f"/tasks/{task_id}", json={"status": "completed", "description": {"x": 1}},
                            headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid description", "statusCode": 400}
    assert client.get(f"/tasks/{task_id}", headers=auth_headers).json()["data"]["status"] == "pending"

    created = client.post("/tasks", json={"title": "Recount aisle 4", "sku": 1234}, headers=auth_headers)
    assert created.status_code == 400
    assert created.json()["error"] == "Invalid sku"
    assert session.query(CorrectiveTask).count() == 1
    assert session.query(OutboxEvent).filter_by(topic="CorrectiveTaskUpdated").count() == 0


def test_task_store_failure_returns_error_body(client, auth_headers, add_line_item, monkeypatch) -> None:
    _raise_missing(client, auth_headers, add_line_item)
    task_id = client.get("/tasks", headers=auth_headers).json()["data"][0]["id"]

    def boom(self):
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(Session, "commit", boom)

    patched = client.patch(f"/tasks/{task_id}", json={"status": "completed"}, headers=auth_headers)
    created = client.post("/tasks", json={"title": "Recount aisle 4"}, headers=auth_headers)

    monkeypatch.undo()
    for response in (patched, created):
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Could not save the task, please retry",
                                   "statusCode": 500}
    data = client.get(f"/tasks/{task_id}", headers=auth_headers).json()["data"]
    assert data["status"] == "pending"
    assert data["completedAt"] is None
    assert client.get("/tasks", headers=auth_headers).json()["count"] == 1
