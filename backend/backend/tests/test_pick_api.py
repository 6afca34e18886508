from datetime import date, timedelta

from app.db.models.wms.pick_issue import PickIssue
from app.core.security import create_access_token


def _report(client, headers, **body):
    return client.post("/pick/report-issue", json=body, headers=headers)


def test_report_issue_requires_authentication(client) -> None:
    response = _report(client, {}, orderId="ORD-1", sku="SKU-A", binId="BIN-1", issueType="ITEM_MISSING")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Not authorized to access this route", "statusCode": 401}


def test_report_issue_rejects_forged_token(client) -> None:
    token = create_access_token("picker-1")[:-4] + "AAAA"
    response = _report(client, {"Authorization": f"Bearer {token}"},
                       orderId="ORD-1", sku="SKU-A", binId="BIN-1", issueType="ITEM_MISSING")
    assert response.status_code == 401


def test_report_damaged_item_returns_alternate_bin(client, auth_headers, add_inventory, add_line_item, session) -> None:
    add_inventory("SKU-A", "BIN-1", 5)
    add_inventory("SKU-A", "BIN-2", 10)
    add_line_item("ORD-1", "SKU-A", location="BIN-1")

    response = _report(client, auth_headers, orderId="ORD-1", sku="SKU-A", binId="BIN-1",
                       issueType="ITEM_DAMAGED", deviceId="HHD-7", timestamp="2024-05-01T08:00:00Z")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["nextAction"] == "ALTERNATE_BIN"
    assert body["data"]["binId"] == "BIN-2"
    issue = session.query(PickIssue).filter_by(id=body["data"]["pickIssueId"]).one()
    assert issue.reported_by == "picker-1"
    assert issue.device_id == "HHD-7"


def test_report_expired_item_uses_fresh_stock(client, auth_headers, add_inventory, add_line_item) -> None:
    soon = date.today() + timedelta(days=10)
    later = date.today() + timedelta(days=90)
    add_inventory("SKU-C", "BIN-4", 3, status="expired", expiry_date=date.today() - timedelta(days=1))
    add_inventory("SKU-C", "BIN-5", 8, expiry_date=later)
    add_inventory("SKU-C", "BIN-6", 2, expiry_date=soon)
    add_line_item("ORD-3", "SKU-C", location="BIN-4")

    response = _report(client, auth_headers, orderId="ORD-3", sku="SKU-C", binId="BIN-4", issueType="ITEM_EXPIRED")

    assert response.json()["data"]["binId"] == "BIN-6"


def test_skip_item_has_no_bin(client, auth_headers, add_line_item) -> None:
    add_line_item("ORD-2", "SKU-B", location="BIN-3")

    response = _report(client, auth_headers, orderId="ORD-2", sku="SKU-B", binId="BIN-3", issueType="WRONG_ITEM")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["nextAction"] == "SKIP_ITEM"
    assert "binId" not in data


def test_missing_field_is_a_bad_request(client, auth_headers, session) -> None:
    response = _report(client, auth_headers, orderId="ORD-1", sku="SKU-A", issueType="ITEM_MISSING")

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Please provide orderId, sku, binId, and issueType",
        "statusCode": 400,
    }
    assert session.query(PickIssue).count() == 0


def test_unknown_issue_type_is_a_bad_request(client, auth_headers, add_line_item) -> None:
    add_line_item("ORD-1", "SKU-A", location="BIN-1")

    response = _report(client, auth_headers, orderId="ORD-1", sku="SKU-A", binId="BIN-1", issueType="LOST")

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid issue type"


def test_malformed_body_is_a_bad_request(client, auth_headers) -> None:
    response = _report(client, auth_headers, orderId=123, sku="SKU-A", binId="BIN-1", issueType="ITEM_MISSING")

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_unknown_order_item_is_not_found(client, auth_headers) -> None:
    response = _report(client, auth_headers, orderId="ORD-404", sku="SKU-A", binId="BIN-1", issueType="ITEM_MISSING")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Order item not found", "statusCode": 404}


def test_list_issues_filters_by_order(client, auth_headers, add_line_item) -> None:
    add_line_item("ORD-1", "SKU-A", location="BIN-1")
    add_line_item("ORD-2", "SKU-B", location="BIN-3")
    _report(client, auth_headers, orderId="ORD-1", sku="SKU-A", binId="BIN-1", issueType="ITEM_MISSING")
    _report(client, auth_headers, orderId="ORD-2", sku="SKU-B", binId="BIN-3", issueType="WRONG_ITEM")

    response = client.get("/pick/issues", params={"order_id": "ORD-2"}, headers=auth_headers)

    body = response.json()
    assert body["count"] == 1
    assert body["data"][0]["issueType"] == "WRONG_ITEM"
    assert body["data"][0]["reportedBy"] == "picker-1"


def test_list_issues_rejects_unknown_type(client, auth_headers) -> None:
    response = client.get("/pick/issues", params={"issue_type": "NOPE"}, headers=auth_headers)
    assert response.status_code == 400


def test_request_id_is_echoed(client) -> None:
    response = client.get("/health", headers={"X-Request-Id": "rid-123"})
    assert response.status_code == 200
    assert response.headers["X-Request-Id"] == "rid-123"
