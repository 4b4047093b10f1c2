import pytest

pytestmark = pytest.mark.integration

PENDING = [
    {"_id": "r1", "requestNumber": "PR-001", "department": "Production", "purpose": "Retool", "priority": "HIGH", "status": "SUBMITTED"},
    {"_id": "r2", "requestNumber": "PR-002", "department": "QA", "purpose": "Gauges", "priority": "LOW", "status": "SUBMITTED"},
]

ORDERS = [
    {"_id": "po1", "orderNumber": "PO-001", "status": "CONFIRMED", "supplierId": {"_id": "s1", "name": "Daehan Steel"}, "orderDate": "2024-05-01T00:00:00Z"},
    {"_id": "po2", "orderNumber": "PO-002", "status": "DRAFT", "supplierId": None, "orderDate": "2024-05-02T00:00:00Z"},
]


# ==================== Purchase requests ====================


def test_draft_request_is_saved_without_business_rules(client, api, login_as):
    login_as("USER")
    api.add("POST", "/api/purchase-requests", status=201, body={"status": "success"})

    resp = client.post("/purchase/requests/new", data={"action": "draft", "priority": "LOW", "items-0-itemName": "Bearing"})

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/purchase/requests")
    _, _, kwargs = api.calls("POST", "/api/purchase-requests")[0]
    assert kwargs["json"]["status"] == "DRAFT"
    assert kwargs["json"]["items"][0]["itemName"] == "Bearing"


def test_incomplete_submission_is_rejected_before_any_call(client, api, login_as):
    login_as("USER")

    resp = client.post("/purchase/requests/new", data={"action": "submit", "items-0-itemName": "Bearing"})

    assert resp.status_code == 400
    assert b"department is required" in resp.data
    assert api.calls("POST") == []


def test_submission_sends_totals(client, api, login_as):
    login_as("USER")
    api.add("POST", "/api/purchase-requests", status=201, body={"status": "success"})

    resp = client.post(
        "/purchase/requests/new",
        data={
            "action": "submit",
            "department": "Production",
            "purpose": "Retool",
            "items-0-itemName": "Bearing",
            "items-0-purpose": "Spare",
            "items-0-quantity": "3",
            "items-0-estimatedPrice": "1000",
        },
    )

    assert resp.status_code == 302
    payload = api.calls("POST", "/api/purchase-requests")[0][2]["json"]
    assert payload["status"] == "SUBMITTED"
    assert payload["totalAmount"] == 3000
    assert "action" not in payload


def test_submit_existing_draft(client, api, login_as):
    login_as("USER")
    api.add("PATCH", "/api/purchase-requests/r1/submit", body={"status": "success"})

    resp = client.post("/purchase/requests/r1/submit")

    assert resp.status_code == 302
    assert len(api.calls("PATCH", "/api/purchase-requests/r1/submit")) == 1


# ==================== Approvals ====================


def test_approvals_page_lists_pending_requests(client, api, login_as):
    login_as("MANAGER")
    api.add("GET", "/api/purchase-requests/pending/approval", body={"status": "success", "data": {"requests": PENDING}})

    resp = client.get("/purchase/requests/approve?priority=HIGH")

    assert resp.status_code == 200
    assert b"Pending approvals" in resp.data
    assert b"PR-001" in resp.data
    assert b"PR-002" not in resp.data
    assert b"/purchase/requests/r1/decision" in resp.data


def test_approvals_page_needs_manager(client, api, login_as):
    login_as("USER")

    resp = client.get("/purchase/requests/approve")

    assert resp.headers["Location"].endswith("/dashboard")
    assert api.calls("GET", "/api/purchase-requests/pending/approval") == []


def test_approve_patches_request(client, api, login_as):
    login_as("MANAGER")
    api.add("PATCH", "/api/purchase-requests/r1/approve", body={"status": "success"})

    resp = client.post("/purchase/requests/r1/decision", data={"decision": "approve"})

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/purchase/requests/approve")
    _, _, kwargs = api.calls("PATCH", "/api/purchase-requests/r1/approve")[0]
    assert kwargs["json"] == {"comments": ""}


def test_reject_without_reason_makes_no_call(client, api, login_as):
    login_as("MANAGER")

    resp = client.post("/purchase/requests/r1/decision", data={"decision": "reject", "comments": ""}, follow_redirects=True)

    assert b"a reason is required to reject a request" in resp.data
    assert api.calls("PATCH") == []


def test_reject_with_reason(client, api, login_as):
    login_as("ADMIN")
    api.add("PATCH", "/api/purchase-requests/r2/reject", body={"status": "success"})

    client.post("/purchase/requests/r2/decision", data={"decision": "reject", "comments": "Over budget"})

    _, _, kwargs = api.calls("PATCH", "/api/purchase-requests/r2/reject")[0]
    assert kwargs["json"] == {"comments": "Over budget"}


# ==================== Purchase orders ====================


def test_orders_show_display_status_and_filter_locally(client, api, login_as):
    login_as("USER")
    api.add("GET", "/api/purchase/orders", body={"status": "success", "data": {"orders": ORDERS}})

    everything = client.get("/purchase/orders")
    approved = client.get("/purchase/orders?status=APPROVED")

    assert b"Daehan Steel" in everything.data
    assert b"Unknown" in everything.data
    assert b"PO-001" in approved.data
    assert b"PO-002" not in approved.data
    assert api.calls("GET", "/api/purchase/orders")[-1][2].get("params") is None


def test_order_form_uses_lookups(client, api, login_as):
    login_as("MANAGER")
    api.add("GET", "/api/companies", body={"status": "success", "data": {"companies": [{"_id": "s1", "name": "Daehan Steel"}]}})
    api.add("GET", "/api/items", body={"status": "success", "data": {"items": [{"_id": "i1", "code": "CP-1", "name": "Bearing"}]}})

    resp = client.get("/purchase/orders/new")

    assert resp.status_code == 200
    assert b'<option value="s1"' in resp.data
    assert b"CP-1 Bearing" in resp.data
    _, _, kwargs = api.calls("GET", "/api/companies")[0]
    assert kwargs["params"] == {"type": "SUPPLIER"}


def test_order_form_falls_back_to_text_when_lookups_fail(client, api, login_as):
    login_as("MANAGER")

    resp = client.get("/purchase/orders/new")

    assert resp.status_code == 200
    assert b'<input id="supplierId" type="text" name="supplierId"' in resp.data


def test_edit_order_prefills_lines(client, api, login_as):
    login_as("MANAGER")
    order = dict(ORDERS[0], items=[{"itemId": {"_id": "i1", "name": "Bearing"}, "quantity": 4, "unitPrice": 2500}])
    api.add("GET", "/api/purchase/orders/po1", body={"status": "success", "data": {"order": order}})

    resp = client.get("/purchase/orders/po1/edit")

    assert resp.status_code == 200
    assert b'name="items-0-quantity" value="4"' in resp.data
    assert b'name="orderDate" value="2024-05-01"' in resp.data


def test_create_order_posts_lines(client, api, login_as):
    login_as("MANAGER")
    api.add("POST", "/api/purchase/orders", status=201, body={"status": "success"})

    resp = client.post(
        "/purchase/orders/new",
        data={"supplierId": "s1", "orderDate": "2024-05-01", "items-0-itemId": "i1", "items-0-quantity": "4", "items-0-unitPrice": "2500"},
    )

    assert resp.status_code == 302
    payload = api.calls("POST", "/api/purchase/orders")[0][2]["json"]
    assert payload["supplierId"] == "s1"
    assert payload["items"] == [{"itemId": "i1", "quantity": 4.0, "unitPrice": 2500.0}]


# ==================== Receipts ====================

RECEIPT_INPUT = {
    "supplierId": "s1",
    "warehouseId": "w1",
    "receiptDate": "2024-05-02",
    "items-0-itemId": "i1",
    "items-0-itemName": "Bearing",
    "items-0-orderedQuantity": "4",
    "items-0-receivedQuantity": "6",
    "items-0-unitPrice": "10",
    "items-1-itemId": "i2",
    "items-1-receivedQuantity": "2",
    "items-1-unitPrice": "5",
}


def test_receipt_registration_totals_and_warns(client, api, login_as):
    login_as("USER")
    api.add("POST", "/api/receipts", status=201, body={"status": "success"})

    resp = client.post("/purchase/receipts/new", data=RECEIPT_INPUT, follow_redirects=True)

    payload = api.calls("POST", "/api/receipts")[0][2]["json"]
    assert payload["totalQuantity"] == 8
    assert payload["totalAmount"] == 70
    assert len(payload["items"]) == 2
    assert b"Receipt registered." in resp.data
    assert b"received 6 exceeds ordered 4" in resp.data


def test_receipt_without_received_lines_is_rejected(client, api, login_as):
    login_as("USER")

    resp = client.post(
        "/purchase/receipts/new",
        data={"supplierId": "s1", "warehouseId": "w1", "items-0-itemId": "i1", "items-0-receivedQuantity": "0"},
    )

    assert resp.status_code == 400
    assert b"at least one received item is required" in resp.data
    assert api.calls("POST") == []


def test_inspect_receipt_uses_default_notes(client, api, login_as):
    login_as("USER")
    api.add("PATCH", "/api/receipts/rc1/inspect", body={"status": "success"})

    client.post("/purchase/receipts/rc1/inspect", data={"inspectionNotes": ""})

    _, _, kwargs = api.calls("PATCH", "/api/receipts/rc1/inspect")[0]
    assert kwargs["json"] == {"inspectionNotes": "Inspection completed"}


def test_receipt_approval_needs_manager(client, api, login_as):
    login_as("USER")

    resp = client.post("/purchase/receipts/rc1/approve")

    assert resp.headers["Location"].endswith("/dashboard")
    assert api.calls("PATCH") == []


def test_receipt_list_actions_follow_status(client, api, login_as):
    login_as("MANAGER")
    api.add(
        "GET",
        "/api/receipts",
        body={
            "status": "success",
            "data": {
                "receipts": [
                    {"_id": "rc1", "receiptNumber": "RC-1", "status": "RECEIVED"},
                    {"_id": "rc2", "receiptNumber": "RC-2", "status": "INSPECTED"},
                ]
            },
        },
    )

    resp = client.get("/purchase/receipts")

    assert b"/purchase/receipts/rc1/inspect" in resp.data
    assert b"/purchase/receipts/rc2/approve" in resp.data
    assert b"/purchase/receipts/rc1/approve" not in resp.data
