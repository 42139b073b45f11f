import pytest

API = "/api/v1"
APPROVALS = f"{API}/admin/approvals"


@pytest.fixture
def api(client, admin_headers):
    assert client.post(f"{API}/admin/ministries/seed", headers=admin_headers).status_code == 200
    return client


@pytest.fixture
def post_form(api):
    def _post(**overrides):
        body = {
            "name": "Jane Doe",
            "email": "jane@x.org",
            "ministry": "Adult Bible Study",
            "platforms": ["Bulletin"],
            "announcementBody": "Join us for a new study on the Gospel of John.",
        }
        body.update(overrides)
        response = api.post(f"{API}/announcements", json=body)
        assert response.status_code == 201
        return response.json()

    return _post


def test_review_queue_requires_a_token(api):
    assert api.get(APPROVALS).status_code == 401

    response = api.get(APPROVALS, headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"


def test_queue_lists_pending_oldest_first(api, post_form, admin_headers):
    first = post_form()
    second = post_form(ministry="Adult Faith Formation")
    post_form(ministry="Youth Ministry")

    response = api.get(APPROVALS, headers=admin_headers)

    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [first["id"], second["id"]]


def test_queue_filters_by_status(api, post_form, admin_headers):
    post_form()
    auto = post_form(ministry="Youth Ministry")

    response = api.get(
        APPROVALS,
        params={"status": "approved", "requires_approval": "false"},
        headers=admin_headers,
    )

    assert [item["id"] for item in response.json()] == [auto["id"]]
    assert api.get(APPROVALS, params={"status": "archived"}, headers=admin_headers).status_code == 422


def test_example_scenario_approve(api, post_form, admin_headers, sender):
    record = post_form()

    response = api.post(
        APPROVALS,
        json={"recordId": record["id"], "action": "approve"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Announcement approved"
    assert body["approval"]["approvalStatus"] == "approved"
    assert body["approval"]["approvedBy"] == "coordinator@x.org"
    assert body["approval"]["approvedAt"] is not None
    assert sender.sent[-1]["event"] == "approved"
    assert sender.sent[-1]["submitter"] == "jane@x.org"

    again = api.post(
        APPROVALS,
        json={"recordId": record["id"], "action": "approve"},
        headers=admin_headers,
    )
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "INVALID_STATE_TRANSITION"


def test_reject_requires_reason(api, post_form, admin_headers):
    record = post_form()

    response = api.post(
        APPROVALS,
        json={"recordId": record["id"], "action": "reject", "rejectionReason": "   "},
        headers=admin_headers,
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_ARGUMENT"
    assert error["details"]["field"] == "rejectionReason"

    pending = api.get(APPROVALS, headers=admin_headers).json()
    assert [item["id"] for item in pending] == [record["id"]]


def test_reject_with_reason(api, post_form, admin_headers, sender):
    record = post_form()

    response = api.post(
        APPROVALS,
        json={
            "recordId": record["id"],
            "action": "reject",
            "rejectionReason": " Please add the room number ",
        },
        headers=admin_headers,
    )

    assert response.status_code == 200
    approval = response.json()["approval"]
    assert approval["approvalStatus"] == "rejected"
    assert approval["rejectionReason"] == "Please add the room number"
    assert sender.sent[-1] == {
        "event": "rejected",
        "announcement_id": record["id"],
        "submitter": "jane@x.org",
        "ministry": "Adult Bible Study",
        "reason": "Please add the room number",
    }


def test_missing_record_is_not_found(api, admin_headers):
    response = api.post(
        APPROVALS,
        json={"recordId": "does-not-exist", "action": "approve"},
        headers=admin_headers,
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_single_action_requires_record_id(api, admin_headers):
    response = api.post(APPROVALS, json={"action": "approve"}, headers=admin_headers)

    assert response.status_code == 422


def test_bulk_approve_reports_each_item(api, post_form, admin_headers, sender):
    first = post_form()
    second = post_form(ministry="Adult Faith Formation")
    api.post(APPROVALS, json={"recordId": second["id"], "action": "approve"}, headers=admin_headers)
    sender.sent.clear()

    response = api.post(
        APPROVALS,
        json={
            "bulk": True,
            "action": "approve",
            "recordIds": [first["id"], second["id"], "missing", first["id"]],
        },
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["processed"] == 3
    assert body["succeeded"] == 1
    assert body["failed"] == 2
    assert body["allSucceeded"] is False
    assert body["message"] == "1 of 3 announcements approved"
    assert [(item["id"], item["ok"], item["error"]) for item in body["results"]] == [
        (first["id"], True, None),
        (second["id"], False, "INVALID_STATE_TRANSITION"),
        ("missing", False, "NOT_FOUND"),
    ]
    assert [item["announcement_id"] for item in sender.sent] == [first["id"]]


def test_bulk_reject_without_reason_changes_nothing(api, post_form, admin_headers):
    record = post_form()

    response = api.post(
        APPROVALS,
        json={"bulk": True, "action": "reject", "recordIds": [record["id"]]},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert len(api.get(APPROVALS, headers=admin_headers).json()) == 1


def test_empty_bulk_is_rejected(api, admin_headers):
    response = api.post(
        APPROVALS,
        json={"bulk": True, "action": "approve", "recordIds": []},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "No announcements selected"


def test_scoped_approver(api, post_form, approver_headers):
    in_scope = post_form()
    out_of_scope = post_form(ministry="Small Groups")

    queue = api.get(APPROVALS, headers=approver_headers).json()
    assert [item["id"] for item in queue] == [in_scope["id"]]

    denied = api.post(
        APPROVALS,
        json={"recordId": out_of_scope["id"], "action": "approve"},
        headers=approver_headers,
    )
    assert denied.status_code == 403
    assert denied.json()["error"]["code"] == "FORBIDDEN"

    allowed = api.post(
        APPROVALS,
        json={"recordId": in_scope["id"], "action": "approve"},
        headers=approver_headers,
    )
    assert allowed.status_code == 200
    assert allowed.json()["approval"]["approvedBy"] == "reviewer@x.org"


def test_approver_email_in_body_is_ignored(api, post_form, approver_headers):
    record = post_form()

    response = api.post(
        APPROVALS,
        json={
            "recordId": record["id"],
            "action": "approve",
            "approverEmail": "pastor@x.org",
        },
        headers=approver_headers,
    )

    assert response.status_code == 200
    assert response.json()["approval"]["approvedBy"] == "reviewer@x.org"


def test_history_endpoint(api, post_form, admin_headers):
    record = post_form()
    api.post(
        APPROVALS,
        json={"recordId": record["id"], "action": "reject", "rejectionReason": "Too long"},
        headers=admin_headers,
    )

    response = api.get(f"{APPROVALS}/{record['id']}/history", headers=admin_headers)

    assert response.status_code == 200
    entries = response.json()
    assert [entry["action"] for entry in entries] == ["rejected", "submitted"]
    assert entries[0]["performedBy"] == "coordinator@x.org"
    assert entries[0]["notes"] == "Too long"
    assert entries[0]["previousStatus"] == "pending"
    assert entries[0]["newStatus"] == "rejected"

    assert api.get(f"{APPROVALS}/missing/history", headers=admin_headers).status_code == 404
