API = "/api/v1"
MINISTRIES = f"{API}/admin/ministries"


def test_seed_is_idempotent(client, admin_headers):
    first = client.post(f"{MINISTRIES}/seed", headers=admin_headers)
    second = client.post(f"{MINISTRIES}/seed", headers=admin_headers)

    assert first.json() == {"created": 19, "skipped": 0}
    assert second.json() == {"created": 0, "skipped": 19}


def test_ministry_crud(client, admin_headers):
    created = client.post(
        MINISTRIES,
        json={
            "name": "Young Adults",
            "aliases": "YA, Young Adult Group, ya",
            "requiresApproval": True,
            "description": "Ages 18 to 35",
        },
        headers=admin_headers,
    )
    assert created.status_code == 201
    ministry = created.json()
    assert ministry["aliases"] == ["YA", "Young Adult Group"]
    assert ministry["approvalCoordinator"] == "adult-discipleship"
    assert ministry["active"] is True

    fetched = client.get(f"{MINISTRIES}/{ministry['id']}", headers=admin_headers)
    assert fetched.json()["name"] == "Young Adults"

    updated = client.put(
        f"{MINISTRIES}/{ministry['id']}",
        json={"requiresApproval": False, "active": False},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["requiresApproval"] is False
    assert updated.json()["name"] == "Young Adults"

    listed = client.get(MINISTRIES, params={"active_only": "true"}, headers=admin_headers)
    assert ministry["id"] not in [item["id"] for item in listed.json()]

    deleted = client.delete(f"{MINISTRIES}/{ministry['id']}", headers=admin_headers)
    assert deleted.status_code == 204
    assert client.get(f"{MINISTRIES}/{ministry['id']}", headers=admin_headers).status_code == 404


def test_duplicate_name_conflicts(client, admin_headers):
    client.post(MINISTRIES, json={"name": "Hospitality Team"}, headers=admin_headers)

    response = client.post(MINISTRIES, json={"name": "  hospitality   team "}, headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


def test_new_ministry_routes_submissions_immediately(client, admin_headers):
    client.post(
        MINISTRIES,
        json={"name": "Grief Share", "requiresApproval": True},
        headers=admin_headers,
    )

    response = client.post(
        f"{API}/announcements",
        json={
            "name": "Ann",
            "email": "ann@x.org",
            "ministry": "grief share",
            "announcementBody": "Support group starts Tuesday.",
        },
    )

    assert response.json()["approvalStatus"] == "pending"


def test_admin_endpoints_require_admin_role(client, approver_headers):
    assert client.get(MINISTRIES).status_code == 401

    response = client.post(f"{MINISTRIES}/seed", headers=approver_headers)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


def test_unlisted_staff_get_the_approver_role(client, auth_headers):
    headers = auth_headers("stranger@x.org")

    assert client.get(MINISTRIES, headers=headers).status_code == 403
    assert client.get(f"{API}/admin/approvals", headers=headers).status_code == 200


def test_public_search(client, admin_headers):
    client.post(f"{MINISTRIES}/seed", headers=admin_headers)

    response = client.get(f"{API}/ministries/search", params={"q": "adult", "limit": 3})

    assert response.status_code == 200
    results = response.json()
    assert len(results) == 3
    assert all(item["name"].startswith("Adult") for item in results)
    assert set(results[0]) == {"id", "name", "description", "requiresApproval"}

    assert client.get(f"{API}/ministries/search", params={"limit": 0}).status_code == 422
