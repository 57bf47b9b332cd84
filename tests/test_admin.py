import json
import uuid

from conftest import PNG_BYTES, register


def test_list_users(client, registered, admin_headers):
    register(client, mobile_no="9555555555")

    response = client.get("/api/admin/users", headers=admin_headers)

    assert response.status_code == 200
    users = response.json()["users"]
    assert len(users) == 2
    assert all("hashed_password" not in u for u in users)


def test_list_users_requires_token(client):
    assert client.get("/api/admin/users").status_code == 401


def test_admin_updates_user(client, registered, admin_headers):
    user_id = registered["user"]["id"]

    response = client.patch(
        f"/api/admin/users/{user_id}",
        json={"course_name": "B.Sc Nursing", "title": "Ms", "is_restricted": True},
        headers=admin_headers,
    )

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["course_name"] == "B.Sc Nursing"
    assert user["title"] == "Ms"
    assert user["is_restricted"] is True

    login = client.post("/api/login", json={"identifier": "a@b.com", "password": "9876543210"})
    assert login.status_code == 403


def test_admin_update_conflict(client, registered, admin_headers):
    other = register(client, email="second@example.com").json()["user"]

    response = client.patch(
        f"/api/admin/users/{other['id']}",
        json={"email": "a@b.com"},
        headers=admin_headers,
    )

    assert response.status_code == 409


def test_admin_update_unknown_user(client, admin_headers):
    response = client.patch(
        f"/api/admin/users/{uuid.uuid4()}",
        json={"state": "Goa"},
        headers=admin_headers,
    )

    assert response.status_code == 404


def test_admin_mints_for_user(client, registered, admin_headers, notifier):
    notifier.sent.clear()

    response = client.post(
        "/api/admin/certificates/generate",
        json={"user_id": registered["user"]["id"]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["data"]["user_id"] == registered["user"]["id"]
    assert notifier.sent[0]["to"] == "a@b.com"


def test_admin_mints_for_restricted_user(client, registered, admin_headers):
    user_id = registered["user"]["id"]
    client.patch(f"/api/admin/users/{user_id}", json={"is_restricted": True}, headers=admin_headers)

    response = client.post(
        "/api/admin/certificates/generate",
        json={"user_id": user_id},
        headers=admin_headers,
    )

    assert response.status_code == 200


def test_admin_mint_unknown_user(client, admin_headers):
    response = client.post(
        "/api/admin/certificates/generate",
        json={"user_id": str(uuid.uuid4())},
        headers=admin_headers,
    )

    assert response.status_code == 404


def test_logo_upload_and_read(client, registered, auth_headers, admin_headers, storage):
    assert client.get("/api/admin/logo", headers=admin_headers).json()["settings"]["logo_url"] is None

    response = client.post(
        "/api/admin/logo",
        files={"logo": ("logo.png", PNG_BYTES, "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 200
    logo_url = response.json()["settings"]["logo_url"]
    assert logo_url.startswith("https://storage.test/logos/")
    assert client.get("/api/admin/logo", headers=admin_headers).json()["settings"]["logo_url"] == logo_url

    certificate_id = client.post(
        "/api/certificates/generate", headers=auth_headers
    ).json()["certificate_id"]
    view = client.get(f"/api/certificates/{certificate_id}", headers=auth_headers).json()
    assert view["logo_url"] == logo_url


def test_logo_rejects_oversized_file(client, admin_headers):
    big = b"\x89PNG" + b"\x00" * (5 * 1024 * 1024)

    response = client.post(
        "/api/admin/logo",
        files={"logo": ("logo.png", big, "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 400


def test_backup_writes_users(client, registered, admin_headers, backup_dir):
    response = client.post("/api/admin/backup", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    assert data["file"].startswith("users_backup_")

    rows = json.loads((backup_dir / data["file"]).read_text(encoding="utf-8"))
    assert rows[0]["email"] == "a@b.com"
    assert rows[0]["registration_number"] == registered["user"]["registration_number"]


def test_backups_never_overwrite_each_other(client, registered, admin_headers, backup_dir):
    first = client.post("/api/admin/backup", headers=admin_headers).json()["file"]
    second = client.post("/api/admin/backup", headers=admin_headers).json()["file"]

    assert first != second
    assert sorted(p.name for p in backup_dir.iterdir()) == sorted([first, second])
