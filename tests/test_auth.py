from datetime import datetime, timedelta, timezone

from jose import jwt
from sqlmodel import select

from app.core.config import get_settings
from app.models.user import User
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def _decode(token: str) -> dict:
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])


def test_login_with_email(client, registered):
    response = client.post(
        "/api/login",
        json={"identifier": "a@b.com", "password": "9876543210"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["token"]
    assert data["user"]["phone"] == "9876543210"
    assert data["user"]["email"] == "a@b.com"
    assert data["user"]["registration_number"] == registered["user"]["registration_number"]
    assert data["user"]["role"] == "user"


def test_login_with_mobile(client, registered):
    response = client.post(
        "/api/login",
        json={"identifier": " 9876543210 ", "password": "9876543210"},
    )

    assert response.status_code == 200


def test_login_email_is_case_insensitive(client, registered):
    response = client.post(
        "/api/login",
        json={"identifier": "A@B.COM", "password": "9876543210"},
    )

    assert response.status_code == 200


def test_login_wrong_password(client, registered):
    response = client.post(
        "/api/login",
        json={"identifier": "a@b.com", "password": "9876543211"},
    )

    assert response.status_code == 401


def test_login_unknown_user(client):
    response = client.post(
        "/api/login",
        json={"identifier": "nobody@example.com", "password": "9876543210"},
    )

    assert response.status_code == 404


def test_login_missing_fields(client):
    response = client.post("/api/login", json={"identifier": "", "password": ""})

    assert response.status_code == 400


def test_login_restricted_user(client, registered, db_session):
    user = db_session.exec(select(User).where(User.email == "a@b.com")).one()
    user.is_restricted = True
    db_session.add(user)
    db_session.commit()

    response = client.post(
        "/api/login",
        json={"identifier": "a@b.com", "password": "9876543210"},
    )

    assert response.status_code == 403


def test_user_token_claims_and_expiry(client, registered, user_token):
    claims = _decode(user_token)

    assert claims["sub"] == registered["user"]["id"]
    assert claims["email"] == "a@b.com"
    assert claims["phone"] == "9876543210"
    assert claims["role"] == "user"

    expires = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
    remaining = expires - datetime.now(timezone.utc)
    assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)


def test_admin_login(client):
    response = client.post(
        "/api/admin/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )

    assert response.status_code == 200
    claims = _decode(response.json()["token"])
    assert claims["role"] == "super_admin"

    expires = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
    remaining = expires - datetime.now(timezone.utc)
    assert timedelta(hours=23, minutes=59) < remaining <= timedelta(hours=24)


def test_admin_login_wrong_password(client):
    response = client.post(
        "/api/admin/login",
        json={"email": ADMIN_EMAIL, "password": "nope"},
    )

    assert response.status_code == 401


def test_admin_login_missing_fields(client):
    response = client.post("/api/admin/login", json={"email": ADMIN_EMAIL})

    assert response.status_code == 400


def test_protected_route_without_token(client):
    response = client.get("/api/user/me")

    assert response.status_code == 401


def test_expired_and_tampered_tokens_are_rejected_alike(client, registered):
    settings = get_settings()
    expired = jwt.encode(
        {
            "sub": registered["user"]["id"],
            "role": "user",
            "type": "user",
            "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
        },
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
    )
    forged = jwt.encode(
        {
            "sub": registered["user"]["id"],
            "role": "user",
            "type": "user",
            "exp": datetime.now(timezone.utc) + timedelta(days=1),
        },
        "some-other-secret",
        algorithm=settings.JWT_ALG,
    )

    responses = [
        client.get("/api/user/me", headers={"Authorization": f"Bearer {token}"})
        for token in (expired, forged, "not-a-jwt")
    ]

    assert {r.status_code for r in responses} == {401}
    assert {r.json()["detail"] for r in responses} == {"Invalid or expired token"}


def test_user_token_cannot_reach_admin_routes(client, auth_headers):
    response = client.get("/api/admin/users", headers=auth_headers)

    assert response.status_code == 403


def test_admin_token_is_not_a_user_session(client, admin_headers):
    response = client.get("/api/user/me", headers=admin_headers)

    assert response.status_code == 401
