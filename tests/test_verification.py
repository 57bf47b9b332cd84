import json

import pytest
from sqlmodel import select

from app.core.errors import ValidationError
from app.models.user import User
from app.services.verification_service import VerificationService

extract = VerificationService.extract_certificate_id


def test_extract_bare_id():
    assert extract("  CERT_1700000000000_abc123xyz ") == "CERT_1700000000000_abc123xyz"


def test_extract_from_certificate_id_field():
    raw = json.dumps({"certificateId": "CERT_1_aaaaaaaaa", "name": "Mr. X"})

    assert extract(raw) == "CERT_1_aaaaaaaaa"


def test_extract_from_own_verification_url():
    raw = json.dumps({"verificationUrl": "https://certs.example.org/verify/CERT_2_bbbbbbbbb"})

    assert extract(raw) == "CERT_2_bbbbbbbbb"


def test_extract_from_loopback_certificate_url():
    raw = json.dumps({"verificationUrl": "http://localhost:3000/certificate/CERT_3_ccccccccc"})

    assert extract(raw) == "CERT_3_ccccccccc"


@pytest.mark.parametrize(
    "url",
    [
        "https://evil.example.com/verify/CERT_4_ddddddddd",
        "https://certs.example.org.evil.com/verify/CERT_4_ddddddddd",
        "javascript:alert(1)",
    ],
)
def test_foreign_verification_url_is_rejected(url):
    with pytest.raises(ValidationError):
        extract(json.dumps({"verificationUrl": url}))


def test_own_url_without_certificate_path_is_rejected():
    with pytest.raises(ValidationError):
        extract(json.dumps({"verificationUrl": "https://certs.example.org/admin"}))


def test_json_without_known_fields_is_rejected():
    with pytest.raises(ValidationError):
        extract(json.dumps({"hello": "world"}))


def test_empty_input_is_rejected():
    with pytest.raises(ValidationError):
        extract("   ")


def test_scan_endpoint_follows_own_url(client, registered, auth_headers):
    minted = client.post("/api/certificates/generate", headers=auth_headers).json()
    scanned = minted["data"]["qr_payload"]

    by_payload = client.post("/api/verify/scan", json={"payload": scanned})
    by_url = client.post(
        "/api/verify/scan",
        json={"payload": json.dumps({"verificationUrl": minted["data"]["qr_data"]["verificationUrl"]})},
    )
    by_id = client.post("/api/verify/scan", json={"payload": minted["certificate_id"]})

    for response in (by_payload, by_url, by_id):
        assert response.status_code == 200
        assert response.json()["certificate"]["certificate_id"] == minted["certificate_id"]
        assert response.json()["verified"] is True


def test_scan_endpoint_rejects_foreign_url(client):
    payload = json.dumps({"verificationUrl": "https://phish.example.net/verify/CERT_5_eeeeeeeee"})

    response = client.post("/api/verify/scan", json={"payload": payload})

    assert response.status_code == 400


def test_unknown_certificate_is_not_found(client):
    assert client.get("/api/verify/CERT_0_zzzzzzzzz").status_code == 404
    assert client.post("/api/verify/scan", json={"payload": "CERT_0_zzzzzzzzz"}).status_code == 404


def test_verification_exposes_public_projection(client, registered, auth_headers):
    certificate_id = client.post(
        "/api/certificates/generate", headers=auth_headers
    ).json()["certificate_id"]

    user = client.get(f"/api/verify/{certificate_id}").json()["user"]

    assert user["registration_number"] == registered["user"]["registration_number"]
    assert "hashed_password" not in user
    assert "role" not in user


def test_extract_decodes_percent_encoded_id():
    raw = json.dumps({"verificationUrl": "https://certs.example.org/verify/CERT%5F6%5Ffffffffff"})

    assert extract(raw) == "CERT_6_fffffffff"


def test_certificate_of_deleted_user_is_not_found(client, registered, auth_headers, db_session):
    certificate_id = client.post(
        "/api/certificates/generate", headers=auth_headers
    ).json()["certificate_id"]

    user = db_session.exec(select(User).where(User.email == "a@b.com")).one()
    db_session.delete(user)
    db_session.commit()

    responses = [
        client.get(f"/api/verify/{certificate_id}"),
        client.post("/api/verify/scan", json={"payload": certificate_id}),
    ]

    assert [r.status_code for r in responses] == [404, 404]
    assert [r.json()["detail"] for r in responses] == ["Certificate not found"] * 2
