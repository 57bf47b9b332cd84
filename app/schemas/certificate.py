# app/schemas/certificate.py
import uuid
from datetime import datetime
from typing import Any

from pydantic import ConfigDict
from sqlmodel import SQLModel

from app.models.certificate import Certificate
from app.schemas.user import UserRead


class CertificateRead(SQLModel):
    """
    A stored certificate.

    qr_payload is the exact JSON text encoded in the QR image; qr_data is
    the same content parsed.
    """

    certificate_id: str
    user_id: uuid.UUID
    qr_payload: str
    qr_data: dict[str, Any]
    qr_code_data_url: str
    created_at: datetime

    @classmethod
    def from_model(cls, certificate: Certificate) -> "CertificateRead":
        return cls(
            certificate_id=certificate.certificate_id,
            user_id=certificate.user_id,
            qr_payload=certificate.qr_payload,
            qr_data=certificate.qr_data,
            qr_code_data_url=certificate.qr_code_data_url,
            created_at=certificate.created_at,
        )


class MintResponse(SQLModel):
    success: bool = True
    certificate_id: str
    message: str = "Certificate generated successfully"
    data: CertificateRead


class AdminGenerateRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    user_id: uuid.UUID


class CertificateView(SQLModel):
    """Authenticated certificate page: certificate, owner, current logo."""

    success: bool = True
    certificate: CertificateRead
    user: UserRead
    logo_url: str | None = None


class VerifiedUser(SQLModel):
    """Public projection of the certificate holder."""

    title: str
    name: str
    father_husband_name: str
    registration_number: str
    course_name: str
    college_name: str
    experience: str
    state: str
    photo_url: str


class VerificationResponse(SQLModel):
    success: bool = True
    verified: bool = True
    certificate: CertificateRead
    user: VerifiedUser


class ExistsResponse(SQLModel):
    success: bool = True
    exists: bool
    certificate_id: str


class ScanRequest(SQLModel):
    """Raw text read from a QR code, or a typed certificate id."""

    model_config = ConfigDict(extra="forbid")

    payload: str
