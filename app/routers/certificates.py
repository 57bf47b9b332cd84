# app/routers/certificates.py
from typing import Any

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import get_token_claims, require_user
from app.database import get_session
from app.models.user import User
from app.repositories.certificate_repo import CertificateRepository
from app.repositories.setting_repo import SettingRepository
from app.repositories.user_repo import UserRepository
from app.schemas.certificate import (
    CertificateRead,
    CertificateView,
    ExistsResponse,
    MintResponse,
)
from app.services.certificate_service import CertificateService
from app.services.notification_service import Notifier, get_notifier
from app.services.verification_service import VerificationService

router = APIRouter(prefix="/certificates", tags=["Certificates"])

cert_repo = CertificateRepository()
user_repo = UserRepository()
service = CertificateService(cert_repo, user_repo, SettingRepository())
verification = VerificationService(cert_repo, user_repo)


# -------- User endpoints --------


@router.post("/generate", response_model=MintResponse)
def generate_certificate(
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
    current_user: User = Depends(require_user),
):
    """
    Issue a new certificate for the authenticated user.

    Every call issues a new certificate id. The notification email is
    best-effort.
    """
    return service.mint_for_self(session, notifier, current_user)


@router.get("", response_model=list[CertificateRead])
def list_my_certificates(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """Certificates issued to the authenticated user, newest first."""
    return service.list_for_user(session, current_user)


# -------- Public endpoints --------


@router.get("/verify/{certificate_id}", response_model=ExistsResponse)
def verify_certificate_exists(
    certificate_id: str,
    session: Session = Depends(get_session),
):
    """
    Does this certificate id exist? (public, 404 if not)
    """
    return verification.exists(session, certificate_id)


# -------- Owner / admin view --------


@router.get("/{certificate_id}", response_model=CertificateView)
def view_certificate(
    certificate_id: str,
    session: Session = Depends(get_session),
    claims: dict[str, Any] = Depends(get_token_claims),
):
    """
    Printable certificate data: certificate, holder profile and logo.

    Auth:
      - the holder's user token, or any admin token.
    """
    return service.view(session, certificate_id, claims)
