# app/routers/verify.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.database import get_session
from app.repositories.certificate_repo import CertificateRepository
from app.repositories.user_repo import UserRepository
from app.schemas.certificate import ScanRequest, VerificationResponse
from app.services.verification_service import VerificationService

router = APIRouter(prefix="/verify", tags=["Verification"])

service = VerificationService(CertificateRepository(), UserRepository())


@router.post("/scan", response_model=VerificationResponse)
def verify_scan(
    payload: ScanRequest,
    session: Session = Depends(get_session),
):
    """
    Resolve scanned QR text or a typed id.

    Accepts a bare certificate id, or QR JSON carrying `certificateId` or a
    `verificationUrl` on this application's domain.
    """
    return service.resolve_scan(session, payload.payload)


@router.get("/{certificate_id}", response_model=VerificationResponse)
def verify_certificate(
    certificate_id: str,
    session: Session = Depends(get_session),
):
    """
    Public verification page data: the stored certificate snapshot and
    its holder. No authentication.
    """
    return service.resolve(session, certificate_id)
