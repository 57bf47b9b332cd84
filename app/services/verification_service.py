# app/services/verification_service.py
import json
import logging
import re
from urllib.parse import unquote, urlparse

from sqlmodel import Session

from app.core.errors import NotFoundError, ValidationError
from app.core.urls import is_valid_redirect_url
from app.repositories.certificate_repo import CertificateRepository
from app.repositories.user_repo import UserRepository
from app.schemas.certificate import (
    CertificateRead,
    ExistsResponse,
    VerificationResponse,
    VerifiedUser,
)

logger = logging.getLogger(__name__)

# Paths that carry a certificate id in a scanned verification URL
_CERTIFICATE_PATH_RE = re.compile(r"^/(?:verify|certificate)/([^/]+)/?$")


class VerificationService:
    """
    Public (unauthenticated) certificate lookup.

    The QR payload is a convenience pointer, not a signed document: only
    the certificate id is taken from it, and everything returned comes
    from the store.
    """

    def __init__(self, repo: CertificateRepository, user_repo: UserRepository):
        self.repo = repo
        self.user_repo = user_repo

    def exists(self, session: Session, certificate_id: str) -> ExistsResponse:
        certificate = self.repo.find_by_id(session, certificate_id.strip())
        if certificate is None:
            raise NotFoundError("Certificate not found")
        return ExistsResponse(exists=True, certificate_id=certificate.certificate_id)

    def resolve(self, session: Session, certificate_id: str) -> VerificationResponse:
        """
        Certificate plus holder.

        A missing certificate and a certificate whose user is gone both
        answer 404 "Certificate not found".
        """
        certificate = self.repo.find_by_id(session, certificate_id.strip())
        user = (
            self.user_repo.get_by_id(session, certificate.user_id)
            if certificate is not None
            else None
        )
        if certificate is None or user is None:
            raise NotFoundError("Certificate not found")

        return VerificationResponse(
            certificate=CertificateRead.from_model(certificate),
            user=VerifiedUser.model_validate(user),
        )

    def resolve_scan(self, session: Session, raw: str) -> VerificationResponse:
        return self.resolve(session, self.extract_certificate_id(raw))

    @staticmethod
    def extract_certificate_id(raw: str) -> str:
        """
        Accepts:
          - a bare certificate id
          - JSON with a "certificateId" field
          - JSON with a "verificationUrl" on our own domain (or loopback)

        Raises:
            ValidationError(400): empty input, foreign URL, or JSON without
            a usable field.
        """
        text = raw.strip()
        if not text:
            raise ValidationError("Certificate ID is required")

        try:
            data = json.loads(text)
        except ValueError:
            return text

        if not isinstance(data, dict):
            # e.g. a numeric-looking id
            return text

        certificate_id = data.get("certificateId")
        if isinstance(certificate_id, str) and certificate_id.strip():
            return certificate_id.strip()

        url = data.get("verificationUrl")
        if isinstance(url, str) and url:
            if not is_valid_redirect_url(url):
                logger.warning("Rejected scanned verification URL %s", url)
                raise ValidationError("Untrusted verification URL")

            match = _CERTIFICATE_PATH_RE.match(urlparse(url).path)
            if match is None:
                raise ValidationError("Verification URL does not name a certificate")
            return unquote(match.group(1))

        raise ValidationError("Invalid QR code format")
