# app/services/certificate_service.py
import json
import logging
import secrets
import string
import time
import uuid
from datetime import datetime
from typing import Any

from qrcode.exceptions import DataOverflowError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.core.qr import generate_qr_data_url
from app.core.security import ADMIN_ROLES
from app.core.urls import get_verification_url
from app.models.app_setting import LOGO_URL_KEY
from app.models.certificate import Certificate
from app.models.user import User
from app.repositories.certificate_repo import CertificateRepository
from app.repositories.setting_repo import SettingRepository
from app.repositories.user_repo import UserRepository
from app.schemas.certificate import CertificateRead, CertificateView, MintResponse
from app.schemas.user import UserRead
from app.services.notification_service import Notifier

logger = logging.getLogger(__name__)

BASE36_ALPHABET = string.digits + string.ascii_lowercase
CERTIFICATE_SUFFIX_LENGTH = 9


def generate_certificate_id() -> str:
    """CERT_<ms timestamp>_<9 random base36 chars>."""
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(CERTIFICATE_SUFFIX_LENGTH))
    return f"CERT_{millis}_{suffix}"


def format_percentage(value: float) -> str:
    """75.0 -> "75", 82.5 -> "82.5"."""
    return f"{value:g}"


def build_qr_payload(user: User, certificate_id: str, issued_on: datetime) -> dict[str, Any]:
    """
    Flat snapshot of the holder's details at mint time.

    Key order is fixed; the serialized text is what gets encoded and stored.
    """
    return {
        "certificateId": certificate_id,
        "name": f"{user.title}. {user.name}",
        "fatherHusbandName": user.father_husband_name,
        "registrationNumber": user.registration_number,
        "mobileNo": user.mobile_no,
        "emailId": user.email,
        "dateOfBirth": user.date_of_birth,
        "courseName": user.course_name,
        "collegeName": user.college_name,
        "experience": user.experience,
        "passoutPercentage": format_percentage(user.passout_percentage),
        "state": user.state,
        "address": user.address,
        "issueDate": issued_on.strftime("%d/%m/%Y"),
        "verificationUrl": get_verification_url(certificate_id),
    }


class CertificateService:
    """
    Certificate minting and authenticated access.

    Minting is not idempotent: every call issues a new certificate, so a
    user can hold several valid certificates (e.g. a reissue after an
    admin corrects their data).
    """

    def __init__(
        self,
        repo: CertificateRepository,
        user_repo: UserRepository,
        setting_repo: SettingRepository,
    ):
        self.repo = repo
        self.user_repo = user_repo
        self.setting_repo = setting_repo

    # ----- Minting -----

    def mint(
        self,
        session: Session,
        notifier: Notifier,
        user_id: uuid.UUID,
    ) -> MintResponse:
        """
        Issue a new certificate for a user.

        Steps:
          1. Load the user (404 if missing).
          2. Generate the certificate id and the payload snapshot.
          3. Render the payload as a QR code (400 if it does not fit).
          4. Persist.
          5. Email the user a link (best-effort; never fails the mint).
        """
        user = self.user_repo.get_by_id(session, user_id)
        if user is None:
            raise NotFoundError("User not found")

        certificate_id = generate_certificate_id()
        payload = build_qr_payload(user, certificate_id, datetime.now())
        qr_payload = json.dumps(payload, ensure_ascii=False)

        try:
            qr_code_data_url = generate_qr_data_url(qr_payload)
        except (ValueError, DataOverflowError):
            # Data outgrew the largest QR version (40)
            logger.warning(
                "Payload for user %s too large for a QR code (%d bytes)",
                user.id,
                len(qr_payload.encode("utf-8")),
            )
            raise ValidationError("Profile details are too long to fit in a QR code")

        certificate = Certificate(
            certificate_id=certificate_id,
            user_id=user.id,
            qr_payload=qr_payload,
            qr_code_data_url=qr_code_data_url,
        )

        try:
            certificate = self.repo.save(session, certificate)
        except IntegrityError:
            raise ConflictError("Certificate id collision, please retry")

        logger.info("Issued certificate %s for user %s", certificate_id, user.id)

        notifier.certificate_issued(user, certificate_id)

        return MintResponse(
            certificate_id=certificate_id,
            data=CertificateRead.from_model(certificate),
        )

    def mint_for_self(
        self,
        session: Session,
        notifier: Notifier,
        user: User,
    ) -> MintResponse:
        if user.is_restricted:
            raise AuthorizationError("Account is restricted. Please contact support.")
        return self.mint(session, notifier, user.id)

    # ----- Reading -----

    def list_for_user(self, session: Session, user: User) -> list[CertificateRead]:
        return [
            CertificateRead.from_model(c)
            for c in self.repo.list_for_user(session, user.id)
        ]

    def view(
        self,
        session: Session,
        certificate_id: str,
        claims: dict[str, Any],
    ) -> CertificateView:
        """
        Certificate page for its owner or an admin.

        Other users get 404 rather than 403 so ids cannot be probed here.
        """
        certificate = self.repo.find_by_id(session, certificate_id)
        if certificate is None:
            raise NotFoundError("Certificate not found")

        is_admin = claims.get("role") in ADMIN_ROLES
        if not is_admin and str(certificate.user_id) != str(claims.get("sub")):
            raise NotFoundError("Certificate not found")

        user = self.user_repo.get_by_id(session, certificate.user_id)
        if user is None:
            raise NotFoundError("Certificate not found")

        logo = self.setting_repo.get(session, LOGO_URL_KEY)
        return CertificateView(
            certificate=CertificateRead.from_model(certificate),
            user=UserRead.model_validate(user),
            logo_url=logo.value if logo else None,
        )
