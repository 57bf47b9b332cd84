# app/services/auth_service.py
import logging
import secrets

from sqlmodel import Session

from app.core.config import get_settings
from app.core.errors import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from app.core.security import create_admin_token, create_user_token, verify_credential
from app.repositories.user_repo import UserRepository
from app.schemas.auth import (
    AdminLoginRequest,
    AdminLoginResponse,
    LoginRequest,
    LoginResponse,
    LoginUser,
)

logger = logging.getLogger(__name__)


class AuthService:
    """
    Credential checks and session token issuance.

      - users log in with mobile number or email; the password is the
        mobile number given at registration
      - the admin panel logs in with the configured SUPER_ADMIN pair
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def login(self, session: Session, payload: LoginRequest) -> LoginResponse:
        identifier = payload.identifier.strip()
        if not identifier or not payload.password:
            raise ValidationError("Phone/email and password are required")

        user = self.repo.get_by_identifier(session, identifier)
        if user is None:
            raise NotFoundError("User not found. Please check your phone number or email.")

        if not verify_credential(user, payload.password):
            raise AuthenticationError("Invalid password. Please use your 10-digit phone number.")

        if user.is_restricted:
            raise AuthorizationError("Account is restricted. Please contact support.")

        logger.info("User %s logged in", user.id)
        return LoginResponse(
            token=create_user_token(user),
            user=LoginUser(
                id=user.id,
                name=user.name,
                email=user.email,
                phone=user.mobile_no,
                registration_number=user.registration_number,
                role=user.role,
            ),
        )

    def admin_login(self, payload: AdminLoginRequest) -> AdminLoginResponse:
        email = payload.email.strip().lower()
        if not email or not payload.password:
            raise ValidationError("Email and password are required")

        if not self._is_valid_admin(email, payload.password):
            logger.warning("Rejected admin login for %s", email)
            raise AuthenticationError("Invalid admin credentials")

        logger.info("Admin %s logged in", email)
        return AdminLoginResponse(token=create_admin_token(email))

    @staticmethod
    def _is_valid_admin(email: str, password: str) -> bool:
        settings = get_settings()
        if not settings.SUPER_ADMIN_EMAIL or not settings.SUPER_ADMIN_PASSWORD:
            return False

        email_ok = secrets.compare_digest(
            email.encode("utf-8"),
            settings.SUPER_ADMIN_EMAIL.strip().lower().encode("utf-8"),
        )
        password_ok = secrets.compare_digest(
            password.encode("utf-8"),
            settings.SUPER_ADMIN_PASSWORD.encode("utf-8"),
        )
        return email_ok and password_ok
