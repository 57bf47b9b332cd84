# app/services/user_service.py
import logging
import secrets
import uuid
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.core.config import get_settings
from app.core.errors import ConflictError, DependencyError, NotFoundError
from app.core.security import hash_credential
from app.core.storage_utils import MB, ObjectStorage, validate_image
from app.models.user import User, utcnow
from app.repositories.user_repo import UserRepository
from app.schemas.user import UserAdminUpdate, UserRegister, UserSelfUpdate
from app.services.notification_service import Notifier

logger = logging.getLogger(__name__)

MAX_PHOTO_BYTES = 10 * MB
MAX_SEED_QR_BYTES = 5 * MB

PHOTO_FOLDER = "user-photos"
SEED_QR_FOLDER = "qr_codes"

# Attempts at drawing an unused registration number before giving up
REGISTRATION_NUMBER_ATTEMPTS = 10


def generate_registration_number(prefix: str, year: int | None = None) -> str:
    """<prefix><4-digit year><5-digit zero-padded random>, e.g. MOH202400042."""
    if year is None:
        year = datetime.now().year
    return f"{prefix}{year}{secrets.randbelow(100_000):05d}"


class UserService:
    """
    Business logic for the identity store.

    Responsibilities:
      - registration (uniqueness, registration number, credential hashing,
        photo upload, welcome email)
      - self-service and admin profile edits (uniqueness re-checks)
      - profile photo replacement
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- Registration -----

    def register(
        self,
        session: Session,
        storage: ObjectStorage,
        notifier: Notifier,
        payload: UserRegister,
        photo: tuple[str | None, bytes],
        seed_qr: tuple[str | None, bytes] | None = None,
    ) -> User:
        """
        Create a user from the registration form.

        Steps:
          1. Validate the photo.
          2. Reject a mobile number or email that is already registered.
          3. Upload the photo (failure fails the registration).
          4. Upload the optional seed QR image (failure is ignored).
          5. Insert the user with a fresh registration number and the
             hashed mobile number as credential.
          6. Send the welcome email (best-effort).
        """
        photo_type, photo_bytes = photo
        photo_ext = validate_image(photo_type, photo_bytes, MAX_PHOTO_BYTES)

        self._ensure_unique(session, email=payload.email, mobile_no=payload.mobile_no)

        photo_url = storage.upload(PHOTO_FOLDER, photo_ext, photo_bytes, photo_type)
        qr_code_url = self._upload_seed_qr(storage, seed_qr)

        user = User(
            **payload.model_dump(),
            photo_url=photo_url,
            qr_code_url=qr_code_url,
            registration_number=self._new_registration_number(session),
            hashed_password=hash_credential(payload.mobile_no),
        )

        try:
            user = self.repo.create(session, user)
        except IntegrityError:
            # Lost a race with a concurrent registration
            self._discard_upload(storage, photo_url)
            raise ConflictError("User already exists")

        logger.info("Registered user %s (%s)", user.id, user.registration_number)
        notifier.registration_completed(user)
        return user

    def _new_registration_number(self, session: Session) -> str:
        prefix = get_settings().REGISTRATION_PREFIX
        for _ in range(REGISTRATION_NUMBER_ATTEMPTS):
            number = generate_registration_number(prefix)
            if self.repo.get_by_registration_number(session, number) is None:
                return number
        raise ConflictError("Could not allocate a registration number")

    @staticmethod
    def _upload_seed_qr(
        storage: ObjectStorage,
        seed_qr: tuple[str | None, bytes] | None,
    ) -> str | None:
        if seed_qr is None or not seed_qr[1]:
            return None

        content_type, data = seed_qr
        ext = validate_image(content_type, data, MAX_SEED_QR_BYTES)
        try:
            return storage.upload(SEED_QR_FOLDER, ext, data, content_type)
        except DependencyError:
            logger.warning("Seed QR upload failed, continuing without it")
            return None

    @staticmethod
    def _discard_upload(storage: ObjectStorage, url: str | None) -> None:
        if not url:
            return
        try:
            storage.delete_public_url(url)
        except DependencyError:
            logger.warning("Could not delete orphaned upload %s", url)

    # ----- Uniqueness -----

    def _ensure_unique(
        self,
        session: Session,
        *,
        email: str | None = None,
        mobile_no: str | None = None,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        """
        Raise ConflictError if another user holds this email or mobile.
        """
        if email is not None and self.repo.find_holder(
            session, email=email, exclude_id=exclude_id
        ):
            raise ConflictError("Email already registered")

        if mobile_no is not None and self.repo.find_holder(
            session, mobile_no=mobile_no, exclude_id=exclude_id
        ):
            raise ConflictError("Mobile number already registered")

    # ----- Lookups -----

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Raises:
            NotFoundError(404): if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self, session: Session) -> list[User]:
        return self.repo.list(session)

    # ----- Profile edits -----

    def update_me(
        self,
        session: Session,
        current_user: User,
        payload: UserSelfUpdate,
    ) -> User:
        """
        Self-service edit of name, email, mobile, state, college,
        experience and percentage.

        The credential stays bound to the mobile number given at
        registration, even if the mobile number is changed here.
        """
        return self._apply_update(session, current_user, payload)

    def admin_update(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserAdminUpdate,
    ) -> User:
        """Admin edit of any profile field, role and restriction flag."""
        user = self.get_user(session, user_id)
        return self._apply_update(session, user, payload)

    def _apply_update(
        self,
        session: Session,
        user: User,
        payload: UserSelfUpdate,
    ) -> User:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)

        self._ensure_unique(
            session,
            email=changes.get("email"),
            mobile_no=changes.get("mobile_no"),
            exclude_id=user.id,
        )

        for field, value in changes.items():
            setattr(user, field, value)
        user.updated_at = utcnow()

        try:
            return self.repo.update(session, user)
        except IntegrityError:
            raise ConflictError("Email or mobile number already registered")

    # ----- Photo -----

    def replace_photo(
        self,
        session: Session,
        storage: ObjectStorage,
        user: User,
        content_type: str | None,
        file_bytes: bytes,
    ) -> User:
        """
        Upload a new profile photo and delete the previous one
        (best-effort).
        """
        ext = validate_image(content_type, file_bytes, MAX_PHOTO_BYTES)
        new_url = storage.upload(PHOTO_FOLDER, ext, file_bytes, content_type)

        old_url = user.photo_url
        user.photo_url = new_url
        user.updated_at = utcnow()
        user = self.repo.update(session, user)

        self._discard_upload(storage, old_url)
        return user
