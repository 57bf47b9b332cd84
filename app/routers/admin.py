# app/routers/admin.py
import uuid

from fastapi import APIRouter, Depends, File, UploadFile
from sqlmodel import Session

from app.core.auth import require_admin
from app.core.storage_utils import ObjectStorage, get_storage
from app.database import get_session
from app.repositories.certificate_repo import CertificateRepository
from app.repositories.setting_repo import SettingRepository
from app.repositories.user_repo import UserRepository
from app.schemas.admin import BackupResponse, LogoResponse
from app.schemas.certificate import AdminGenerateRequest, MintResponse
from app.schemas.user import UserAdminUpdate, UserListResponse, UserRead, UserResponse
from app.services.admin_service import AdminService
from app.services.certificate_service import CertificateService
from app.services.notification_service import Notifier, get_notifier
from app.services.user_service import UserService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

user_repo = UserRepository()
setting_repo = SettingRepository()
user_service = UserService(user_repo)
certificate_service = CertificateService(CertificateRepository(), user_repo, setting_repo)
admin_service = AdminService(user_repo, setting_repo)


# -------- Users --------


@router.get("/users", response_model=UserListResponse)
def list_users(session: Session = Depends(get_session)):
    """All registered users, newest first."""
    users = user_service.list_users(session)
    return UserListResponse(users=[UserRead.model_validate(u) for u in users])


@router.patch("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: uuid.UUID,
    payload: UserAdminUpdate,
    session: Session = Depends(get_session),
):
    """
    Edit any profile field, role or restriction flag.

    Registration number and credential are not editable.
    """
    user = user_service.admin_update(session, user_id, payload)
    return UserResponse(
        message="User updated successfully",
        user=UserRead.model_validate(user),
    )


# -------- Certificates --------


@router.post("/certificates/generate", response_model=MintResponse)
def generate_for_user(
    payload: AdminGenerateRequest,
    session: Session = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Issue a certificate on behalf of a user (e.g. after correcting
    their details). Works for restricted users as well.
    """
    return certificate_service.mint(session, notifier, payload.user_id)


# -------- Logo --------


@router.get("/logo", response_model=LogoResponse)
def get_logo(session: Session = Depends(get_session)):
    return LogoResponse(settings=admin_service.get_logo(session))


@router.post("/logo", response_model=LogoResponse)
def upload_logo(
    logo: UploadFile = File(...),
    session: Session = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
):
    """
    Upload the logo printed on certificates (JPEG, PNG, WEBP; max 5MB).
    """
    settings = admin_service.set_logo(
        session,
        storage,
        content_type=logo.content_type,
        file_bytes=logo.file.read(),
    )
    return LogoResponse(message="Logo updated successfully", settings=settings)


# -------- Backup --------


@router.post("/backup", response_model=BackupResponse)
def create_backup(session: Session = Depends(get_session)):
    """Snapshot the user collection to a timestamped JSON file."""
    return admin_service.backup_users(session)
