# app/routers/users.py
from fastapi import APIRouter, Depends, File, UploadFile
from sqlmodel import Session

from app.core.auth import require_user
from app.core.storage_utils import ObjectStorage, get_storage
from app.database import get_session
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import PhotoResponse, UserRead, UserResponse, UserSelfUpdate
from app.services.user_service import UserService

router = APIRouter(prefix="/user", tags=["User"])

repo = UserRepository()
service = UserService(repo)


@router.get("/me", response_model=UserResponse)
def read_me(current_user: User = Depends(require_user)):
    """
    Return the authenticated user's profile.

    Auth:
      - Requires a user token.
    """
    return UserResponse(user=UserRead.model_validate(current_user))


@router.patch("/me", response_model=UserResponse)
def update_me(
    payload: UserSelfUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Partial profile update.

    Editable: name, email, mobile_no, state, college_name, experience,
    passout_percentage. A new email or mobile must not belong to
    another user (409).
    """
    user = service.update_me(session, current_user, payload)
    return UserResponse(
        message="Profile updated successfully",
        user=UserRead.model_validate(user),
    )


@router.post("/photo", response_model=PhotoResponse)
def upload_photo(
    photo: UploadFile = File(...),
    session: Session = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
    current_user: User = Depends(require_user),
):
    """
    Replace the profile photo.

    - Accepts JPEG, PNG, WEBP (max 10MB).
    - The old photo is removed from storage (best-effort).
    """
    user = service.replace_photo(
        session,
        storage,
        current_user,
        content_type=photo.content_type,
        file_bytes=photo.file.read(),
    )
    return PhotoResponse(photo_url=user.photo_url)
