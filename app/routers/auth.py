# app/routers/auth.py
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from app.core.errors import ValidationError
from app.core.storage_utils import ObjectStorage, get_storage
from app.database import get_session
from app.repositories.user_repo import UserRepository
from app.schemas.auth import (
    AdminLoginRequest,
    AdminLoginResponse,
    LoginRequest,
    LoginResponse,
)
from app.schemas.user import RegisterResponse, UserRegister, UserSummary
from app.services.auth_service import AuthService
from app.services.notification_service import Notifier, get_notifier
from app.services.user_service import UserService

router = APIRouter(tags=["Auth"])

repo = UserRepository()
user_service = UserService(repo)
auth_service = AuthService(repo)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    title: str = Form(...),
    name: str = Form(...),
    father_husband_name: str = Form(...),
    mobile_no: str = Form(...),
    email: str = Form(...),
    date_of_birth: str = Form(...),
    passout_percentage: str = Form(...),
    state: str = Form(...),
    address: str = Form(...),
    course_name: str = Form(...),
    experience: str = Form(...),
    college_name: str = Form(...),
    photo: UploadFile = File(...),
    qr_code: UploadFile | None = File(None),
    session: Session = Depends(get_session),
    storage: ObjectStorage = Depends(get_storage),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Register a new user (multipart form).

    - `photo` is required; `qr_code` (seed image) is optional.
    - The login password is the mobile number.
    """
    try:
        payload = UserRegister(
            title=title,
            name=name,
            father_husband_name=father_husband_name,
            mobile_no=mobile_no,
            email=email,
            date_of_birth=date_of_birth,
            passout_percentage=passout_percentage,
            state=state,
            address=address,
            course_name=course_name,
            experience=experience,
            college_name=college_name,
        )
    except PydanticValidationError as exc:
        raise ValidationError(
            [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]
        )

    seed_qr = None
    if qr_code is not None and qr_code.filename:
        seed_qr = (qr_code.content_type, qr_code.file.read())

    user = user_service.register(
        session,
        storage,
        notifier,
        payload,
        photo=(photo.content_type, photo.file.read()),
        seed_qr=seed_qr,
    )
    return RegisterResponse(
        user=UserSummary(
            id=user.id,
            name=user.name,
            registration_number=user.registration_number,
        )
    )


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
):
    """
    Log in with mobile number or email; the password is the mobile number.

    Errors: 400 missing fields, 404 unknown user, 401 wrong password,
    403 restricted account.
    """
    return auth_service.login(session, payload)


@router.post("/admin/login", response_model=AdminLoginResponse)
def admin_login(payload: AdminLoginRequest):
    """Admin panel login with the configured super-admin credentials."""
    return auth_service.admin_login(payload)
