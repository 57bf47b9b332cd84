# app/schemas/user.py
import re
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

Title = Literal["Mr", "Ms"]

# App-level roles stored on the user row. The panel's super_admin exists
# only as a token claim.
Role = Literal["user", "admin"]

MOBILE_RE = re.compile(r"^[0-9]{10}$")

# Every profile field is copied into the certificate QR payload, which has
# to fit in one QR code (2331 bytes at error correction level M).
NAME_MAX = 100
DOB_MAX = 20
STATE_MAX = 100
ADDRESS_MAX = 500
TEXT_MAX = 200


def _check_mobile(v: str) -> str:
    v = v.strip()
    if not MOBILE_RE.match(v):
        raise ValueError("mobile number must be exactly 10 digits")
    return v


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty")
    return v


def _strip_optional(v: str | None) -> str | None:
    if v is None:
        return v
    return _strip_required(v)


class UserRegister(SQLModel):
    """
    Registration form fields (multipart text parts).

    The photo and the optional seed QR image travel as file parts and are
    handled by the router, not by this schema.
    """

    model_config = ConfigDict(extra="forbid")

    title: Title
    name: str = Field(max_length=NAME_MAX)
    father_husband_name: str = Field(max_length=NAME_MAX)
    mobile_no: str
    email: EmailStr
    date_of_birth: str = Field(max_length=DOB_MAX)
    passout_percentage: float = Field(ge=0, le=100)
    state: str = Field(max_length=STATE_MAX)
    address: str = Field(max_length=ADDRESS_MAX)
    course_name: str = Field(max_length=TEXT_MAX)
    experience: str = Field(max_length=TEXT_MAX)
    college_name: str = Field(max_length=TEXT_MAX)

    @field_validator("mobile_no")
    @classmethod
    def check_mobile(cls, v: str) -> str:
        return _check_mobile(v)

    @field_validator(
        "name",
        "father_husband_name",
        "date_of_birth",
        "state",
        "address",
        "course_name",
        "experience",
        "college_name",
    )
    @classmethod
    def not_empty(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserRead(SQLModel):
    """Full profile returned to the owner and to admins (no credential)."""

    id: uuid.UUID
    title: Title
    name: str
    father_husband_name: str
    mobile_no: str
    email: str
    date_of_birth: str
    passout_percentage: float
    state: str
    address: str
    course_name: str
    experience: str
    college_name: str
    photo_url: str
    qr_code_url: str | None
    registration_number: str
    role: Role
    is_restricted: bool
    created_at: datetime
    updated_at: datetime


class UserSummary(SQLModel):
    id: uuid.UUID
    name: str
    registration_number: str


class RegisterResponse(SQLModel):
    success: bool = True
    message: str = "Registration successful"
    user: UserSummary


class UserSelfUpdate(SQLModel):
    """
    Partial self-service profile update.

    Registration number, photo and credential are not editable here.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=NAME_MAX)
    email: EmailStr | None = None
    mobile_no: str | None = None
    state: str | None = Field(default=None, max_length=STATE_MAX)
    college_name: str | None = Field(default=None, max_length=TEXT_MAX)
    experience: str | None = Field(default=None, max_length=TEXT_MAX)
    passout_percentage: float | None = Field(default=None, ge=0, le=100)

    @field_validator("mobile_no")
    @classmethod
    def check_mobile(cls, v: str | None) -> str | None:
        return _check_mobile(v) if v is not None else v

    @field_validator("name", "state", "college_name", "experience")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        return _strip_optional(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        return v.strip().lower() if v is not None else v


class UserAdminUpdate(UserSelfUpdate):
    """Admin edit: every profile field plus role and restriction flag."""

    title: Title | None = None
    father_husband_name: str | None = Field(default=None, max_length=NAME_MAX)
    date_of_birth: str | None = Field(default=None, max_length=DOB_MAX)
    address: str | None = Field(default=None, max_length=ADDRESS_MAX)
    course_name: str | None = Field(default=None, max_length=TEXT_MAX)
    role: Role | None = None
    is_restricted: bool | None = None

    @field_validator(
        "father_husband_name",
        "date_of_birth",
        "address",
        "course_name",
    )
    @classmethod
    def admin_not_empty(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class UserResponse(SQLModel):
    success: bool = True
    message: str | None = None
    user: UserRead


class UserListResponse(SQLModel):
    success: bool = True
    users: list[UserRead]


class PhotoResponse(SQLModel):
    success: bool = True
    message: str = "Photo updated successfully"
    photo_url: str
