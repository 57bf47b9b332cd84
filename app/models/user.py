# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    Registered candidate (or admin) record.

    Identity:
      - id: generated on registration
      - registration_number: generated on registration, never changes

    Uniqueness (enforced by unique indexes):
      - mobile_no, email, registration_number

    Credential:
      - hashed_password is the bcrypt hash of the mobile number given at
        registration. The plain value is never stored.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    title: str = Field(max_length=2, description="Mr | Ms")
    name: str = Field(max_length=100)
    father_husband_name: str = Field(max_length=100)

    mobile_no: str = Field(
        max_length=10,
        unique=True,
        index=True,
        description="10-digit mobile number; also the login password",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Stored lower-cased",
    )

    date_of_birth: str
    passout_percentage: float = Field(ge=0, le=100)
    state: str
    address: str
    course_name: str
    experience: str
    college_name: str

    photo_url: str = Field(description="Public URL in object storage")
    qr_code_url: str | None = Field(
        default=None,
        description="Optional seed QR image uploaded at registration",
    )

    registration_number: str = Field(
        unique=True,
        index=True,
        description="<PREFIX><yyyy><5 digits>",
    )

    role: str = Field(
        default="user",
        index=True,
        description="Application role: user | admin",
    )

    is_restricted: bool = Field(
        default=False,
        description="Restricted users cannot log in or generate certificates",
    )

    hashed_password: str

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last modification timestamp (UTC)",
    )
