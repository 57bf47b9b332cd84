# app/models/certificate.py
import json
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import Column, Text
from sqlmodel import SQLModel, Field

from app.models.user import utcnow


class Certificate(SQLModel, table=True):
    """
    An issued certificate.

    Rows are append-only: once minted, neither the payload nor the QR image
    is ever updated, so later profile edits do not leak into certificates
    issued before them.

    qr_payload holds the exact JSON text that was encoded into the QR code.
    """

    __tablename__ = "certificates"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    certificate_id: str = Field(
        max_length=64,
        unique=True,
        index=True,
        description="CERT_<ms timestamp>_<9 base36 chars>",
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
        description="FK to users.id",
    )

    qr_payload: str = Field(sa_column=Column(Text, nullable=False))

    qr_code_data_url: str = Field(
        sa_column=Column(Text, nullable=False),
        description="data:image/png;base64,... rendering of qr_payload",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Mint timestamp (UTC)",
    )

    @property
    def qr_data(self) -> dict[str, Any]:
        return json.loads(self.qr_payload)
