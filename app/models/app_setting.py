# app/models/app_setting.py
from datetime import datetime

from sqlmodel import SQLModel, Field

from app.models.user import utcnow

LOGO_URL_KEY = "logo_url"


class AppSetting(SQLModel, table=True):
    """
    Admin-managed key/value settings (currently only the certificate logo).
    """

    __tablename__ = "app_settings"

    key: str = Field(primary_key=True, max_length=64)
    value: str
    updated_at: datetime = Field(default_factory=utcnow)
