# app/schemas/admin.py
from datetime import datetime

from sqlmodel import SQLModel


class LogoSettings(SQLModel):
    logo_url: str | None = None
    updated_at: datetime | None = None


class LogoResponse(SQLModel):
    success: bool = True
    message: str | None = None
    settings: LogoSettings


class BackupResponse(SQLModel):
    success: bool = True
    message: str = "Backup created successfully"
    file: str
    count: int
    timestamp: datetime
