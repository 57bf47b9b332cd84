# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string; sqlite works for local dev)
      - JWT_SECRET (HS256 signing secret for session tokens)

    Optional:
      - SUPER_ADMIN_EMAIL / SUPER_ADMIN_PASSWORD (admin panel login;
        admin login is refused while either is unset)
      - SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY (object storage for
        profile photos, seed QR images and the admin logo)
      - BASE_URL / APP_DOMAIN / LOGIN_DOMAIN (links in emails and QR codes)

    SMTP settings are read by app.core.email_client.
    """

    PROJECT_NAME: str = "Certificate Portal API"
    API_V1_STR: str = "/api"

    DATABASE_URL: str

    # Session tokens
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    USER_TOKEN_EXPIRE_DAYS: int = 7
    ADMIN_TOKEN_EXPIRE_HOURS: int = 24

    # Cost factor for hashing the phone-number credential
    BCRYPT_ROUNDS: int = 10

    # Registration numbers look like MOH202412345
    REGISTRATION_PREFIX: str = "MOH"

    # Public URLs
    BASE_URL: str | None = None
    APP_DOMAIN: str | None = None
    LOGIN_DOMAIN: str | None = None

    # Admin panel (out-of-band credentials, not a database row)
    SUPER_ADMIN_EMAIL: str | None = None
    SUPER_ADMIN_PASSWORD: str | None = None

    # Supabase Storage
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "assets"

    # Where admin-triggered user backups are written
    BACKUP_DIR: str = "data/backups"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
