# app/core/urls.py
"""
Public URL construction.

Domain resolution order: BASE_URL, then APP_DOMAIN, then localhost.
"""

from urllib.parse import urlparse

from app.core.config import get_settings

DEFAULT_APP_DOMAIN = "http://localhost:3000"

LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1"})


def get_app_domain() -> str:
    settings = get_settings()
    domain = settings.BASE_URL or settings.APP_DOMAIN or DEFAULT_APP_DOMAIN
    return domain.rstrip("/")


def get_login_domain() -> str:
    settings = get_settings()
    if settings.LOGIN_DOMAIN:
        return settings.LOGIN_DOMAIN
    return f"{get_app_domain()}/login"


def get_certificate_url(certificate_id: str) -> str:
    """Authenticated certificate view (linked from the email)."""
    return f"{get_app_domain()}/certificate/{certificate_id}"


def get_verification_url(certificate_id: str) -> str:
    """Public verification page (embedded in the QR payload)."""
    return f"{get_app_domain()}/verify/{certificate_id}"


def is_valid_redirect_url(url: str) -> bool:
    """
    Only URLs on the application's own host (or loopback) are trusted.
    """
    try:
        parsed = urlparse(url)
        app_host = urlparse(get_app_domain()).hostname
    except ValueError:
        return False

    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return False

    return parsed.hostname == app_host or parsed.hostname in LOOPBACK_HOSTS
