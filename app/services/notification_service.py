# app/services/notification_service.py
import logging
import re

from app.core import email_client
from app.core.email_templates import certificate_email, registration_email
from app.core.urls import get_certificate_url, get_login_domain
from app.models.user import User

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_BLANK_RE = re.compile(r"\n\s*\n+")


def _html_to_text(html: str) -> str:
    text = _TAG_RE.sub("\n", html)
    return _BLANK_RE.sub("\n\n", text).strip()


class Notifier:
    """
    Best-effort email notifications.

    send() never raises: callers (registration, minting) treat delivery as
    advisory and report success regardless.
    """

    def send(self, to: str, subject: str, html: str) -> bool:
        try:
            email_client.send_email(
                to_email=to,
                subject=subject,
                text_body=_html_to_text(html),
                html_body=html,
            )
        except Exception:
            logger.warning("Email to %s failed (%s)", to, subject, exc_info=True)
            return False

        logger.info("Email sent to %s (%s)", to, subject)
        return True

    def registration_completed(self, user: User) -> bool:
        return self.send(
            user.email,
            "Registration Successful - Certificate System",
            registration_email(user.name, get_login_domain()),
        )

    def certificate_issued(self, user: User, certificate_id: str) -> bool:
        return self.send(
            user.email,
            "Certificate Generated Successfully",
            certificate_email(f"{user.title}. {user.name}", get_certificate_url(certificate_id)),
        )


def get_notifier() -> Notifier:
    """FastAPI dependency; overridden in tests."""
    return Notifier()
