# app/core/email_client.py
from __future__ import annotations

"""
SMTP client for outgoing notifications.

Responsibilities:
  - Read SMTP configuration from environment variables.
  - Provide a single send_email(...) function for the notification service.
  - Support both implicit SSL and STARTTLS; plaintext relays are refused.

Typical .env configuration (SSL on 465):

    SMTP_HOST=smtp.zoho.eu
    SMTP_PORT=465
    SMTP_USERNAME=support@example.org
    SMTP_PASSWORD=app-specific-password
    SMTP_FROM_EMAIL=support@example.org
    SMTP_FROM_NAME=Certificate System
    SMTP_USE_TLS=false
    SMTP_USE_SSL=true
"""

import os
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

SMTP_TIMEOUT_SECONDS = 30


def _get_bool_env(name: str, default: bool = False) -> bool:
    """
    Read a boolean env var.

    Accepted truthy values (case-insensitive):
      - "1", "true", "yes", "y"

    Everything else is treated as False.
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y"}


@dataclass(frozen=True)
class SmtpConfig:
    host: str | None
    port: int
    username: str | None
    password: str | None
    from_email: str
    from_name: str
    use_tls: bool
    use_ssl: bool

    @property
    def is_complete(self) -> bool:
        return bool(self.host and self.username and self.password)


def load_smtp_config() -> SmtpConfig:
    """Read SMTP_* variables from the environment."""
    username = os.getenv("SMTP_USERNAME")
    return SmtpConfig(
        host=os.getenv("SMTP_HOST"),
        port=int(os.getenv("SMTP_PORT", "465")),
        username=username,
        password=os.getenv("SMTP_PASSWORD"),
        # Fallback: if FROM_EMAIL is not set, default to username
        from_email=os.getenv("SMTP_FROM_EMAIL", username or ""),
        from_name=os.getenv("SMTP_FROM_NAME", "Certificate System"),
        use_tls=_get_bool_env("SMTP_USE_TLS", default=False),
        use_ssl=_get_bool_env("SMTP_USE_SSL", default=True),
    )


def _create_smtp_client(config: SmtpConfig) -> smtplib.SMTP:
    """
    Open an encrypted SMTP connection.

      - SMTP_USE_SSL → smtplib.SMTP_SSL (typically port 465)
      - SMTP_USE_TLS → smtplib.SMTP + STARTTLS (typically port 587)
    """
    if config.use_ssl:
        return smtplib.SMTP_SSL(config.host, config.port, timeout=SMTP_TIMEOUT_SECONDS)

    if not config.use_tls:
        raise RuntimeError("Refusing to send over an unencrypted SMTP connection.")

    server = smtplib.SMTP(config.host, config.port, timeout=SMTP_TIMEOUT_SECONDS)
    server.starttls()
    return server


def send_email(
    to_email: str,
    subject: str,
    text_body: str,
    html_body: str | None = None,
) -> None:
    """
    Send an email to a single recipient.

    Raises
    ------
    RuntimeError:
        If required SMTP configuration is missing.
    smtplib.SMTPException / OSError:
        If the underlying SMTP connection or send fails.
    """
    config = load_smtp_config()
    if not config.is_complete:
        raise RuntimeError(
            "SMTP is not configured correctly. "
            "Please set SMTP_HOST, SMTP_USERNAME, and SMTP_PASSWORD in .env."
        )

    msg = EmailMessage()
    msg["From"] = (
        f"{config.from_name} <{config.from_email}>"
        if config.from_email
        else config.username
    )
    msg["To"] = to_email
    msg["Subject"] = subject

    msg.set_content(text_body)
    if html_body:
        msg.add_alternative(html_body, subtype="html")

    server = _create_smtp_client(config)
    try:
        server.login(config.username, config.password)  # type: ignore[arg-type]
        server.send_message(msg)
    finally:
        try:
            server.quit()
        except smtplib.SMTPException:
            # Connection is being torn down anyway.
            pass
