# app/core/security.py
"""
Credential hashing and session token minting/verification.

Tokens are HS256 JWTs signed with JWT_SECRET. Verification failures of any
kind (bad signature, expired, malformed) collapse to None so callers cannot
tell them apart.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from app.core.config import get_settings
from app.models.user import User

ADMIN_ROLES = frozenset({"admin", "super_admin"})


def hash_credential(plain: str) -> str:
    """Hash with a per-record salt (bcrypt keeps only the first 72 bytes)."""
    settings = get_settings()
    hashed = bcrypt.hashpw(
        plain.encode("utf-8")[:72],
        bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS),
    )
    return hashed.decode("utf-8")


def verify_credential(user: User, candidate: str) -> bool:
    """Check a candidate password against the stored hash."""
    try:
        return bcrypt.checkpw(
            candidate.encode("utf-8")[:72],
            user.hashed_password.encode("utf-8"),
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def _encode(claims: dict[str, Any], expires_delta: timedelta) -> str:
    settings = get_settings()
    to_encode = claims.copy()
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def create_user_token(user: User) -> str:
    """
    Token for a registered user.

    Users stored with role="admin" get the shorter admin lifetime.
    """
    settings = get_settings()
    if user.role in ADMIN_ROLES:
        expires = timedelta(hours=settings.ADMIN_TOKEN_EXPIRE_HOURS)
    else:
        expires = timedelta(days=settings.USER_TOKEN_EXPIRE_DAYS)

    return _encode(
        {
            "sub": str(user.id),
            "email": user.email,
            "phone": user.mobile_no,
            "role": user.role,
            "type": "user",
        },
        expires,
    )


def create_admin_token(email: str) -> str:
    """Token for the configured panel administrator."""
    settings = get_settings()
    return _encode(
        {
            "sub": email,
            "email": email,
            "role": "super_admin",
            "type": "admin",
        },
        timedelta(hours=settings.ADMIN_TOKEN_EXPIRE_HOURS),
    )


def verify_token(token: str) -> dict[str, Any] | None:
    """Decode and validate signature + expiry; None on any failure."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError:
        return None
