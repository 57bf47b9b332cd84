# app/core/auth.py
import uuid
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from app.core.errors import AuthenticationError, AuthorizationError, NotFoundError
from app.core.security import ADMIN_ROLES, verify_token
from app.database import get_session
from app.models.user import User

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise a 403
#   from FastAPI itself; we answer with our own 401 instead.
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    """
    Verify the bearer token on the current request.

    There is no server-side session store: a token that verifies is
    trusted until it expires.

    Raises:
        AuthenticationError(401): header missing, or token invalid/expired
        (one message for every failure kind).
    """
    if credentials is None:
        raise AuthenticationError("Authorization token required")

    claims = verify_token(credentials.credentials)
    if claims is None:
        raise AuthenticationError("Invalid or expired token")
    return claims


def require_user(
    claims: dict[str, Any] = Depends(get_token_claims),
    session: Session = Depends(get_session),
) -> User:
    """
    Resolve the registered user behind a user token.

    Raises:
        AuthenticationError(401): admin-panel token or malformed subject.
        NotFoundError(404): the user row no longer exists.
    """
    if claims.get("type") != "user":
        raise AuthenticationError("User token required")

    try:
        user_id = uuid.UUID(str(claims.get("sub")))
    except ValueError:
        raise AuthenticationError("Invalid or expired token")

    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def require_admin(claims: dict[str, Any] = Depends(get_token_claims)) -> dict[str, Any]:
    """
    Enforce the admin role claim.

    Returns:
        The verified claims.

    Raises:
        AuthorizationError(403): role is not admin / super_admin.
    """
    if claims.get("role") not in ADMIN_ROLES:
        raise AuthorizationError("Admin access required")
    return claims
