# app/core/errors.py
"""
Application error taxonomy.

Every error is an HTTPException carrying its own status code, so services
can raise them directly and FastAPI renders them as {"detail": ...}.
Anything that is not one of these ends up in the catch-all handler
registered in app.main and is returned as a generic 500.
"""

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class; subclasses fix the status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(
        self,
        detail: Any = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(
            status_code=self.status_code,
            detail=detail if detail is not None else self.default_detail,
            headers=headers,
        )


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class AuthenticationError(AppError):
    """Absent, invalid or expired token, or wrong credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid or expired token"

    def __init__(self, detail: Any = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(AppError):
    """Valid token, insufficient role."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(AppError):
    """A unique field (mobile, email, registration number) is already taken."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Already exists"


class DependencyError(AppError):
    """Object storage or another external collaborator failed."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Upstream service failed"
