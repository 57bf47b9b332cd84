# app/schemas/auth.py
import uuid

from pydantic import ConfigDict
from sqlmodel import SQLModel


class LoginRequest(SQLModel):
    """
    User login.

    identifier: 10-digit mobile number or email
    password:   the mobile number given at registration
    """

    model_config = ConfigDict(extra="forbid")

    identifier: str = ""
    password: str = ""


class LoginUser(SQLModel):
    """Reduced projection returned alongside the token."""

    id: uuid.UUID
    name: str
    email: str
    phone: str
    registration_number: str
    role: str


class LoginResponse(SQLModel):
    success: bool = True
    message: str = "Login successful"
    token: str
    user: LoginUser


class AdminLoginRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: str = ""
    password: str = ""


class AdminLoginResponse(SQLModel):
    success: bool = True
    message: str = "Admin login successful"
    token: str
