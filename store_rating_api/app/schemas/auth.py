"""
Pydantic schemas for the session boundary: login, signup, logout and
password changes.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .user import UserRead


class LoginRequest(BaseModel):
    email: str = Field("", examples=["john@example.com"])
    password: str = Field("", examples=["User123!"])


class SignupRequest(BaseModel):
    """Self‑registration.  The role is always ``user``."""

    name: str = ""
    email: str = ""
    address: str = ""
    password: str = ""
    profile_image: Optional[str] = None


class PasswordChange(BaseModel):
    new_password: str = ""
    # When supplied it must equal ``new_password``.
    confirm_password: Optional[str] = None


class SessionUser(UserRead):
    """The authenticated user as stored in a session: every field but the password."""


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: SessionUser
    message: str


class MessageResponse(BaseModel):
    message: str
