"""
Session endpoints for API v1.

Login and signup return a bearer token together with the sanitized
session user (every field except the password).  Clients persist that
pair and send the token as ``Authorization: Bearer <token>``.  The
server keeps no session state, so logout only acknowledges the request;
the client discards its stored session.
"""

from fastapi import APIRouter, Depends, status

from store_rating_api.app.core.errors import ServiceError, to_http_exception
from store_rating_api.app.core.security import get_current_user
from store_rating_api.app.models import User
from store_rating_api.app.schemas.auth import (
    LoginRequest,
    MessageResponse,
    PasswordChange,
    SessionResponse,
    SessionUser,
    SignupRequest,
)
from store_rating_api.app.services.auth_service import AuthService, session_user


router = APIRouter()


@router.post("/login", response_model=SessionResponse)
async def login(credentials: LoginRequest) -> SessionResponse:
    """Authenticate with e‑mail and password."""
    try:
        user, token = await AuthService.login(credentials.email, credentials.password)
    except ServiceError as e:
        raise to_http_exception(e)
    return SessionResponse(access_token=token, user=user, message=f"Welcome back, {user.name}!")


@router.post("/signup", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def signup(data: SignupRequest) -> SessionResponse:
    """Register a regular user account and start a session for it."""
    try:
        user, token = await AuthService.signup(data)
    except ServiceError as e:
        raise to_http_exception(e)
    return SessionResponse(
        access_token=token,
        user=user,
        message=f"Account created successfully! Welcome, {user.name}!",
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: User = Depends(get_current_user)) -> MessageResponse:
    return MessageResponse(message=f"Goodbye, {current_user.name}!")


@router.get("/me", response_model=SessionUser)
async def read_current_user(current_user: User = Depends(get_current_user)) -> SessionUser:
    """Return the current session user, re‑read from the data store."""
    return session_user(current_user)


@router.put("/password", response_model=MessageResponse)
async def change_password(
    data: PasswordChange,
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Replace the current user's password."""
    try:
        await AuthService.change_password(current_user.id, data.new_password, data.confirm_password)
    except ServiceError as e:
        raise to_http_exception(e)
    return MessageResponse(message="Password updated successfully!")
