"""
Business logic for the session boundary: login, signup and password
changes.

A session is the authenticated user's record without its password,
paired with a signed bearer token.  The server keeps no session state;
logging out is the client discarding its persisted session.
"""

import logging
from typing import Optional, Tuple

from ..core.db import get_data_store, new_id
from ..core.errors import (
    AuthenticationError,
    DuplicateError,
    FieldValidationError,
    NotFoundError,
)
from ..core.security import create_access_token, hash_password, verify_password
from ..core.validation import (
    address_check,
    chain,
    collect_errors,
    email_check,
    loose_name_check,
    password_check,
    signup_address_check,
    signup_password_check,
    strict_name_check,
)
from ..models import Role, User
from ..schemas.auth import SessionUser, SignupRequest

logger = logging.getLogger(__name__)

SIGNUP_NAME_CHECK = chain(strict_name_check, loose_name_check)
SIGNUP_PASSWORD_CHECK = chain(password_check, signup_password_check)
SIGNUP_ADDRESS_CHECK = chain(address_check, signup_address_check)


def session_user(user: User) -> SessionUser:
    """Build the sanitized session representation of a user."""
    return SessionUser(**user.sanitized())


def issue_token(user: User) -> str:
    return create_access_token({"sub": user.id})


class AuthService:
    """Service implementing login, signup and password changes."""

    @classmethod
    async def login(cls, email: str, password: str) -> Tuple[SessionUser, str]:
        """Authenticate by e‑mail and password.

        Returns the session user and a bearer token.  Blank or badly
        shaped input raises ``FieldValidationError``; credentials that
        do not match raise ``AuthenticationError``.
        """
        if not (email or "").strip():
            raise FieldValidationError({"email": "Email is required"})
        if not (password or "").strip():
            raise FieldValidationError({"password": "Password is required"})
        reason = email_check(email)
        if reason:
            raise FieldValidationError({"email": reason})
        user = get_data_store().users.find_one(lambda u: u.email == email)
        if user is None or not verify_password(password, user.password):
            logger.warning("Failed login for %s", email)
            raise AuthenticationError("Invalid email or password")
        logger.info("User %s logged in", user.id)
        return session_user(user), issue_token(user)

    @classmethod
    async def signup(cls, data: SignupRequest) -> Tuple[SessionUser, str]:
        """Register a new ``user``‑role account and log it in.

        Each field must pass the form rule (strict name, 8–16 character
        password, address length) and then the account rule (loose name,
        complexity, required address).  A duplicate e‑mail raises
        ``DuplicateError`` and leaves the users collection untouched.
        """
        errors = collect_errors({
            "name": (SIGNUP_NAME_CHECK, data.name),
            "email": (email_check, data.email),
            "password": (SIGNUP_PASSWORD_CHECK, data.password),
            "address": (SIGNUP_ADDRESS_CHECK, data.address),
        })
        if errors:
            logger.warning("Rejected signup for %s: %s", data.email, errors)
            raise FieldValidationError(errors)
        password = hash_password(data.password)
        store = get_data_store()
        with store.transaction():
            if store.users.find_one(lambda u: u.email == data.email):
                logger.warning("Signup with existing email %s", data.email)
                raise DuplicateError("Email already exists. Please use a different email.")
            user = store.users.insert(User(
                id=new_id(),
                name=data.name,
                email=data.email,
                address=data.address,
                role=Role.CUSTOMER,
                password=password,
                profile_image=data.profile_image,
            ))
        logger.info("User %s signed up as %s", user.id, user.email)
        return session_user(user), issue_token(user)

    @classmethod
    async def change_password(
        cls,
        user_id: str,
        new_password: str,
        confirm_password: Optional[str] = None,
    ) -> None:
        """Replace the password of ``user_id``.

        The new password must satisfy both the 8–16 character rule and
        the signup complexity rule.
        """
        if not (new_password or "").strip():
            raise FieldValidationError({"new_password": "New password is required"})
        if confirm_password is not None and confirm_password != new_password:
            raise FieldValidationError({"confirm_password": "Passwords do not match"})
        reason = SIGNUP_PASSWORD_CHECK(new_password)
        if reason:
            raise FieldValidationError({"new_password": reason})
        updated = get_data_store().users.update(user_id, {"password": hash_password(new_password)})
        if updated is None:
            raise NotFoundError("User not found")
        logger.info("Password changed for user %s", user_id)
