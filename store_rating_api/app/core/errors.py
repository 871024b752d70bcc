"""
Error taxonomy shared by the service layer.

Services raise these exceptions and endpoints translate them into
HTTP responses.  All of them derive from ``ValueError`` so callers
that only care about "the operation was rejected" can keep catching
``ValueError``.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException


class ServiceError(ValueError):
    """Base class for user‑facing service failures."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FieldValidationError(ServiceError):
    """One or more input fields failed validation.

    ``errors`` maps field names to human‑readable reasons, mirroring
    the per‑field messages shown next to a form.
    """

    status_code = 422

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None) -> None:
        if message is None:
            # A single failure is reported as is; several failures get
            # the generic form message.
            message = next(iter(errors.values())) if len(errors) == 1 else "Please fix the form errors before submitting"
        super().__init__(message)
        self.errors = dict(errors)


class NotFoundError(ServiceError):
    """The referenced record does not exist (or was deleted)."""

    status_code = 404


class DuplicateError(ServiceError):
    """A unique field (e.g. e‑mail) is already taken."""

    status_code = 409


class AuthenticationError(ServiceError):
    """Credentials did not match any account."""

    status_code = 401


class PermissionDeniedError(ServiceError):
    """The caller is not allowed to perform the operation."""

    status_code = 403


def to_http_exception(exc: ServiceError) -> HTTPException:
    """Translate a service error into the matching ``HTTPException``.

    Validation failures carry the per‑field reasons next to the
    message; every other error's detail is its message.
    """
    if isinstance(exc, FieldValidationError):
        detail: Any = {"message": exc.message, "errors": exc.errors}
    else:
        detail = exc.message
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return HTTPException(status_code=exc.status_code, detail=detail, headers=headers)
