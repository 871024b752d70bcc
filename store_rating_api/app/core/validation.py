"""
Field validation routines.

Each check is a pure function that takes the raw field value and
returns ``None`` when the value is acceptable or a human‑readable
reason otherwise.  Checks never raise; ``None`` input is treated as an
empty string.

The admin forms use ``strict_name_check`` (20–60 characters) and
``password_check`` (8–16 characters, an uppercase letter and a special
character).  Self‑signup uses ``loose_name_check`` (at least 2
characters) and ``signup_password_check`` (at least 8 characters with
lowercase, uppercase, digit and special character), each after the
corresponding admin form rule; ``chain`` layers them.
"""

import re
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

Check = Callable[[Any], Optional[str]]

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Special characters accepted by ``password_check``.
PASSWORD_SPECIAL_CHARS = '!@#$%^&*(),.?":{}|<>'
# Special characters required by ``signup_password_check``.
SIGNUP_PASSWORD_SPECIAL_CHARS = "@$!%*?&"

STRICT_NAME_MIN = 20
STRICT_NAME_MAX = 60
LOOSE_NAME_MIN = 2
STORE_NAME_MIN = 3
ADDRESS_MAX = 400
SIGNUP_ADDRESS_MIN = 10
PASSWORD_MIN = 8
PASSWORD_MAX = 16
RATING_MIN = 1
RATING_MAX = 5


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def strict_name_check(name: Any) -> Optional[str]:
    name = _text(name)
    if len(name) < STRICT_NAME_MIN or len(name) > STRICT_NAME_MAX:
        return f"Name must be between {STRICT_NAME_MIN} and {STRICT_NAME_MAX} characters"
    return None


def loose_name_check(name: Any) -> Optional[str]:
    name = _text(name)
    if not name.strip():
        return "Name is required"
    if len(name) < LOOSE_NAME_MIN:
        return f"Name must be at least {LOOSE_NAME_MIN} characters long"
    return None


def store_name_check(name: Any) -> Optional[str]:
    if len(_text(name)) < STORE_NAME_MIN:
        return f"Store name must be at least {STORE_NAME_MIN} characters"
    return None


def email_check(email: Any) -> Optional[str]:
    if not EMAIL_PATTERN.match(_text(email)):
        return "Please enter a valid email address"
    return None


def address_check(address: Any) -> Optional[str]:
    if len(_text(address)) > ADDRESS_MAX:
        return f"Address must not exceed {ADDRESS_MAX} characters"
    return None


def signup_address_check(address: Any) -> Optional[str]:
    """Address rule used at signup: required, at least 10 characters, at most 400."""
    address = _text(address)
    if not address.strip():
        return "Address is required"
    if len(address) < SIGNUP_ADDRESS_MIN:
        return f"Address must be at least {SIGNUP_ADDRESS_MIN} characters long"
    return address_check(address)


def password_check(password: Any) -> Optional[str]:
    password = _text(password)
    if len(password) < PASSWORD_MIN or len(password) > PASSWORD_MAX:
        return f"Password must be between {PASSWORD_MIN} and {PASSWORD_MAX} characters"
    if not any(ch.isascii() and ch.isupper() for ch in password):
        return "Password must contain at least one uppercase letter"
    if not any(ch in PASSWORD_SPECIAL_CHARS for ch in password):
        return "Password must contain at least one special character"
    return None


def signup_password_check(password: Any) -> Optional[str]:
    """Stricter complexity rule with no upper length bound."""
    password = _text(password)
    if not password.strip():
        return "Password is required"
    if len(password) < PASSWORD_MIN:
        return f"Password must be at least {PASSWORD_MIN} characters long"
    if not (
        re.search(r"[a-z]", password)
        and re.search(r"[A-Z]", password)
        and re.search(r"\d", password)
        and any(ch in SIGNUP_PASSWORD_SPECIAL_CHARS for ch in password)
    ):
        return "Password must contain uppercase, lowercase, number, and special character"
    return None


def rating_value_check(value: Any) -> Optional[str]:
    # bool is an int subclass; True is not a star rating.
    if isinstance(value, bool) or not isinstance(value, int) or not RATING_MIN <= value <= RATING_MAX:
        return f"Please select a rating between {RATING_MIN} and {RATING_MAX} stars"
    return None


def chain(*checks: Check) -> Check:
    """Combine checks into one that reports the first failure."""

    def _check(value: Any) -> Optional[str]:
        for check in checks:
            reason = check(value)
            if reason is not None:
                return reason
        return None

    return _check


def collect_errors(checks: Mapping[str, Tuple[Check, Any]]) -> Dict[str, str]:
    """Run ``field -> (check, value)`` pairs and return the failures.

    The result maps each failing field to its reason; an empty dict
    means every field passed.
    """
    errors: Dict[str, str] = {}
    for field_name, (check, value) in checks.items():
        reason = check(value)
        if reason is not None:
            errors[field_name] = reason
    return errors
