"""
Record types kept in the in‑memory data store.

These are plain dataclasses rather than pydantic models: they are the
"rows" of the data store, mutated in place by the repository, while
the pydantic schemas in ``schemas`` describe what goes over the wire.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class Role(str, Enum):
    """User roles.  Values are the names used on the wire."""

    ADMIN = "admin"
    CUSTOMER = "user"
    STORE_OWNER = "store_owner"


def utc_now_iso() -> str:
    """Current UTC time as an ISO‑8601 string with a ``Z`` suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class User:
    id: str
    name: str
    email: str
    address: str
    role: Role
    password: Optional[str] = None
    store_id: Optional[str] = None
    profile_image: Optional[str] = None

    def sanitized(self) -> Dict[str, Any]:
        """Return the user as a dict with the password removed."""
        data = asdict(self)
        data.pop("password", None)
        data["role"] = self.role.value
        return data


@dataclass
class Rating:
    id: str
    user_id: str
    store_id: str
    rating: int
    created_at: str = field(default_factory=utc_now_iso)


@dataclass
class Store:
    id: str
    name: str
    email: str
    address: str
    owner_id: str
    ratings: List[Rating] = field(default_factory=list)
    average_rating: float = 0.0
    store_image: Optional[str] = None
