"""
Pydantic models for user data.

Field contents (name length, e‑mail shape, password complexity) are
checked by the routines in ``core.validation`` inside the services so
that every rule reports the same human‑readable message whichever
form submits it.  The schemas only fix the shape of the payloads.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import Role
from .rating import RatingWithStore


class UserBase(BaseModel):
    name: str = Field(..., examples=["John Smith Regular User"])
    email: str = Field(..., examples=["john@example.com"])
    address: str = Field(..., examples=["456 User Avenue, City, State"])


class UserCreate(UserBase):
    """Schema for the administrator "add user" form."""

    password: str = Field(..., examples=["User123!"])
    role: Role = Field(..., description="admin, user or store_owner")
    profile_image: Optional[str] = None


class UserUpdate(BaseModel):
    """Partial update of a user.  Omitted fields are left unchanged."""

    name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    password: Optional[str] = None
    role: Optional[Role] = None
    profile_image: Optional[str] = None


class UserRead(UserBase):
    """Schema for reading a user from the API.  Never carries the password."""

    id: str
    role: Role
    store_id: Optional[str] = None
    profile_image: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }


class UserListItem(UserRead):
    """Row of the administrator user table.

    ``store_rating`` is the average rating of the owned store for store
    owners whose store reference resolves, otherwise ``None``.
    """

    store_rating: Optional[float] = None


class OwnedStore(BaseModel):
    id: str
    name: str
    average_rating: float
    rating_count: int


class UserDetails(UserRead):
    """Full user view: owned store (if any) and ratings given."""

    store: Optional[OwnedStore] = None
    ratings: List[RatingWithStore] = Field(default_factory=list)
