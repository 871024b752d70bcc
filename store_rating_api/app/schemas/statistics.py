"""
Pydantic schemas for the administrator and store owner dashboards.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .rating import RatingWithUser
from .store import StoreRead
from .user import UserRead


class AdminOverview(BaseModel):
    total_users: int = Field(..., description="Users other than administrators")
    total_stores: int
    total_ratings: int
    recent_users: List[UserRead] = Field(default_factory=list)
    featured_stores: List[StoreRead] = Field(default_factory=list)


class OwnerDashboard(BaseModel):
    """Store owner view.  ``store`` is ``None`` when no store is assigned."""

    store: Optional[StoreRead] = None
    average_rating: float = 0.0
    ratings: List[RatingWithUser] = Field(default_factory=list)
    message: Optional[str] = None
