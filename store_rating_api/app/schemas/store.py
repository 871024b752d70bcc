"""
Pydantic schemas for stores.

``average_rating`` and ``rating_count`` are derived from the store's
ratings and cannot be set by clients.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .rating import RatingWithUser


class StoreCreate(BaseModel):
    """Schema for the administrator "add store" form."""

    name: str = Field(..., examples=["Mike's Electronics Store"])
    email: str = Field(..., examples=["mike@store.com"])
    address: str = Field(..., examples=["789 Store Boulevard, City, State"])
    owner_id: str = Field(..., description="Identifier of a user with the store_owner role")
    store_image: Optional[str] = None


class StoreUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    owner_id: Optional[str] = None
    store_image: Optional[str] = None


class StoreRead(BaseModel):
    id: str
    name: str
    email: str
    address: str
    owner_id: str
    average_rating: float
    rating_count: int
    store_image: Optional[str] = None


class StoreListItem(StoreRead):
    """Row of a store listing.

    ``my_rating`` is the caller's own rating of the store, if any.
    """

    owner_name: str
    my_rating: Optional[int] = None


class StoreDetails(StoreRead):
    owner_name: str
    ratings: List[RatingWithUser] = Field(default_factory=list)
    # Number of ratings per star value, keys 1 to 5.
    rating_distribution: Dict[int, int] = Field(default_factory=dict)
