"""
Pydantic schemas for store ratings.

A rating is a 1–5 star score given by one user to one store.  Each
user holds at most one rating per store; submitting again updates it.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class RatingCreate(BaseModel):
    """Schema for submitting (or re‑submitting) a rating."""

    rating: int = Field(..., description="Rating from 1 to 5", examples=[4])


class RatingRead(BaseModel):
    """Schema for reading a rating from the API."""

    id: str
    user_id: str
    store_id: str
    rating: int
    created_at: str

    model_config = {
        "from_attributes": True,
    }


class RatingSubmitResult(RatingRead):
    """Outcome of a submission.

    ``created`` is ``False`` when an existing rating was updated.
    """

    created: bool
    store_average: float
    store_rating_count: int
    message: str


class RatingWithUser(RatingRead):
    user_name: str
    user_email: str


class RatingWithStore(RatingRead):
    store_name: Optional[str] = None


class RatingSummary(BaseModel):
    """Ratings given by one user."""

    count: int
    average: Optional[float] = None
    recent: List[RatingWithStore] = Field(default_factory=list)
