"""
Business logic for store ratings.

A user holds at most one rating per store.  Submitting a rating for a
store the user already rated overwrites the value and timestamp of the
existing record ("last write wins") instead of appending a new one.
After every change the store's rating list and average are recomputed
from the ratings collection, so ``Store.average_rating`` always equals
the mean of the store's current ratings (``0.0`` when it has none).

The whole lookup → write → re‑aggregate sequence runs inside a data
store transaction so concurrent submissions for the same store cannot
interleave.
"""

import logging
from typing import List, Optional

from ..core.db import DataStore, get_data_store, new_id
from ..core.errors import FieldValidationError, NotFoundError, PermissionDeniedError
from ..core.validation import rating_value_check
from ..models import Rating, Role, Store, User, utc_now_iso
from ..schemas.rating import (
    RatingRead,
    RatingSubmitResult,
    RatingSummary,
    RatingWithStore,
)

logger = logging.getLogger(__name__)

RECENT_RATINGS_LIMIT = 3


def average_of(ratings: List[Rating]) -> float:
    """Arithmetic mean of the rating values, ``0.0`` for no ratings."""
    if not ratings:
        return 0.0
    return sum(r.rating for r in ratings) / len(ratings)


def rating_to_read(rating: Rating) -> RatingRead:
    return RatingRead(
        id=rating.id,
        user_id=rating.user_id,
        store_id=rating.store_id,
        rating=rating.rating,
        created_at=rating.created_at,
    )


def _stars(value: int) -> str:
    return f"{value} star{'' if value == 1 else 's'}"


class RatingService:
    """Service for submitting, reading and aggregating ratings."""

    @staticmethod
    def recalculate(data: DataStore, store_id: str) -> Optional[Store]:
        """Recompute a store's rating list and average.

        Returns the updated store, or ``None`` if the store no longer
        exists.  Callers that already hold a transaction may call this
        directly; the lock is re‑entrant.
        """
        with data.transaction():
            ratings = data.ratings.find_all(lambda r: r.store_id == store_id)
            return data.stores.update(
                store_id,
                {"ratings": ratings, "average_rating": average_of(ratings)},
            )

    @classmethod
    async def submit_rating(cls, user_id: str, store_id: str, value: int) -> RatingSubmitResult:
        """Create or update the rating of ``user_id`` for ``store_id``.

        Raises ``FieldValidationError`` for values outside 1–5 and
        ``NotFoundError`` when the store or user does not exist.
        """
        reason = rating_value_check(value)
        if reason:
            raise FieldValidationError({"rating": reason})
        data = get_data_store()
        with data.transaction():
            store = data.stores.find_by_id(store_id)
            if store is None:
                raise NotFoundError(f"Store {store_id} not found")
            if data.users.find_by_id(user_id) is None:
                raise NotFoundError(f"User {user_id} not found")
            existing = data.ratings.find_one(
                lambda r: r.user_id == user_id and r.store_id == store_id
            )
            if existing is not None:
                rating = data.ratings.update(
                    existing.id, {"rating": value, "created_at": utc_now_iso()}
                )
                created = False
            else:
                rating = data.ratings.insert(
                    Rating(id=new_id(), user_id=user_id, store_id=store_id, rating=value)
                )
                created = True
            store = cls.recalculate(data, store_id)
            logger.info(
                "User %s %s rating %s for store %s: %s (average now %.2f over %d)",
                user_id,
                "submitted" if created else "updated",
                rating.id,
                store_id,
                value,
                store.average_rating,
                len(store.ratings),
            )
            message = (
                f"{'Rating submitted!' if created else 'Rating updated!'} "
                f"You rated {store.name} {_stars(value)}"
            )
            return RatingSubmitResult(
                **rating_to_read(rating).model_dump(),
                created=created,
                store_average=store.average_rating,
                store_rating_count=len(store.ratings),
                message=message,
            )

    @classmethod
    async def get_rating(cls, rating_id: str, viewer: Optional[User] = None) -> RatingRead:
        """Return a rating.

        When ``viewer`` is given and is not an administrator, only the
        viewer's own ratings are visible.
        """
        rating = get_data_store().ratings.find_by_id(rating_id)
        if rating is None:
            raise NotFoundError(f"Rating {rating_id} not found")
        if viewer is not None and viewer.role != Role.ADMIN and rating.user_id != viewer.id:
            raise PermissionDeniedError("Insufficient permissions")
        return rating_to_read(rating)

    @classmethod
    async def get_user_rating(cls, user_id: str, store_id: str) -> Optional[RatingRead]:
        """Return the user's rating of a store, or ``None`` if not rated yet."""
        rating = get_data_store().ratings.find_one(
            lambda r: r.user_id == user_id and r.store_id == store_id
        )
        return rating_to_read(rating) if rating else None

    @classmethod
    async def list_ratings(
        cls,
        store_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> List[RatingRead]:
        """List ratings in submission order, optionally filtered."""
        ratings = get_data_store().ratings.find_all(
            lambda r: (store_id is None or r.store_id == store_id)
            and (user_id is None or r.user_id == user_id)
        )
        return [rating_to_read(r) for r in ratings]

    @classmethod
    async def user_summary(cls, user_id: str) -> RatingSummary:
        """Count, average and the most recent ratings given by a user.

        Ratings for stores that were deleted keep a ``store_name`` of
        ``None``.
        """
        data = get_data_store()
        ratings = data.ratings.find_all(lambda r: r.user_id == user_id)
        recent: List[RatingWithStore] = []
        for rating in ratings[-RECENT_RATINGS_LIMIT:]:
            store = data.stores.find_by_id(rating.store_id)
            recent.append(
                RatingWithStore(
                    **rating_to_read(rating).model_dump(),
                    store_name=store.name if store else None,
                )
            )
        return RatingSummary(
            count=len(ratings),
            average=round(average_of(ratings), 1) if ratings else None,
            recent=recent,
        )

    @classmethod
    async def delete_rating(cls, rating_id: str) -> None:
        """Delete a rating and re‑aggregate its store."""
        data = get_data_store()
        with data.transaction():
            rating = data.ratings.remove(rating_id)
            if rating is None:
                raise NotFoundError(f"Rating {rating_id} not found")
            cls.recalculate(data, rating.store_id)
        logger.info("Rating %s for store %s deleted", rating_id, rating.store_id)
