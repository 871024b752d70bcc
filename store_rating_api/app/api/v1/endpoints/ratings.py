"""
API endpoints for store ratings.

Ratings are submitted through ``POST /stores/{store_id}/ratings``.
These endpoints read them: administrators can list and filter every
rating, everybody else sees only their own.  Administrators may also
delete a rating, which re‑aggregates the store's average.
"""

from fastapi import APIRouter, Depends, status, Query
from typing import List, Optional

from store_rating_api.app.core.errors import ServiceError, to_http_exception
from store_rating_api.app.core.security import get_current_user, require_roles
from store_rating_api.app.models import Role, User
from store_rating_api.app.schemas.rating import RatingRead, RatingSummary
from store_rating_api.app.services.rating_service import RatingService


router = APIRouter()


@router.get(
    "/",
    response_model=List[RatingRead],
    summary="List ratings",
)
async def list_ratings(
    store_id: Optional[str] = Query(None),
    user_id: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
) -> List[RatingRead]:
    """List ratings with optional filters.

    Non‑administrators always get their own ratings; the ``user_id``
    filter is ignored for them.
    """
    if current_user.role != Role.ADMIN:
        user_id = current_user.id
    return await RatingService.list_ratings(store_id=store_id, user_id=user_id)


@router.get(
    "/summary",
    response_model=RatingSummary,
    summary="Summary of the current user's ratings",
)
async def rating_summary(current_user: User = Depends(get_current_user)) -> RatingSummary:
    """Count, average and the three most recent ratings of the current user."""
    return await RatingService.user_summary(current_user.id)


@router.get(
    "/{rating_id}",
    response_model=RatingRead,
    summary="Get a single rating",
)
async def get_rating(
    rating_id: str,
    current_user: User = Depends(get_current_user),
) -> RatingRead:
    try:
        return await RatingService.get_rating(rating_id, viewer=current_user)
    except ServiceError as e:
        raise to_http_exception(e)


@router.delete(
    "/{rating_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a rating",
)
async def delete_rating(
    rating_id: str,
    current_user: User = Depends(require_roles(Role.ADMIN)),
) -> None:
    try:
        await RatingService.delete_rating(rating_id)
    except ServiceError as e:
        raise to_http_exception(e)
    return None
