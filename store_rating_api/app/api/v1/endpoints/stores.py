"""
Store endpoints for API v1.

Administrators create, update and delete stores.  Every authenticated
user can browse stores; regular users additionally see their own
rating of each store and submit ratings through
``POST /stores/{store_id}/ratings``.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from store_rating_api.app.core.errors import ServiceError, to_http_exception
from store_rating_api.app.core.security import get_current_user, require_roles
from store_rating_api.app.models import Role, User
from store_rating_api.app.schemas.rating import RatingCreate, RatingRead, RatingSubmitResult
from store_rating_api.app.schemas.store import (
    StoreCreate,
    StoreDetails,
    StoreListItem,
    StoreRead,
    StoreUpdate,
)
from store_rating_api.app.services.rating_service import RatingService
from store_rating_api.app.services.store_service import StoreService


router = APIRouter()

# Regular users search stores by name and address only.
CUSTOMER_SEARCH_FIELDS = ("name", "address")


@router.post("/", response_model=StoreRead, status_code=status.HTTP_201_CREATED)
async def create_store(
    data: StoreCreate,
    current_user: User = Depends(require_roles(Role.ADMIN)),
) -> StoreRead:
    """Add a store and assign it to a store owner."""
    try:
        return await StoreService.create_store(data)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/", response_model=List[StoreListItem])
async def list_stores(
    search: Optional[str] = Query(None),
    sort_by: str = Query("name", description="name, email, address or average_rating"),
    order: str = Query("asc", description="asc, desc or none"),
    current_user: User = Depends(get_current_user),
) -> List[StoreListItem]:
    """List stores.

    Administrators search name, e‑mail and address; regular users
    search name and address and get ``my_rating`` filled in.
    """
    if current_user.role == Role.ADMIN:
        return await StoreService.list_stores(search=search, sort_by=sort_by, order=order)
    return await StoreService.list_stores(
        search=search,
        sort_by=sort_by,
        order=order,
        viewer_id=current_user.id,
        search_fields=CUSTOMER_SEARCH_FIELDS,
    )


@router.get("/{store_id}", response_model=StoreDetails)
async def get_store(
    store_id: str,
    current_user: User = Depends(get_current_user),
) -> StoreDetails:
    try:
        return await StoreService.store_details(store_id)
    except ServiceError as e:
        raise to_http_exception(e)


@router.put("/{store_id}", response_model=StoreRead)
async def update_store(
    store_id: str,
    data: StoreUpdate,
    current_user: User = Depends(require_roles(Role.ADMIN)),
) -> StoreRead:
    try:
        return await StoreService.update_store(store_id, data.model_dump(exclude_unset=True))
    except ServiceError as e:
        raise to_http_exception(e)


@router.delete("/{store_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_store(
    store_id: str,
    current_user: User = Depends(require_roles(Role.ADMIN)),
) -> None:
    """Delete a store and clear its owner's store reference."""
    try:
        await StoreService.delete_store(store_id)
    except ServiceError as e:
        raise to_http_exception(e)
    return None


@router.post("/{store_id}/ratings", response_model=RatingSubmitResult)
async def rate_store(
    store_id: str,
    data: RatingCreate,
    current_user: User = Depends(require_roles(Role.CUSTOMER)),
) -> RatingSubmitResult:
    """Submit or update the current user's rating of a store.

    The response's ``created`` flag tells a new rating from an update.
    """
    try:
        return await RatingService.submit_rating(current_user.id, store_id, data.rating)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/{store_id}/ratings/me", response_model=Optional[RatingRead])
async def get_my_rating(
    store_id: str,
    current_user: User = Depends(get_current_user),
) -> Optional[RatingRead]:
    """Return the current user's rating of the store, or ``null``."""
    try:
        await StoreService.get_store(store_id)
    except ServiceError as e:
        raise to_http_exception(e)
    return await RatingService.get_user_rating(current_user.id, store_id)
