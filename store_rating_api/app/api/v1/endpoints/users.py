"""
User endpoints for API v1.

Administrator management of accounts: create, list with search and
sorting, details, update and delete.  Self‑registration lives under
``/auth/signup``.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from store_rating_api.app.core.errors import ServiceError, to_http_exception
from store_rating_api.app.core.security import require_roles
from store_rating_api.app.models import Role, User
from store_rating_api.app.schemas.user import (
    UserCreate,
    UserDetails,
    UserListItem,
    UserRead,
    UserUpdate,
)
from store_rating_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    current_user: User = Depends(require_roles(Role.ADMIN)),
) -> UserRead:
    """Add a user with any role."""
    try:
        return await UserService.create_user(data)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/", response_model=List[UserListItem])
async def list_users(
    search: Optional[str] = Query(None, description="Matches name, email or address"),
    role: Optional[Role] = Query(None),
    sort_by: str = Query("name", description="name, email, address or role"),
    order: str = Query("asc", description="asc, desc or none"),
    current_user: User = Depends(require_roles(Role.ADMIN)),
) -> List[UserListItem]:
    return await UserService.list_users(search=search, role=role, sort_by=sort_by, order=order)


@router.get("/{user_id}", response_model=UserDetails)
async def get_user(
    user_id: str,
    current_user: User = Depends(require_roles(Role.ADMIN)),
) -> UserDetails:
    """Return a user with the owned store and the ratings they gave."""
    try:
        return await UserService.user_details(user_id)
    except ServiceError as e:
        raise to_http_exception(e)


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: str,
    data: UserUpdate,
    current_user: User = Depends(require_roles(Role.ADMIN)),
) -> UserRead:
    """Update the supplied fields of a user."""
    try:
        return await UserService.update_user(user_id, data.model_dump(exclude_unset=True))
    except ServiceError as e:
        raise to_http_exception(e)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    current_user: User = Depends(require_roles(Role.ADMIN)),
) -> None:
    """Delete a user.  Their ratings are kept; admins cannot delete themselves."""
    try:
        await UserService.delete_user(user_id, acting_user_id=current_user.id)
    except ServiceError as e:
        raise to_http_exception(e)
    return None
