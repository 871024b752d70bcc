"""
Business logic for users.

The ``UserService`` manages user accounts in the in‑memory data store:
creation by administrators, listing with search and sorting, details,
partial updates and deletion.  Self‑registration and login live in
``auth_service``.

Deleting a user does not delete the ratings they submitted.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.db import get_data_store, new_id
from ..core.errors import DuplicateError, FieldValidationError, NotFoundError, ServiceError
from ..core.security import hash_password
from ..core.validation import (
    address_check,
    collect_errors,
    email_check,
    password_check,
    strict_name_check,
)
from ..models import Role, User
from ..schemas.rating import RatingWithStore
from ..schemas.user import OwnedStore, UserCreate, UserDetails, UserListItem, UserRead
from .listing import matches_search, sort_items
from .rating_service import rating_to_read

logger = logging.getLogger(__name__)

USER_SEARCH_FIELDS = ("name", "email", "address")
USER_SORT_FIELDS = ("name", "email", "address", "role")


def user_to_read(user: User) -> UserRead:
    return UserRead(
        id=user.id,
        name=user.name,
        email=user.email,
        address=user.address,
        role=user.role,
        store_id=user.store_id,
        profile_image=user.profile_image,
    )


class UserService:
    """Service for managing user accounts."""

    @classmethod
    async def create_user(cls, data: UserCreate) -> UserRead:
        """Create a user from the administrator form.

        Applies the strict name rule (20–60 characters), the e‑mail and
        address rules and the 8–16 character password rule.  Any role
        may be assigned.  Raises ``FieldValidationError`` or
        ``DuplicateError``.
        """
        errors = collect_errors({
            "name": (strict_name_check, data.name),
            "email": (email_check, data.email),
            "address": (address_check, data.address),
            "password": (password_check, data.password),
        })
        if errors:
            logger.warning("Rejected new user %s: %s", data.email, errors)
            raise FieldValidationError(errors)
        password = hash_password(data.password)
        store = get_data_store()
        with store.transaction():
            if store.users.find_one(lambda u: u.email == data.email):
                raise DuplicateError("Email already exists. Please use a different email.")
            user = store.users.insert(User(
                id=new_id(),
                name=data.name,
                email=data.email,
                address=data.address,
                role=data.role,
                password=password,
                profile_image=data.profile_image,
            ))
        logger.info("User %s (%s) created with role %s", user.id, user.email, user.role.value)
        return user_to_read(user)

    @classmethod
    async def list_users(
        cls,
        search: Optional[str] = None,
        role: Optional[Role] = None,
        sort_by: Optional[str] = "name",
        order: Optional[str] = "asc",
    ) -> List[UserListItem]:
        """List users filtered by a search term and role, then sorted.

        The search term matches name, e‑mail or address.  Store owners
        carry the average rating of their store when the store
        reference resolves.
        """
        store = get_data_store()
        users = store.users.find_all(
            lambda u: matches_search(u, search, USER_SEARCH_FIELDS) and (role is None or u.role == role)
        )
        users = sort_items(users, sort_by, order, USER_SORT_FIELDS, "name")
        items: List[UserListItem] = []
        for user in users:
            store_rating = None
            if user.role == Role.STORE_OWNER and user.store_id:
                owned = store.stores.find_by_id(user.store_id)
                if owned is not None:
                    store_rating = owned.average_rating
            items.append(UserListItem(**user_to_read(user).model_dump(), store_rating=store_rating))
        return items

    @classmethod
    async def get_user(cls, user_id: str) -> UserRead:
        user = get_data_store().users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user_to_read(user)

    @classmethod
    async def user_details(cls, user_id: str) -> UserDetails:
        """Return a user with their owned store and the ratings they gave.

        A store owner whose ``store_id`` points at a missing store is
        shown without a store.
        """
        store = get_data_store()
        user = store.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        owned = None
        if user.role == Role.STORE_OWNER and user.store_id:
            record = store.stores.find_by_id(user.store_id)
            if record is not None:
                owned = OwnedStore(
                    id=record.id,
                    name=record.name,
                    average_rating=record.average_rating,
                    rating_count=len(record.ratings),
                )
        ratings = []
        for rating in store.ratings.find_all(lambda r: r.user_id == user_id):
            rated = store.stores.find_by_id(rating.store_id)
            ratings.append(RatingWithStore(
                **rating_to_read(rating).model_dump(),
                store_name=rated.name if rated else None,
            ))
        return UserDetails(**user_to_read(user).model_dump(), store=owned, ratings=ratings)

    @classmethod
    async def update_user(cls, user_id: str, updates: Dict[str, Any]) -> UserRead:
        """Apply a partial update.

        Only the supplied fields are validated, with the same rules as
        ``create_user``.  A password is hashed before it is stored.  A
        user whose role changes away from ``store_owner`` loses the
        store reference.
        """
        updates = {key: value for key, value in updates.items() if value is not None}
        checks = {
            "name": strict_name_check,
            "email": email_check,
            "address": address_check,
            "password": password_check,
        }
        errors = collect_errors({
            field: (check, updates[field]) for field, check in checks.items() if field in updates
        })
        if errors:
            raise FieldValidationError(errors)
        if "password" in updates:
            updates["password"] = hash_password(updates["password"])
        store = get_data_store()
        with store.transaction():
            user = store.users.find_by_id(user_id)
            if user is None:
                raise NotFoundError("User not found")
            if "email" in updates and store.users.find_one(
                lambda u: u.email == updates["email"] and u.id != user_id
            ):
                raise DuplicateError("Email already exists. Please use a different email.")
            if "role" in updates:
                updates["role"] = Role(updates["role"])
                if updates["role"] != Role.STORE_OWNER:
                    updates["store_id"] = None
            user = store.users.update(user_id, updates)
        logger.info("User %s updated (%s)", user_id, ", ".join(sorted(updates)))
        return user_to_read(user)

    @classmethod
    async def delete_user(cls, user_id: str, acting_user_id: Optional[str] = None) -> None:
        """Delete a user.

        The user's ratings are kept.  An administrator cannot delete
        their own account.
        """
        if acting_user_id is not None and acting_user_id == user_id:
            raise ServiceError("Cannot delete your own account")
        removed = get_data_store().users.remove(user_id)
        if removed is None:
            raise NotFoundError("User not found")
        logger.info("User %s (%s) deleted", removed.id, removed.email)
