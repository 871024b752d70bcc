"""
Business logic for stores.

Stores are created by administrators and always have exactly one
owner, who must hold the ``store_owner`` role.  Creating a store
points the owner's ``store_id`` at it; deleting it clears that
reference.  Ratings of a deleted store stay in the ratings collection.

An ``owner_id`` that no longer resolves to a user is tolerated and
reported as ``"Unknown owner"``.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..core.db import DataStore, get_data_store, new_id
from ..core.errors import FieldValidationError, NotFoundError
from ..core.validation import address_check, collect_errors, email_check, store_name_check
from ..models import Role, Store
from ..schemas.rating import RatingWithUser
from ..schemas.store import StoreCreate, StoreDetails, StoreListItem, StoreRead
from .listing import matches_search, sort_items
from .rating_service import rating_to_read

logger = logging.getLogger(__name__)

STORE_SEARCH_FIELDS = ("name", "email", "address")
STORE_SORT_FIELDS = ("name", "email", "address", "average_rating")
UNKNOWN_OWNER = "Unknown owner"


def store_to_read(store: Store) -> StoreRead:
    return StoreRead(
        id=store.id,
        name=store.name,
        email=store.email,
        address=store.address,
        owner_id=store.owner_id,
        average_rating=store.average_rating,
        rating_count=len(store.ratings),
        store_image=store.store_image,
    )


def _owner_name(data: DataStore, store: Store) -> str:
    owner = data.users.find_by_id(store.owner_id)
    return owner.name if owner else UNKNOWN_OWNER


def _check_owner(data: DataStore, owner_id: Optional[str], store_id: Optional[str] = None) -> Optional[str]:
    """Validate the owner of a new store, or of ``store_id`` when reassigning.

    A store owner holds at most one store.
    """
    if not owner_id:
        return "Please select a store owner"
    owner = data.users.find_by_id(owner_id)
    if owner is None or owner.role != Role.STORE_OWNER:
        return "Selected owner must be an existing store owner"
    if data.stores.find_one(lambda s: s.owner_id == owner_id and s.id != store_id):
        return "Selected owner already has a store"
    return None


class StoreService:
    """Service for managing stores."""

    @classmethod
    async def create_store(cls, data: StoreCreate) -> StoreRead:
        """Create a store and link it to its owner.

        The store starts with no ratings and an average of ``0.0``.
        """
        store = get_data_store()
        with store.transaction():
            errors = collect_errors({
                "name": (store_name_check, data.name),
                "email": (email_check, data.email),
                "address": (address_check, data.address),
            })
            owner_error = _check_owner(store, data.owner_id)
            if owner_error:
                errors["owner_id"] = owner_error
            if errors:
                logger.warning("Rejected new store %s: %s", data.name, errors)
                raise FieldValidationError(errors)
            record = store.stores.insert(Store(
                id=new_id(),
                name=data.name,
                email=data.email,
                address=data.address,
                owner_id=data.owner_id,
                store_image=data.store_image,
            ))
            store.users.update(data.owner_id, {"store_id": record.id})
        logger.info("Store %s (%s) created for owner %s", record.id, record.name, record.owner_id)
        return store_to_read(record)

    @classmethod
    async def list_stores(
        cls,
        search: Optional[str] = None,
        sort_by: Optional[str] = "name",
        order: Optional[str] = "asc",
        viewer_id: Optional[str] = None,
        search_fields: Sequence[str] = STORE_SEARCH_FIELDS,
    ) -> List[StoreListItem]:
        """List stores matching ``search``, sorted.

        When ``viewer_id`` is given each item carries that user's own
        rating of the store in ``my_rating``.
        """
        data = get_data_store()
        stores = data.stores.find_all(lambda s: matches_search(s, search, search_fields))
        stores = sort_items(stores, sort_by, order, STORE_SORT_FIELDS, "name")
        items: List[StoreListItem] = []
        for record in stores:
            my_rating = None
            if viewer_id is not None:
                own = data.ratings.find_one(
                    lambda r, sid=record.id: r.store_id == sid and r.user_id == viewer_id
                )
                my_rating = own.rating if own else None
            items.append(StoreListItem(
                **store_to_read(record).model_dump(),
                owner_name=_owner_name(data, record),
                my_rating=my_rating,
            ))
        return items

    @classmethod
    async def get_store(cls, store_id: str) -> StoreRead:
        record = get_data_store().stores.find_by_id(store_id)
        if record is None:
            raise NotFoundError("Store not found")
        return store_to_read(record)

    @classmethod
    async def store_details(cls, store_id: str) -> StoreDetails:
        """Return a store with its owner, rater names and star distribution."""
        data = get_data_store()
        record = data.stores.find_by_id(store_id)
        if record is None:
            raise NotFoundError("Store not found")
        ratings = data.ratings.find_all(lambda r: r.store_id == store_id)
        rows = []
        for rating in ratings:
            customer = data.users.find_by_id(rating.user_id)
            rows.append(RatingWithUser(
                **rating_to_read(rating).model_dump(),
                user_name=customer.name if customer else "Unknown User",
                user_email=customer.email if customer else "Unknown Email",
            ))
        distribution = {star: sum(1 for r in ratings if r.rating == star) for star in range(1, 6)}
        return StoreDetails(
            **store_to_read(record).model_dump(),
            owner_name=_owner_name(data, record),
            ratings=rows,
            rating_distribution=distribution,
        )

    @classmethod
    async def update_store(cls, store_id: str, updates: Dict[str, Any]) -> StoreRead:
        """Apply a partial update.

        Changing the owner moves the ``store_id`` reference from the old
        owner (if it pointed here) to the new one.
        """
        updates = {key: value for key, value in updates.items() if value is not None}
        checks = {"name": store_name_check, "email": email_check, "address": address_check}
        data = get_data_store()
        with data.transaction():
            errors = collect_errors({
                field: (check, updates[field]) for field, check in checks.items() if field in updates
            })
            if "owner_id" in updates:
                owner_error = _check_owner(data, updates["owner_id"], store_id)
                if owner_error:
                    errors["owner_id"] = owner_error
            if errors:
                raise FieldValidationError(errors)
            record = data.stores.find_by_id(store_id)
            if record is None:
                raise NotFoundError("Store not found")
            previous_owner = record.owner_id
            record = data.stores.update(store_id, updates)
            if record.owner_id != previous_owner:
                old_owner = data.users.find_by_id(previous_owner)
                if old_owner is not None and old_owner.store_id == store_id:
                    data.users.update(old_owner.id, {"store_id": None})
                data.users.update(record.owner_id, {"store_id": store_id})
        logger.info("Store %s updated (%s)", store_id, ", ".join(sorted(updates)))
        return store_to_read(record)

    @classmethod
    async def delete_store(cls, store_id: str) -> None:
        """Delete a store and clear its owner's store reference."""
        data = get_data_store()
        with data.transaction():
            record = data.stores.remove(store_id)
            if record is None:
                raise NotFoundError("Store not found")
            owner = data.users.find_by_id(record.owner_id)
            if owner is not None and owner.store_id == store_id:
                data.users.update(owner.id, {"store_id": None})
        logger.info("Store %s (%s) deleted", record.id, record.name)

    @classmethod
    async def owned_store(cls, user_id: str) -> Optional[Store]:
        """Return the store whose owner is ``user_id``, if any."""
        return get_data_store().stores.find_one(lambda s: s.owner_id == user_id)
