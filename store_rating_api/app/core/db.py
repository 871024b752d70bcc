"""
In‑memory data store and repository abstraction.

The application keeps all of its state (users, stores and ratings) in
process memory.  This module provides:

* ``Repository`` – linear‑scan CRUD over a single collection;
* ``DataStore`` – owner of the three repositories and of the lock
  that turns them into a single‑writer resource;
* ``get_data_store`` / ``init_db`` / ``reset_db`` – access to and
  (re)initialisation of the process‑wide store, including the demo
  seed data.

Every mutating repository call holds the store lock.  Services that
perform a read‑modify‑write sequence spanning several calls wrap it in
``DataStore.transaction()`` so concurrent requests cannot interleave.
The lock is re‑entrant, so repository calls inside a transaction do
not deadlock.
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import fields
from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar, Any

from ..models import Rating, Role, Store, User

logger = logging.getLogger(__name__)

T = TypeVar("T")


def new_id() -> str:
    """Return a fresh unique record identifier."""
    return uuid.uuid4().hex


class Repository(Generic[T]):
    """Linear‑scan repository over one collection of dataclass records."""

    def __init__(self, name: str, lock: threading.RLock) -> None:
        self.name = name
        self._lock = lock
        self._records: List[T] = []

    def list(self) -> List[T]:
        """Return a snapshot of the collection in insertion order.

        The list itself is a copy; the records in it are the stored
        objects.  Mutate records through ``update`` so the change
        happens under the lock.
        """
        with self._lock:
            return list(self._records)

    def find_by_id(self, record_id: str) -> Optional[T]:
        with self._lock:
            for record in self._records:
                if record.id == record_id:
                    return record
            return None

    def find_one(self, predicate: Callable[[T], bool]) -> Optional[T]:
        with self._lock:
            for record in self._records:
                if predicate(record):
                    return record
            return None

    def find_all(self, predicate: Callable[[T], bool]) -> List[T]:
        with self._lock:
            return [record for record in self._records if predicate(record)]

    def count(self, predicate: Optional[Callable[[T], bool]] = None) -> int:
        with self._lock:
            if predicate is None:
                return len(self._records)
            return sum(1 for record in self._records if predicate(record))

    def insert(self, record: T) -> T:
        """Append a record.  The caller supplies a fresh id (see ``new_id``)."""
        with self._lock:
            if any(existing.id == record.id for existing in self._records):
                raise ValueError(f"Duplicate {self.name} id {record.id}")
            self._records.append(record)
            logger.debug("Inserted %s %s", self.name, record.id)
            return record

    def remove(self, record_id: str) -> Optional[T]:
        """Remove a record by id and return it, or ``None`` if absent."""
        with self._lock:
            for index, record in enumerate(self._records):
                if record.id == record_id:
                    del self._records[index]
                    logger.debug("Removed %s %s", self.name, record_id)
                    return record
            return None

    def update(self, record_id: str, patch: Dict[str, Any]) -> Optional[T]:
        """Merge ``patch`` into the record in place.

        Returns the updated record, or ``None`` if no record has the id.
        Unknown field names and attempts to change ``id`` raise
        ``ValueError``.
        """
        with self._lock:
            record = self.find_by_id(record_id)
            if record is None:
                return None
            allowed = {f.name for f in fields(record)} - {"id"}
            unknown = set(patch) - allowed
            if unknown:
                raise ValueError(f"Unknown {self.name} fields: {', '.join(sorted(unknown))}")
            for key, value in patch.items():
                setattr(record, key, value)
            logger.debug("Updated %s %s (%s)", self.name, record_id, ", ".join(sorted(patch)))
            return record


class DataStore:
    """The application's database: users, stores and ratings."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.users: Repository[User] = Repository("user", self._lock)
        self.stores: Repository[Store] = Repository("store", self._lock)
        self.ratings: Repository[Rating] = Repository("rating", self._lock)

    @contextmanager
    def transaction(self) -> Iterator["DataStore"]:
        """Hold the write lock for a multi‑step read‑modify‑write sequence."""
        with self._lock:
            yield self

    def is_empty(self) -> bool:
        return self.users.count() == 0 and self.stores.count() == 0


def seed_demo_data(store: DataStore) -> None:
    """Load the demo users, stores and ratings.

    Store ``2`` is owned by user ``4`` which does not exist; the
    dangling owner is kept on purpose so the "unknown owner" paths are
    reachable with the demo data.  Aggregates are recomputed after
    loading so every store's average matches its ratings.
    """
    from .security import hash_password

    with store.transaction():
        store.users.insert(User(
            id="1",
            name="System Administrator",
            email="admin@platform.com",
            address="123 Admin Street, City, State",
            role=Role.ADMIN,
            password=hash_password("Admin123!"),
            profile_image="/professional-admin-avatar-with-glasses.jpg",
        ))
        store.users.insert(User(
            id="2",
            name="John Smith Regular User",
            email="john@example.com",
            address="456 User Avenue, City, State",
            role=Role.CUSTOMER,
            password=hash_password("User123!"),
            profile_image="/friendly-young-man-avatar-with-smile.jpg",
        ))
        store.users.insert(User(
            id="3",
            name="Store Owner Mike Johnson",
            email="mike@store.com",
            address="789 Store Boulevard, City, State",
            role=Role.STORE_OWNER,
            password=hash_password("Store123!"),
            store_id="1",
            profile_image="/business-owner-avatar-with-beard.jpg",
        ))
        store.stores.insert(Store(
            id="1",
            name="Mike's Electronics Store",
            email="mike@store.com",
            address="789 Store Boulevard, City, State",
            owner_id="3",
            store_image="/modern-electronics-store-interior-with-gadgets.jpg",
        ))
        store.stores.insert(Store(
            id="2",
            name="Best Buy Electronics",
            email="contact@bestbuy.com",
            address="321 Shopping Mall, City, State",
            owner_id="4",
            store_image="/large-electronics-retail-store-with-blue-branding.jpg",
        ))
        store.ratings.insert(Rating(
            id="1",
            user_id="2",
            store_id="2",
            rating=4,
            created_at="2024-01-15T10:30:00Z",
        ))
        for record in store.stores.list():
            ratings = store.ratings.find_all(lambda r, sid=record.id: r.store_id == sid)
            average = sum(r.rating for r in ratings) / len(ratings) if ratings else 0.0
            store.stores.update(record.id, {"ratings": ratings, "average_rating": average})


_data_store = DataStore()


def get_data_store() -> DataStore:
    """Return the process‑wide data store."""
    return _data_store


def init_db(seed: bool = True) -> None:
    """Initialise the data store.

    Seeds the demo data only when the store is empty, so calling this
    on every startup is safe.
    """
    store = get_data_store()
    if seed and store.is_empty():
        seed_demo_data(store)
        logger.info(
            "Seeded demo data: %d users, %d stores, %d ratings",
            store.users.count(),
            store.stores.count(),
            store.ratings.count(),
        )


def reset_db(seed: bool = True) -> DataStore:
    """Replace the process‑wide store with a fresh one and return it."""
    global _data_store
    _data_store = DataStore()
    if seed:
        seed_demo_data(_data_store)
    return _data_store
