"""
Service layer for the dashboards.

The administrator overview reports platform‑wide counts; the store
owner dashboard lists the ratings of the owner's store together with
the name and e‑mail of each rater.  All queries are read‑only.
"""

from __future__ import annotations

import logging

from ..core.db import get_data_store
from ..models import Role
from ..schemas.rating import RatingWithUser
from ..schemas.statistics import AdminOverview, OwnerDashboard
from .rating_service import rating_to_read
from .store_service import StoreService, store_to_read
from .user_service import user_to_read

logger = logging.getLogger(__name__)

FEATURED_STORES_LIMIT = 3
RECENT_USERS_LIMIT = 3
NO_STORE_MESSAGE = "No store assigned to your account"


class StatisticsService:
    """Service providing aggregated views for administrators and store owners."""

    @classmethod
    async def overview(cls) -> AdminOverview:
        """Return platform counts plus the users and stores shown on the dashboard.

        Administrators are excluded from the user count and list.  The
        list holds the first three users; the count covers all of them.
        """
        data = get_data_store()
        customers = data.users.find_all(lambda u: u.role != Role.ADMIN)
        stores = data.stores.list()
        return AdminOverview(
            total_users=len(customers),
            total_stores=len(stores),
            total_ratings=data.ratings.count(),
            recent_users=[user_to_read(u) for u in customers[:RECENT_USERS_LIMIT]],
            featured_stores=[store_to_read(s) for s in stores[:FEATURED_STORES_LIMIT]],
        )

    @classmethod
    async def owner_dashboard(cls, owner_id: str) -> OwnerDashboard:
        """Return the dashboard of the store owned by ``owner_id``.

        The store is looked up by its ``owner_id``.  When the owner has
        no store the dashboard is empty and carries a message instead of
        raising.  Raters that were deleted appear as "Unknown User".
        """
        data = get_data_store()
        store = await StoreService.owned_store(owner_id)
        if store is None:
            logger.info("Owner %s has no store assigned", owner_id)
            return OwnerDashboard(message=NO_STORE_MESSAGE)
        rows = []
        for rating in data.ratings.find_all(lambda r: r.store_id == store.id):
            rater = data.users.find_by_id(rating.user_id)
            rows.append(RatingWithUser(
                **rating_to_read(rating).model_dump(),
                user_name=rater.name if rater else "Unknown User",
                user_email=rater.email if rater else "Unknown Email",
            ))
        return OwnerDashboard(
            store=store_to_read(store),
            average_rating=store.average_rating,
            ratings=rows,
        )
