"""
Dashboard endpoints for API v1.

``/statistics/overview`` backs the administrator dashboard and
``/statistics/owner`` the store owner dashboard.
"""

from fastapi import APIRouter, Depends

from store_rating_api.app.core.security import require_roles
from store_rating_api.app.models import Role, User
from store_rating_api.app.schemas.statistics import AdminOverview, OwnerDashboard
from store_rating_api.app.services.statistics_service import StatisticsService

router = APIRouter()


@router.get("/overview", response_model=AdminOverview)
async def overview(current_user: User = Depends(require_roles(Role.ADMIN))) -> AdminOverview:
    return await StatisticsService.overview()


@router.get("/owner", response_model=OwnerDashboard)
async def owner_dashboard(
    current_user: User = Depends(require_roles(Role.STORE_OWNER)),
) -> OwnerDashboard:
    """Ratings of the caller's store.  Owners without a store get an empty dashboard."""
    return await StatisticsService.owner_dashboard(current_user.id)
