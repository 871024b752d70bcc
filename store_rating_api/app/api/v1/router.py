"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers (auth, users, stores,
ratings, statistics) under a unified prefix.  When new endpoints are
added or when new domains are introduced, update this file to include
their routers.
"""

from fastapi import APIRouter

from .endpoints import (
    auth,
    users,
    stores,
    ratings,
    statistics,
)

# Create a router for version 1 and include sub‑routers for each domain.
router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(stores.router, prefix="/stores", tags=["stores"])
router.include_router(ratings.router, prefix="/ratings", tags=["ratings"])
router.include_router(statistics.router, prefix="/statistics", tags=["statistics"])
