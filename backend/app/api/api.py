"""
API Router Aggregator.

Combines the v1 routers into a single router for the main app.
"""

from fastapi import APIRouter

from app.api.v1 import admin, auth, jobs, referrer, seeker

api_router = APIRouter()

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["Admin"],
)

api_router.include_router(
    referrer.router,
    prefix="/referrer",
    tags=["Referrer"],
)

api_router.include_router(
    seeker.router,
    prefix="/seeker",
    tags=["Seeker"],
)

# Jobs and applications share a router; paths carry their own prefixes.
api_router.include_router(
    jobs.router,
    tags=["Jobs"],
)
