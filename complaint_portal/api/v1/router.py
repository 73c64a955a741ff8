"""
API v1 router aggregation.
"""

from fastapi import APIRouter

from complaint_portal.api.v1.endpoints import (
    analytics,
    auth,
    complaints,
    files,
    health,
    notifications,
    profile,
    rooms,
)

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(complaints.router)
api_router.include_router(notifications.router)
api_router.include_router(analytics.router)
api_router.include_router(profile.router)
api_router.include_router(rooms.router)
api_router.include_router(files.router)
