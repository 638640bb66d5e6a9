"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from academy.api.v1.endpoints import players, sessions

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    sessions.router, prefix="/sessions", tags=["Training sessions"]
)
api_router.include_router(
    players.router, prefix="/players", tags=["Player performance"]
)
