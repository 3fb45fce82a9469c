"""Main API router."""
from fastapi import APIRouter

from quickvote.api.endpoints import realtime, sessions

api_router = APIRouter(prefix="/api")

# Include all endpoint routers
api_router.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])
api_router.include_router(realtime.router, tags=["Realtime"])
