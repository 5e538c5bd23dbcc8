"""
Main API Router
Aggregates all endpoints
"""

from fastapi import APIRouter

from app.config import settings
from app.api.v1.endpoints import auth, events, health, pages

api_router = APIRouter()

api_router.include_router(pages.router, tags=["Pages"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(events.router, prefix="/events", tags=["Events"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])
api_router.include_router(health.router, prefix=f"{settings.API_PREFIX}/health", tags=["Health"])
