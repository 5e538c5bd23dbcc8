"""
Page endpoints: the site root, the auth pages and the dashboard
"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, Query

from app.config import settings
from app.models.event import SportType, ALL_SPORTS
from app.services.event_service import EventService, get_event_service
from app.api.v1.endpoints.events import action_response

router = APIRouter()


@router.get("/")
async def root() -> Any:
    """Root endpoint"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.APP_ENV,
        "login": settings.LOGIN_PATH,
        "signup": settings.SIGNUP_PATH,
    }


@router.get("/login")
async def login_page() -> Any:
    return {"page": "login", "action": "/auth/login", "fields": ["email", "password"]}


@router.get("/signup")
async def signup_page() -> Any:
    return {"page": "signup", "action": "/auth/signup", "fields": ["email", "password"]}


@router.get("/dashboard")
async def dashboard(
    search: Optional[str] = Query(None, max_length=100),
    sport: Optional[str] = Query(ALL_SPORTS),
    service: EventService = Depends(get_event_service)
) -> Any:
    """
    The signed-in user's events with search and sport filters
    """
    return action_response(await service.list_events(search, sport))


@router.get("/sports")
async def sport_types() -> Any:
    """
    Sport types accepted by the event form and the dashboard filter
    """
    return {"sports": [sport.value for sport in SportType], "all": ALL_SPORTS}
