"""
Pydantic schemas for request and response validation
"""

from app.schemas.user import (
    Credentials,
    UserResponse,
    AuthSession
)
from app.schemas.event import (
    VenueInput,
    VenueResponse,
    EventCreate,
    EventUpdate,
    EventForm,
    EventResponse
)
from app.schemas.response import (
    ActionSuccess,
    ActionFailure,
    ActionResponse,
    AuthRedirect
)

__all__ = [
    "Credentials",
    "UserResponse",
    "AuthSession",
    "VenueInput",
    "VenueResponse",
    "EventCreate",
    "EventUpdate",
    "EventForm",
    "EventResponse",
    "ActionSuccess",
    "ActionFailure",
    "ActionResponse",
    "AuthRedirect"
]
