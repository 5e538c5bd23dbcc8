"""
Database models
"""

from app.models.user import User
from app.models.event import Event, SportType
from app.models.venue import Venue

__all__ = [
    "User",
    "Event",
    "SportType",
    "Venue"
]
