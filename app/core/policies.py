"""
Row ownership policy for events.

An event is visible to, and mutable by, its owner only. Anonymous callers
see no events.
"""

from typing import Optional

from sqlalchemy import Select, false

from app.models.event import Event
from app.models.user import User


def owned_by(user: Optional[User]):
    """
    WHERE clause selecting the events `user` may see or change
    """
    if user is None:
        return false()
    return Event.user_id == user.id


def scope_events(stmt: Select, user: Optional[User]) -> Select:
    return stmt.where(owned_by(user))
