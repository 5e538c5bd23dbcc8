"""
API endpoints module
"""

from . import auth, events, health, pages

__all__ = [
    "auth",
    "events",
    "health",
    "pages"
]
