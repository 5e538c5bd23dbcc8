"""
Event and venue schemas
"""

from pydantic import Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from app.schemas.base import BaseSchema, IDSchema, TimestampSchema, blank_to_none
from app.models.event import SportType


class VenueInput(BaseSchema):
    """Venue as submitted with an event"""
    name: str = Field(..., min_length=1, max_length=100)
    address: Optional[str] = Field(None, max_length=200)

    @field_validator('address', mode='before')
    def blank_address_to_none(cls, v):
        return blank_to_none(v)


class VenueResponse(IDSchema):
    """Venue response schema"""
    event_id: UUID
    name: str
    address: Optional[str] = None
    created_at: datetime


class EventCreate(BaseSchema):
    """
    Input of the create operation. An empty venue list is accepted here;
    the one-venue minimum belongs to EventForm.
    """
    name: str = Field(..., min_length=1, max_length=100)
    sport_type: SportType
    date_time: datetime
    description: Optional[str] = Field(None, max_length=500)
    venues: List[VenueInput] = Field(default_factory=list)

    @field_validator('description', mode='before')
    def blank_description_to_none(cls, v):
        return blank_to_none(v)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Summer Classic",
                "sport_type": "Basketball",
                "date_time": "2025-07-01T18:00:00Z",
                "description": "Outdoor 3v3 tournament",
                "venues": [{"name": "Court A", "address": "12 Park Lane"}]
            }
        }


class EventUpdate(EventCreate):
    """Input of the update operation"""
    id: UUID


class EventForm(EventCreate):
    """Event form as submitted over HTTP; requires at least one venue"""
    venues: List[VenueInput] = Field(..., min_length=1)


class EventResponse(IDSchema, TimestampSchema):
    """Event response schema"""
    user_id: UUID
    name: str
    sport_type: SportType
    date_time: datetime
    description: Optional[str] = None
    venues: List[VenueResponse] = []
