"""
Event store access: validated CRUD over events and their venues.

Every public method returns an ActionResponse; nothing raises.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union
from uuid import UUID
import logging

from fastapi import Depends, Request
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_session
from app.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from app.core.logging import LoggerAdapter
from app.core.policies import scope_events
from app.core.security import get_optional_user
from app.models.event import Event, SportType, ALL_SPORTS
from app.models.user import User
from app.models.venue import Venue
from app.schemas.event import EventCreate, EventUpdate, EventResponse, VenueInput
from app.schemas.response import ActionResponse
from app.services.actions import handle_action, parse_input

logger = logging.getLogger(__name__)


def _parse_event_id(event_id: Union[str, UUID]) -> UUID:
    if isinstance(event_id, UUID):
        return event_id
    try:
        return UUID(str(event_id))
    except ValueError:
        raise ValidationError(f"Invalid event id: {event_id}", field="id")


class EventService:
    """
    Store operations on behalf of one caller (or an anonymous one)
    """

    def __init__(self, db: AsyncSession, user: Optional[User] = None, request_id: Optional[str] = None):
        self.db = db
        self.user = user
        self.log = LoggerAdapter(logger, {"user_id": user.id if user else None, "request_id": request_id})

    def _require_user(self) -> User:
        if self.user is None:
            raise AuthenticationError("User not authenticated")
        return self.user

    def _base_query(self):
        return scope_events(
            select(Event).options(selectinload(Event.venues)),
            self.user
        )

    async def _fetch(self, event_id: UUID) -> Event:
        stmt = (
            self._base_query()
            .where(Event.id == event_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        event = result.scalar_one_or_none()
        if event is None:
            raise NotFoundError("Event", event_id)
        return event

    def _add_venues(self, event_id: UUID, venues: List[VenueInput]):
        for venue in venues:
            self.db.add(Venue(event_id=event_id, name=venue.name, address=venue.address))

    async def list_events(
        self,
        search: Optional[str] = None,
        sport: Optional[str] = None
    ) -> ActionResponse[List[EventResponse]]:
        """
        Events visible to the caller, with venues, ordered by date_time.
        `search` matches a case-insensitive substring of the name; `sport`
        other than "all" must match exactly.
        """
        async def action():
            stmt = self._base_query()
            if search:
                stmt = stmt.where(Event.name.icontains(search, autoescape=True))
            if sport and sport != ALL_SPORTS:
                stmt = stmt.where(Event.sport_type == sport)
            stmt = stmt.order_by(Event.date_time.asc())

            result = await self.db.execute(stmt)
            events = result.scalars().all()
            return [EventResponse.model_validate(event) for event in events]

        return await handle_action(action)

    async def get_event(self, event_id: Union[str, UUID]) -> ActionResponse[EventResponse]:
        async def action():
            event = await self._fetch(_parse_event_id(event_id))
            return EventResponse.model_validate(event)

        return await handle_action(action)

    async def create_event(
        self,
        data: Union[EventCreate, Dict[str, Any]]
    ) -> ActionResponse[EventResponse]:
        """
        Insert an event owned by the caller together with its venues.
        Both inserts commit in one transaction.
        """
        async def action():
            user = self._require_user()
            payload = parse_input(EventCreate, data)

            event = Event(
                user_id=user.id,
                name=payload.name,
                sport_type=SportType(payload.sport_type),
                date_time=payload.date_time,
                description=payload.description,
            )
            self.db.add(event)
            await self.db.flush()

            self._add_venues(event.id, payload.venues)
            await self.db.commit()

            self.log.info(f"Event created: {event.id} with {len(payload.venues)} venue(s)")
            return EventResponse.model_validate(await self._fetch(event.id))

        return await handle_action(action, on_error=self.db.rollback)

    async def update_event(
        self,
        data: Union[EventUpdate, Dict[str, Any]]
    ) -> ActionResponse[EventResponse]:
        """
        Overwrite the event's fields and replace its venue set wholesale
        """
        async def action():
            self._require_user()
            payload = parse_input(EventUpdate, data)
            event = await self._fetch(payload.id)

            event.name = payload.name
            event.sport_type = SportType(payload.sport_type)
            event.date_time = payload.date_time
            event.description = payload.description
            event.updated_at = datetime.now(timezone.utc)

            await self.db.execute(delete(Venue).where(Venue.event_id == event.id))
            self._add_venues(event.id, payload.venues)
            await self.db.commit()

            self.log.info(f"Event updated: {event.id} with {len(payload.venues)} venue(s)")
            return EventResponse.model_validate(await self._fetch(event.id))

        return await handle_action(action, on_error=self.db.rollback)

    async def delete_event(self, event_id: Union[str, UUID]) -> ActionResponse[None]:
        """
        Delete the event; its venues are removed with it
        """
        async def action():
            self._require_user()
            event = await self._fetch(_parse_event_id(event_id))
            await self.db.delete(event)
            await self.db.commit()
            self.log.info(f"Event deleted: {event.id}")
            return None

        return await handle_action(action, on_error=self.db.rollback)


def get_event_service(
    request: Request,
    db: AsyncSession = Depends(get_session)
) -> EventService:
    """
    Dependency building the store for the current request's caller
    """
    return EventService(
        db,
        get_optional_user(request),
        request_id=getattr(request.state, "request_id", None)
    )
