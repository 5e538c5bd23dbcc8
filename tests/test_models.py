"""
Unit tests for database models
"""

import pytest
from datetime import datetime, timezone
from sqlalchemy import select, func

from app.models.event import Event, SportType
from app.models.venue import Venue


@pytest.mark.unit
@pytest.mark.asyncio
class TestEventModel:
    """Test Event and Venue models"""

    async def test_sport_type_stored_as_display_value(self, db_session, test_user):
        event = Event(
            user_id=test_user.id,
            name="Derby",
            sport_type=SportType.SOCCER,
            date_time=datetime(2025, 7, 1, 18, tzinfo=timezone.utc),
        )
        db_session.add(event)
        await db_session.commit()

        stored = await db_session.scalar(
            select(func.count(Event.id)).where(Event.sport_type == "Soccer")
        )
        assert stored == 1

    async def test_timestamps_default(self, db_session, test_user):
        event = Event(
            user_id=test_user.id,
            name="Derby",
            sport_type=SportType.SOCCER,
            date_time=datetime(2025, 7, 1, 18, tzinfo=timezone.utc),
        )
        db_session.add(event)
        await db_session.commit()
        await db_session.refresh(event)

        assert event.created_at is not None
        assert event.updated_at is not None

    async def test_orm_delete_cascades_to_venues(self, db_session, test_user, make_event):
        event = await make_event(test_user, "Derby", venues=("A", "B", "C"))
        loaded = await db_session.scalar(
            select(Event).where(Event.id == event.id).execution_options(populate_existing=True)
        )
        await db_session.refresh(loaded, ["venues"])
        assert len(loaded.venues) == 3

        await db_session.delete(loaded)
        await db_session.commit()

        assert await db_session.scalar(select(func.count(Venue.id))) == 0

    async def test_repr(self):
        event = Event(name="Derby", sport_type=SportType.SOCCER)

        assert "Derby" in repr(event)
