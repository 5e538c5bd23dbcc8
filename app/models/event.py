"""
Event model
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, Uuid
from sqlalchemy.orm import relationship
import enum

from app.models.base import TimestampedModel


class SportType(str, enum.Enum):
    BASKETBALL = "Basketball"
    SOCCER = "Soccer"
    TENNIS = "Tennis"
    BASEBALL = "Baseball"
    FOOTBALL = "Football"
    VOLLEYBALL = "Volleyball"
    HOCKEY = "Hockey"


# Sentinel accepted by the sport filter meaning "no filter"
ALL_SPORTS = "all"


class Event(TimestampedModel):
    """
    Sports event owned by the user who created it
    """
    __tablename__ = "events"

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name = Column(String(100), nullable=False, index=True)
    sport_type = Column(
        Enum(
            SportType,
            name="sport_type",
            native_enum=False,
            length=32,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        index=True
    )
    date_time = Column(DateTime(timezone=True), nullable=False, index=True)
    description = Column(String(500))

    # Relationships
    owner = relationship("User", back_populates="events")
    venues = relationship(
        "Venue",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Venue.created_at"
    )

    def __repr__(self):
        return f"<Event(id={self.id}, name={self.name}, sport_type={self.sport_type}, date_time={self.date_time})>"
