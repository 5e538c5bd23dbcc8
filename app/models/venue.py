"""
Venue model
"""

from sqlalchemy import Column, String, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class Venue(BaseModel):
    """
    Location of an event; exclusively owned by that event
    """
    __tablename__ = "venues"

    event_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name = Column(String(100), nullable=False)
    address = Column(String(200))

    # Relationships
    event = relationship("Event", back_populates="venues")

    def __repr__(self):
        return f"<Venue(id={self.id}, name={self.name}, event_id={self.event_id})>"
