"""
Base model classes with common fields
"""

from sqlalchemy import Column, DateTime, Uuid, func
import uuid

from app.core.database import Base


class BaseModel(Base):
    """
    Abstract base model with id and creation timestamp
    """
    __abstract__ = True

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False
    )
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    def dict(self):
        """Convert model to dictionary"""
        return {
            column.name: getattr(self, column.name)
            for column in self.__table__.columns
        }


class TimestampedModel(BaseModel):
    """
    Abstract base model that also tracks modification time
    """
    __abstract__ = True

    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )
