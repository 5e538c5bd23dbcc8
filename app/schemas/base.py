"""
Base Pydantic schemas
"""

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Any, Optional
from uuid import UUID


def blank_to_none(value: Any) -> Any:
    """Treat an empty or whitespace-only string as an absent value"""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class BaseSchema(BaseModel):
    """Base schema reading ORM rows and storing enums by their display value"""
    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
    )


class TimestampSchema(BaseSchema):
    """Schema with creation and modification times"""
    created_at: datetime
    updated_at: Optional[datetime] = None


class IDSchema(BaseSchema):
    """Schema with ID field"""
    id: UUID
