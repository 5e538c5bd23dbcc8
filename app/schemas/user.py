"""
User and session schemas
"""

from pydantic import EmailStr, field_validator
from uuid import UUID
from datetime import datetime

from app.schemas.base import BaseSchema, IDSchema


class Credentials(BaseSchema):
    """Email and password pair submitted to the auth actions"""
    email: EmailStr
    password: str

    @field_validator('email')
    def normalize_email(cls, v):
        return v.lower()


class UserResponse(IDSchema):
    """User response schema"""
    email: EmailStr
    created_at: datetime


class AuthSession(BaseSchema):
    """Tokens issued by the auth service for one signed-in session"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
