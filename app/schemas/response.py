"""
Result schemas shared by store operations and auth actions
"""

from pydantic import BaseModel, Field
from typing import Literal, Optional, Generic, TypeVar, Union
from typing_extensions import TypeAliasType

from app.schemas.user import AuthSession

T = TypeVar('T')


class ActionSuccess(BaseModel, Generic[T]):
    """Successful outcome carrying the operation's data"""
    success: Literal[True] = True
    data: T


class ActionFailure(BaseModel):
    """Failed outcome; `code` and `status_code` stay server-side"""
    success: Literal[False] = False
    error: str
    code: Optional[str] = Field(None, exclude=True)
    status_code: int = Field(400, exclude=True)


# Generic alias: ActionResponse[X] is Union[ActionSuccess[X], ActionFailure]
ActionResponse = TypeAliasType("ActionResponse", Union[ActionSuccess[T], ActionFailure], type_params=(T,))


class AuthRedirect(BaseModel):
    """Navigation that follows a successful auth action"""
    redirect_to: str
    session: Optional[AuthSession] = None

