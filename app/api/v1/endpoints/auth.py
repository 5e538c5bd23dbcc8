"""
Authentication endpoints
"""

from typing import Any
from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import JSONResponse, RedirectResponse

from app.core.exceptions import AuthenticationError
from app.core.security import AuthService, get_auth_service, get_optional_user, get_access_token
from app.core.session_gate import set_session_cookies, clear_session_cookies
from app.models.user import User
from app.schemas.response import ActionFailure
from app.schemas.user import UserResponse
from app.services import auth_actions

router = APIRouter()


def _respond(result, clear_cookies: bool = False):
    """
    Turn an auth action result into a redirect or a failure document
    """
    if isinstance(result, ActionFailure):
        return JSONResponse(status_code=result.status_code, content=result.model_dump(mode="json"))

    response = RedirectResponse(url=result.data.redirect_to, status_code=status.HTTP_303_SEE_OTHER)
    if result.data.session is not None:
        set_session_cookies(response, result.data.session)
    if clear_cookies:
        clear_session_cookies(response)
    return response


@router.post("/signup")
async def signup(
    email: str = Form(...),
    password: str = Form(...),
    auth: AuthService = Depends(get_auth_service)
) -> Any:
    """
    Create an account and sign in
    """
    return _respond(await auth_actions.sign_up(auth, email, password))


@router.post("/login")
async def login(
    email: str = Form(...),
    password: str = Form(...),
    auth: AuthService = Depends(get_auth_service)
) -> Any:
    """
    Sign in with email and password
    """
    return _respond(await auth_actions.sign_in(auth, email, password))


@router.post("/logout")
async def logout(
    access_token: str = Depends(get_access_token),
    auth: AuthService = Depends(get_auth_service)
) -> Any:
    """
    Sign out and clear the session cookies
    """
    return _respond(await auth_actions.sign_out(auth, access_token), clear_cookies=True)


@router.get("/user", response_model=UserResponse)
async def current_user(user: User = Depends(get_optional_user)) -> Any:
    """
    Get current user information
    """
    if user is None:
        error = AuthenticationError()
        return JSONResponse(
            status_code=error.status_code,
            content=ActionFailure(error=error.message).model_dump(mode="json")
        )
    return user
