"""
Auth actions: sign up, sign in and sign out through the auth service.

Each action either succeeds with the page to navigate to (and the session
for sign up / sign in) or fails with the auth service's message.
"""

from typing import Optional
import logging

from app.config import settings
from app.core.security import AuthService
from app.schemas.response import ActionResponse, AuthRedirect
from app.schemas.user import Credentials
from app.services.actions import handle_action, parse_input

logger = logging.getLogger(__name__)


async def sign_up(auth: AuthService, email: str, password: str) -> ActionResponse[AuthRedirect]:
    async def action():
        credentials = parse_input(Credentials, {"email": email, "password": password})
        session = await auth.sign_up(credentials.email, credentials.password)
        return AuthRedirect(redirect_to=settings.LANDING_PATH, session=session)

    return await handle_action(action)


async def sign_in(auth: AuthService, email: str, password: str) -> ActionResponse[AuthRedirect]:
    async def action():
        credentials = parse_input(Credentials, {"email": email, "password": password})
        session = await auth.sign_in_with_password(credentials.email, credentials.password)
        return AuthRedirect(redirect_to=settings.LANDING_PATH, session=session)

    return await handle_action(action)


async def sign_out(auth: AuthService, access_token: Optional[str]) -> ActionResponse[AuthRedirect]:
    async def action():
        await auth.sign_out(access_token)
        return AuthRedirect(redirect_to=settings.LOGIN_PATH)

    return await handle_action(action)
