"""
Session gate: resolves the caller's session on every request and redirects
between the public and the protected parts of the site.
"""

from dataclasses import dataclass
from typing import Iterable, Optional
import enum
import logging
import re

from fastapi import Request, Response
from fastapi.responses import RedirectResponse

from app.config import settings
from app.core.exceptions import FastbreakException
from app.schemas.user import AuthSession

logger = logging.getLogger(__name__)

# Static assets never carry a session
STATIC_ASSET_PATTERN = re.compile(r".*\.(?:svg|png|jpg|jpeg|gif|webp)$", re.IGNORECASE)


class GateAction(str, enum.Enum):
    PASS = "pass"
    LOGIN = "login"
    LANDING = "landing"


@dataclass(frozen=True)
class GateDecision:
    action: GateAction
    location: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return self.action is not GateAction.PASS


def decide(
    path: str,
    authenticated: bool,
    protected_prefixes: Optional[Iterable[str]] = None,
    public_only_paths: Optional[Iterable[str]] = None,
    login_path: Optional[str] = None,
    landing_path: Optional[str] = None
) -> GateDecision:
    """
    Decide what happens to a request for `path`.

    Anonymous callers are sent to the login page from protected paths;
    signed-in callers are sent to the landing page from the login, signup
    and root pages. Everything else passes through.
    """
    protected_prefixes = settings.PROTECTED_PREFIXES if protected_prefixes is None else protected_prefixes
    login_path = login_path or settings.LOGIN_PATH
    landing_path = landing_path or settings.LANDING_PATH
    if public_only_paths is None:
        public_only_paths = (login_path, settings.SIGNUP_PATH, "/")

    if not authenticated and any(path.startswith(prefix) for prefix in protected_prefixes):
        return GateDecision(GateAction.LOGIN, login_path)

    if authenticated and path in public_only_paths:
        return GateDecision(GateAction.LANDING, landing_path)

    return GateDecision(GateAction.PASS)


def is_gated(path: str) -> bool:
    """
    Whether the gate runs for this path at all
    """
    if STATIC_ASSET_PATTERN.match(path):
        return False
    excluded = list(settings.GATE_EXCLUDED_PREFIXES) + [f"{settings.API_PREFIX}/health"]
    return not any(path.startswith(prefix) for prefix in excluded)


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return None


def set_session_cookies(response: Response, session: AuthSession):
    """
    Write the session's tokens as http-only cookies
    """
    response.set_cookie(
        settings.ACCESS_COOKIE_NAME,
        session.access_token,
        max_age=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS * 24 * 3600,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    response.set_cookie(
        settings.REFRESH_COOKIE_NAME,
        session.refresh_token,
        max_age=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS * 24 * 3600,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def clear_session_cookies(response: Response):
    response.delete_cookie(settings.ACCESS_COOKIE_NAME)
    response.delete_cookie(settings.REFRESH_COOKIE_NAME)


def _writes_session_cookies(response: Response) -> bool:
    names = (settings.ACCESS_COOKIE_NAME, settings.REFRESH_COOKIE_NAME)
    return any(
        header.split("=", 1)[0].strip() in names
        for header in response.headers.getlist("set-cookie")
    )


async def resolve_session(request: Request):
    """
    Find the user behind the request's credentials.

    Returns (user, access_token, refreshed_session). A failed check of any
    kind counts as "no session".
    """
    auth = request.app.state.auth_service
    access_token = request.cookies.get(settings.ACCESS_COOKIE_NAME) or _bearer_token(request)

    if access_token:
        try:
            user = await auth.get_user(access_token)
            return user, access_token, None
        except FastbreakException as e:
            logger.debug(f"Access token rejected: {e.message}")

    refresh_token = request.cookies.get(settings.REFRESH_COOKIE_NAME)
    if refresh_token:
        try:
            session = await auth.refresh_session(refresh_token)
            user = await auth.get_user(session.access_token)
            return user, session.access_token, session
        except FastbreakException as e:
            logger.debug(f"Refresh token rejected: {e.message}")

    return None, None, None


async def session_gate(request: Request, call_next):
    """
    HTTP middleware applying the gate to every request
    """
    request.state.user = None
    request.state.access_token = None

    path = request.url.path
    if not is_gated(path):
        return await call_next(request)

    try:
        user, access_token, refreshed = await resolve_session(request)
    except Exception as e:
        # Auth backend unreachable; continue as anonymous
        logger.error(f"Session check failed: {e}")
        user, access_token, refreshed = None, None, None

    request.state.user = user
    request.state.access_token = access_token

    decision = decide(path, authenticated=user is not None)
    if decision.is_redirect:
        logger.debug(f"Gate redirect {path} -> {decision.location}")
        response = RedirectResponse(url=decision.location, status_code=307)
    else:
        response = await call_next(request)

    # A response that clears the session (sign out) keeps its deletions
    if refreshed is not None and not _writes_session_cookies(response):
        set_session_cookies(response, refreshed)

    return response
