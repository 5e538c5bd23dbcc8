"""
Auth service: password credentials, JWT sessions and session revocation
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Callable, Awaitable
from uuid import UUID, uuid4
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Request
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
import logging

from app.config import settings
from app.core.database import async_session
from app.core.exceptions import AuthenticationError, AuthServiceError
from app.core.redis import get_redis
from app.models.user import User
from app.schemas.user import AuthSession, UserResponse

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"
REVOKED_SESSION_PREFIX = "revoked:session:"

# Messages reported to callers of the auth actions
USER_EXISTS_MESSAGE = "User already registered"
INVALID_CREDENTIALS_MESSAGE = "Invalid login credentials"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


class AuthService:
    """
    In-process auth service.

    Users live in the ``users`` table. A session is a pair of JWTs (access and
    refresh) sharing a session id ``sid``; signing out revokes the ``sid`` in
    Redis so neither token is accepted afterwards.
    """

    def __init__(
        self,
        session_factory=None,
        redis_provider: Optional[Callable[[], Awaitable[Any]]] = None
    ):
        self.session_factory = session_factory or async_session
        self.redis_provider = redis_provider or get_redis

    # Tokens

    def _create_token(
        self,
        user_id: UUID,
        session_id: str,
        token_type: str,
        expires_delta: timedelta
    ) -> str:
        now = datetime.now(timezone.utc)
        to_encode = {
            "sub": str(user_id),
            "sid": session_id,
            "jti": uuid4().hex,
            "type": token_type,
            "iat": now,
            "exp": now + expires_delta,
        }
        return jwt.encode(
            to_encode,
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )

    def create_access_token(
        self,
        user_id: UUID,
        session_id: str,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
        return self._create_token(user_id, session_id, ACCESS_TOKEN_TYPE, expires_delta)

    def create_refresh_token(
        self,
        user_id: UUID,
        session_id: str,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        if expires_delta is None:
            expires_delta = timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
        return self._create_token(user_id, session_id, REFRESH_TOKEN_TYPE, expires_delta)

    def issue_session(self, user: User, session_id: Optional[str] = None) -> AuthSession:
        """
        Build a fresh token pair for the user
        """
        session_id = session_id or uuid4().hex
        return AuthSession(
            access_token=self.create_access_token(user.id, session_id),
            refresh_token=self.create_refresh_token(user.id, session_id),
            expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserResponse.model_validate(user),
        )

    async def decode_token(self, token: str, expected_type: str) -> Dict[str, Any]:
        """
        Decode and verify a JWT, its type and its session's revocation status
        """
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM]
            )
        except JWTError as e:
            logger.debug(f"JWT decode error: {e}")
            raise AuthenticationError("Invalid or expired session")

        if payload.get("type") != expected_type:
            raise AuthenticationError(f"Invalid token type. Expected {expected_type}")
        if not payload.get("sub") or not payload.get("sid"):
            raise AuthenticationError("Invalid or expired session")

        if await self.is_session_revoked(payload["sid"]):
            raise AuthenticationError("Session has been signed out")

        return payload

    # Revocation

    async def is_session_revoked(self, session_id: str) -> bool:
        try:
            client = await self.redis_provider()
            return await client.get(f"{REVOKED_SESSION_PREFIX}{session_id}") is not None
        except Exception as e:
            logger.error(f"Error checking session revocation: {e}")
            return False  # Fail open for availability

    async def revoke_session(self, session_id: str):
        ttl = int(timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS).total_seconds())
        try:
            client = await self.redis_provider()
            await client.setex(f"{REVOKED_SESSION_PREFIX}{session_id}", ttl, "1")
        except Exception as e:
            logger.error(f"Error revoking session {session_id}: {e}")
            raise AuthServiceError("Unable to sign out, please try again")

    # Users

    async def _load_user(self, user_id: str) -> Optional[User]:
        try:
            user_uuid = UUID(user_id)
        except ValueError:
            return None
        async with self.session_factory() as session:
            result = await session.execute(select(User).where(User.id == user_uuid))
            return result.scalar_one_or_none()

    async def sign_up(self, email: str, password: str) -> AuthSession:
        """
        Register a new user and sign them in
        """
        if len(password) < settings.AUTH_MIN_PASSWORD_LENGTH:
            raise AuthServiceError(
                f"Password should be at least {settings.AUTH_MIN_PASSWORD_LENGTH} characters"
            )

        async with self.session_factory() as session:
            existing = await session.execute(select(User.id).where(User.email == email))
            if existing.scalar_one_or_none() is not None:
                raise AuthServiceError(USER_EXISTS_MESSAGE)

            user = User(
                email=email,
                password_hash=get_password_hash(password),
                is_active=True
            )
            session.add(user)
            try:
                await session.commit()
            except IntegrityError:
                # Lost a race with a concurrent sign up for the same email
                await session.rollback()
                raise AuthServiceError(USER_EXISTS_MESSAGE)
            await session.refresh(user)

        logger.info(f"User signed up: {user.id}")
        return self.issue_session(user)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """
        Verify credentials and open a new session
        """
        async with self.session_factory() as session:
            result = await session.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()

        if not user or not verify_password(password, user.password_hash):
            raise AuthServiceError(INVALID_CREDENTIALS_MESSAGE)
        if not user.is_active:
            raise AuthServiceError("User account is inactive")

        return self.issue_session(user)

    async def sign_out(self, access_token: Optional[str]):
        """
        Revoke the session the token belongs to. Signing out without a
        valid session is a no-op.
        """
        if not access_token:
            return
        try:
            payload = await self.decode_token(access_token, ACCESS_TOKEN_TYPE)
        except AuthenticationError:
            return
        await self.revoke_session(payload["sid"])
        logger.info(f"User signed out: {payload['sub']}")

    async def get_user(self, access_token: str) -> User:
        """
        Resolve the user behind an access token
        """
        payload = await self.decode_token(access_token, ACCESS_TOKEN_TYPE)
        user = await self._load_user(payload["sub"])
        if not user or not user.is_active:
            raise AuthenticationError("User not found")
        return user

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        """
        Exchange a refresh token for a new token pair in the same session
        """
        payload = await self.decode_token(refresh_token, REFRESH_TOKEN_TYPE)
        user = await self._load_user(payload["sub"])
        if not user or not user.is_active:
            raise AuthenticationError("User not found")
        return self.issue_session(user, session_id=payload["sid"])


def get_auth_service(request: Request) -> AuthService:
    """
    Dependency returning the application's auth service
    """
    return request.app.state.auth_service


def get_optional_user(request: Request) -> Optional[User]:
    """
    Dependency returning the user resolved by the session gate, if any
    """
    return getattr(request.state, "user", None)


def get_access_token(request: Request) -> Optional[str]:
    """
    Dependency returning the access token resolved by the session gate, if any
    """
    return getattr(request.state, "access_token", None)
