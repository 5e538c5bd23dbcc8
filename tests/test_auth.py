"""
Tests for the auth actions and authentication endpoints
"""

import pytest
from httpx import AsyncClient

from app.config import settings
from app.core.exceptions import AuthenticationError
from app.schemas.response import ActionSuccess, ActionFailure
from app.services import auth_actions
from conftest import TEST_PASSWORD


@pytest.mark.unit
@pytest.mark.asyncio
class TestAuthActions:
    """Test sign_up / sign_in / sign_out actions"""

    async def test_sign_up_redirects_to_dashboard(self, auth_service):
        result = await auth_actions.sign_up(auth_service, "New.User@Example.com", "secret123")

        assert isinstance(result, ActionSuccess)
        assert result.data.redirect_to == "/dashboard"
        assert result.data.session.user.email == "new.user@example.com"
        assert result.data.session.access_token

    async def test_sign_up_duplicate_email(self, auth_service, test_user):
        result = await auth_actions.sign_up(auth_service, test_user.email, "secret123")

        assert isinstance(result, ActionFailure)
        assert result.error == "User already registered"

    async def test_sign_up_short_password(self, auth_service):
        result = await auth_actions.sign_up(auth_service, "short@example.com", "12345")

        assert result.success is False
        assert result.error == "Password should be at least 6 characters"

    async def test_sign_up_invalid_email(self, auth_service):
        result = await auth_actions.sign_up(auth_service, "not-an-email", "secret123")

        assert result.success is False
        assert result.error.startswith("email:")

    async def test_sign_in(self, auth_service, test_user):
        result = await auth_actions.sign_in(auth_service, test_user.email, TEST_PASSWORD)

        assert result.success is True
        assert result.data.redirect_to == "/dashboard"
        assert result.data.session.user.id == test_user.id

    async def test_sign_in_wrong_password(self, auth_service, test_user):
        result = await auth_actions.sign_in(auth_service, test_user.email, "WrongPass123!")

        assert result.model_dump() == {"success": False, "error": "Invalid login credentials"}

    async def test_sign_in_unknown_user(self, auth_service):
        result = await auth_actions.sign_in(auth_service, "ghost@example.com", TEST_PASSWORD)

        assert result.error == "Invalid login credentials"

    async def test_sign_out_revokes_session(self, auth_service, test_user):
        session = auth_service.issue_session(test_user)
        assert (await auth_service.get_user(session.access_token)).id == test_user.id

        result = await auth_actions.sign_out(auth_service, session.access_token)

        assert result.success is True
        assert result.data.redirect_to == "/login"
        assert result.data.session is None
        with pytest.raises(AuthenticationError):
            await auth_service.get_user(session.access_token)
        with pytest.raises(AuthenticationError):
            await auth_service.refresh_session(session.refresh_token)

    async def test_sign_out_without_session(self, auth_service):
        result = await auth_actions.sign_out(auth_service, None)

        assert result.success is True

    async def test_sign_out_reports_revocation_failure(self, session_factory, test_user):
        from app.core.security import AuthService

        class BrokenRedis:
            async def get(self, key):
                return None

            async def setex(self, key, ttl, value):
                raise ConnectionError("redis down")

        async def provider():
            return BrokenRedis()

        auth = AuthService(session_factory=session_factory, redis_provider=provider)
        session = auth.issue_session(test_user)

        result = await auth_actions.sign_out(auth, session.access_token)

        assert result.success is False
        assert result.error == "Unable to sign out, please try again"


@pytest.mark.integration
@pytest.mark.asyncio
class TestAuthEndpoints:
    """Test /auth endpoints"""

    async def test_signup_sets_cookies_and_redirects(self, client: AsyncClient):
        response = await client.post(
            "/auth/signup",
            data={"email": "fresh@example.com", "password": "secret123"}
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"
        assert settings.ACCESS_COOKIE_NAME in response.cookies
        assert settings.REFRESH_COOKIE_NAME in response.cookies

    async def test_signup_duplicate(self, client: AsyncClient, test_user):
        response = await client.post(
            "/auth/signup",
            data={"email": test_user.email, "password": "secret123"}
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "User already registered"}

    async def test_login_success(self, client: AsyncClient, test_user):
        response = await client.post(
            "/auth/login",
            data={"email": test_user.email, "password": TEST_PASSWORD}
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"

    async def test_login_failure(self, client: AsyncClient, test_user):
        response = await client.post(
            "/auth/login",
            data={"email": test_user.email, "password": "nope-nope"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid login credentials"

    async def test_login_missing_fields(self, client: AsyncClient):
        response = await client.post("/auth/login", data={"email": "a@example.com"})

        assert response.status_code == 422
        assert response.json()["success"] is False

    async def test_logout_then_dashboard_requires_login(self, client: AsyncClient, auth_headers):
        response = await client.post("/auth/logout", headers=auth_headers)
        assert response.status_code == 303
        assert response.headers["location"] == "/login"

        response = await client.get("/dashboard", headers=auth_headers)
        assert response.status_code == 307
        assert response.headers["location"] == "/login"

    async def test_current_user(self, client: AsyncClient, auth_headers, test_user):
        response = await client.get("/auth/user", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["email"] == test_user.email

    async def test_current_user_anonymous(self, client: AsyncClient):
        response = await client.get("/auth/user")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "User not authenticated"}

    async def test_signup_then_browse_with_cookies(self, client: AsyncClient):
        """Cookies set by sign up authenticate later requests"""
        await client.post(
            "/auth/signup",
            data={"email": "cookie@example.com", "password": "secret123"}
        )

        response = await client.get("/dashboard")

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": []}
