"""Integration tests for auth API endpoints"""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User


class TestRegisterEndpoint:
    """Test user registration endpoint"""

    @pytest.mark.asyncio
    async def test_register_success(self, client: AsyncClient, db_session: AsyncSession):
        """Test successful user registration"""
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "newuser@example.com",
                "password": "SecurePass123!",
                "full_name": "New User",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == 86400
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["user"]["email"] == "newuser@example.com"
        assert data["user"]["full_name"] == "New User"
        assert data["user"]["is_active"] is True
        assert "hashed_password" not in data["user"]
        assert "refresh_token" not in data["user"]

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client: AsyncClient, test_user: User):
        """Test registration with duplicate email fails"""
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "test@example.com",
                "password": "SecurePass123!",
                "full_name": "Another User",
            },
        )

        assert response.status_code == 409
        assert "already exists" in response.json()["detail"].lower()

    @pytest.mark.asyncio
    async def test_register_invalid_email(self, client: AsyncClient):
        """Test registration with invalid email format"""
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "not-an-email",
                "password": "SecurePass123!",
                "full_name": "New User",
            },
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_register_short_password(self, client: AsyncClient):
        """Test registration with a password under 8 characters"""
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "short@example.com",
                "password": "short",
                "full_name": "Short Password",
            },
        )

        assert response.status_code == 422


class TestLoginEndpoint:
    """Test login endpoint"""

    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == str(test_user.id)
        assert data["access_token"]

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "wrongpassword"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": "testpassword123"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_login_inactive_account(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User
    ):
        test_user.is_active = False
        await db_session.commit()

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Account is inactive"


class TestTokenLifecycle:
    """Test refresh and logout"""

    async def _login(self, client: AsyncClient) -> dict:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        )
        assert response.status_code == 200
        return response.json()

    @pytest.mark.asyncio
    async def test_refresh_rotates_tokens(self, client: AsyncClient, test_user: User):
        tokens = await self._login(client)

        response = await client.post(
            "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )

        assert response.status_code == 200
        refreshed = response.json()
        assert refreshed["refresh_token"] != tokens["refresh_token"]

        # The previous refresh token is no longer accepted
        response = await client.post(
            "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid refresh token"

    @pytest.mark.asyncio
    async def test_refresh_with_access_token_rejected(self, client: AsyncClient, test_user: User):
        tokens = await self._login(client)

        response = await client.post(
            "/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_revokes_refresh_token(self, client: AsyncClient, test_user: User):
        tokens = await self._login(client)
        headers = {"Authorization": f"Bearer {tokens['access_token']}"}

        response = await client.post("/api/v1/auth/logout", headers=headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Logged out successfully"

        response = await client.post(
            "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 401


class TestMeEndpoint:
    """Test current user endpoint"""

    @pytest.mark.asyncio
    async def test_me(self, client: AsyncClient, test_user: User, auth_headers: dict):
        response = await client.get("/api/v1/auth/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "test@example.com"

    @pytest.mark.asyncio
    async def test_me_without_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_with_refresh_token(self, client: AsyncClient, test_user: User):
        tokens = await self._login(client)

        response = await client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_inactive_user(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User, auth_headers: dict
    ):
        test_user.is_active = False
        await db_session.commit()

        response = await client.get("/api/v1/auth/me", headers=auth_headers)

        assert response.status_code == 403

    async def _login(self, client: AsyncClient) -> dict:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        )
        return response.json()
