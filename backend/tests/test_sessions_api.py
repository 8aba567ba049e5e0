"""
AdoptMe Backend - Session Endpoint Tests
=========================================

What:  Register, login (cookie), current session and logout.
"""

import pytest

from adoptme.database import session_scope
from adoptme.repositories import UserRepository
from adoptme.security import verify_password

NEW_USER = {
    "first_name": "Test",
    "last_name": "User",
    "email": "new.user@test.com",
    "password": "password123",
}


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_returns_new_id(self, client):
        response = await client.post("/api/sessions/register", json=NEW_USER)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert isinstance(body["payload"], str)

        user = (await client.get(f"/api/users/{body['payload']}")).json()["payload"]
        assert user["email"] == NEW_USER["email"]
        assert user["role"] == "user"
        assert "password" not in user

    @pytest.mark.asyncio
    async def test_password_is_hashed_at_rest(self, client, session_factory, pwd_context, app_settings):
        await client.post("/api/sessions/register", json=NEW_USER)

        async with session_scope(session_factory) as session:
            stored = await UserRepository(session).get_by_email(NEW_USER["email"])

        assert stored.password != NEW_USER["password"]
        assert verify_password(NEW_USER["password"], stored.password, pwd_context)
        # cost factor comes from the Settings handed to create_app()
        assert stored.password.startswith(f"$2b${app_settings.bcrypt_rounds:02d}$")

    @pytest.mark.asyncio
    async def test_missing_fields(self, client):
        response = await client.post(
            "/api/sessions/register",
            json={"first_name": "Test", "email": "x@test.com"},
        )
        assert response.status_code == 400
        assert response.json() == {"status": "error", "error": "Incomplete values"}

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client):
        await client.post("/api/sessions/register", json=NEW_USER)
        response = await client.post("/api/sessions/register", json=NEW_USER)
        assert response.status_code == 400
        assert response.json() == {"status": "error", "error": "User already exists"}

    @pytest.mark.asyncio
    async def test_malformed_body(self, client):
        response = await client.post(
            "/api/sessions/register",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"status": "error", "error": "Invalid request data"}


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_sets_cookie_and_last_connection(self, client, make_user, read_session_cookie):
        user = await make_user(email="login@test.com")

        response = await client.post(
            "/api/sessions/login",
            json={"email": "login@test.com", "password": "password123"},
        )

        assert response.status_code == 200
        assert response.json() == {"status": "success", "message": "Logged in"}
        assert read_session_cookie(response)
        set_cookie = response.headers["set-cookie"]
        assert "coderCookie=" in set_cookie
        assert "HttpOnly" in set_cookie
        assert "Max-Age=3600" in set_cookie

        profile = (await client.get(f"/api/users/{user.id}")).json()["payload"]
        assert profile["last_connection"] is not None

    @pytest.mark.asyncio
    async def test_missing_password(self, client):
        response = await client.post("/api/sessions/login", json={"email": "login@test.com"})
        assert response.status_code == 400
        assert response.json()["error"] == "Incomplete values"

    @pytest.mark.asyncio
    async def test_unknown_email(self, client):
        response = await client.post(
            "/api/sessions/login",
            json={"email": "nobody@test.com", "password": "password123"},
        )
        assert response.status_code == 404
        assert response.json() == {"status": "error", "error": "User doesn't exist"}

    @pytest.mark.asyncio
    async def test_wrong_password(self, client, make_user):
        await make_user(email="login@test.com")
        response = await client.post(
            "/api/sessions/login",
            json={"email": "login@test.com", "password": "wrongpassword"},
        )
        assert response.status_code == 400
        assert response.json() == {"status": "error", "error": "Incorrect password"}

    @pytest.mark.asyncio
    async def test_register_then_login(self, client, read_session_cookie):
        await client.post("/api/sessions/register", json=NEW_USER)
        response = await client.post(
            "/api/sessions/login",
            json={"email": NEW_USER["email"], "password": NEW_USER["password"]},
        )
        assert response.status_code == 200
        assert read_session_cookie(response)


class TestCurrentAndLogout:
    @pytest.mark.asyncio
    async def test_current_without_cookie(self, client):
        response = await client.get("/api/sessions/current")
        assert response.status_code == 401
        assert response.json() == {"status": "error", "error": "Not authenticated"}

    @pytest.mark.asyncio
    async def test_current_with_tampered_cookie(self, client):
        response = await client.get(
            "/api/sessions/current",
            headers={"Cookie": "coderCookie=abc.def.ghi"},
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_current_returns_session_user(self, client, logged_in):
        user, cookie = logged_in
        response = await client.get("/api/sessions/current", headers=cookie)

        assert response.status_code == 200
        payload = response.json()["payload"]
        assert payload == {
            "id": str(user.id),
            "name": "Ada Lovelace",
            "email": "session@test.com",
            "role": "user",
        }

    @pytest.mark.asyncio
    async def test_logout_clears_cookie(self, client, logged_in):
        _, cookie = logged_in
        response = await client.post("/api/sessions/logout", headers=cookie)

        assert response.status_code == 200
        assert response.json() == {"status": "success", "message": "Logged out"}
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("coderCookie=")
        assert "Max-Age=0" in set_cookie

    @pytest.mark.asyncio
    async def test_logout_without_session_still_succeeds(self, client):
        response = await client.post("/api/sessions/logout")
        assert response.status_code == 200
