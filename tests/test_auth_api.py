"""Tests for registration, login and profile routes."""
import pytest

from bliss_dental.services.auth_service import hash_password, verify_password


async def register(client, **overrides):
    payload = {
        "name": "Ana Reyes",
        "email": "Ana@Example.com ",
        "password": "secret123",
        "phone": "555-0101",
    }
    payload.update(overrides)
    return await client.post("/api/register", json=payload)


def test_password_hash_round_trip():
    hashed = hash_password("secret123")

    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("x" * 80, hashed)


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_returns_token_and_user(self, client):
        response = await register(client)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Registration successful"
        assert body["token"]
        assert body["user"]["email"] == "ana@example.com"
        assert body["user"]["role"] == "patient"
        assert "password" not in body["user"]
        assert "passwordHash" not in body["user"]

    @pytest.mark.asyncio
    async def test_duplicate_email_is_rejected(self, client):
        await register(client)

        response = await register(client, email="ana@example.com")

        assert response.status_code == 400
        assert response.json()["message"] == "User already exists with this email"

    @pytest.mark.asyncio
    async def test_short_password_is_rejected(self, client):
        response = await register(client, password="12345")

        assert response.status_code == 400
        assert response.json()["message"] == "Password must be at least 6 characters"

    @pytest.mark.asyncio
    async def test_password_over_bcrypt_limit_is_rejected(self, client):
        response = await register(client, password="x" * 80)

        assert response.status_code == 400
        assert response.json()["message"] == "Password must be at most 72 bytes"

    @pytest.mark.asyncio
    async def test_password_limit_counts_bytes(self, client):
        response = await register(client, password="\u00f1" * 40)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_password_at_bcrypt_limit_is_accepted(self, client):
        response = await register(client, password="x" * 72)

        assert response.status_code == 201
        login = await client.post(
            "/api/login", json={"email": "ana@example.com", "password": "x" * 72}
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_missing_fields_are_rejected(self, client):
        response = await register(client, name=None)

        assert response.status_code == 400
        assert response.json()["message"] == "Name, email, and password are required"


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_records_last_login(self, client):
        await register(client)

        response = await client.post(
            "/api/login", json={"email": "ana@example.com", "password": "secret123"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["token"]
        assert body["user"]["lastLogin"] == "2030-01-10T12:00:00"

    @pytest.mark.asyncio
    async def test_wrong_password(self, client):
        await register(client)

        response = await client.post(
            "/api/login", json={"email": "ana@example.com", "password": "nope-nope"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_overlong_password_is_invalid_credentials(self, client):
        await register(client)

        response = await client.post(
            "/api/login", json={"email": "ana@example.com", "password": "x" * 80}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_unknown_email(self, client):
        response = await client.post(
            "/api/login", json={"email": "ghost@example.com", "password": "secret123"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_missing_credentials(self, client):
        response = await client.post("/api/login", json={"email": "ana@example.com"})

        assert response.status_code == 400


class TestProfile:
    @pytest.mark.asyncio
    async def test_me_with_token(self, client):
        token = (await register(client)).json()["token"]

        response = await client.get("/api/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Ana Reyes"

    @pytest.mark.asyncio
    async def test_me_without_token(self, client):
        response = await client.get("/api/me")

        assert response.status_code == 401
        assert response.json()["message"] == "No token provided"

    @pytest.mark.asyncio
    async def test_me_with_invalid_token(self, client):
        response = await client.get("/api/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"


class TestUserLookup:
    @pytest.mark.asyncio
    async def test_list_users(self, client):
        await register(client)
        await register(client, name="Ben", email="ben@example.com")

        response = await client.get("/api/users")

        body = response.json()
        assert body["count"] == 2
        assert {u["email"] for u in body["users"]} == {"ana@example.com", "ben@example.com"}

    @pytest.mark.asyncio
    async def test_check_email(self, client):
        await register(client)

        exists = await client.get("/api/check-email/ana@example.com")
        missing = await client.get("/api/check-email/ghost@example.com")

        assert exists.json()["exists"] is True
        assert missing.json()["exists"] is False
