import pytest
from httpx import AsyncClient, ASGITransport
from app.main import app
from app.services import auth_service


async def _register(client, username="driver", password="secret123", **extra):
    return await client.post(
        "/api/auth/register",
        json={"username": username, "password": password, **extra},
    )


@pytest.mark.asyncio
async def test_register_returns_token_bundle():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await _register(client, fullName="Somchai Driver")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    bundle = data["data"]
    assert bundle["username"] == "driver"
    assert bundle["role"] == "User"
    assert bundle["token"]
    assert bundle["expiration"]


@pytest.mark.asyncio
async def test_register_duplicate_username_conflicts():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        first = await _register(client)
        second = await _register(client, password="another123")

    assert first.status_code == 200
    assert second.status_code == 409
    data = second.json()
    assert data["status"] == "error"
    assert data["message"] == "Username already exists."


@pytest.mark.asyncio
async def test_register_short_password_rejected():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await _register(client, password="123")

    assert response.status_code == 400
    assert response.json()["status"] == "error"
    assert "password" in response.json()["message"]


@pytest.mark.asyncio
async def test_login_valid_credentials():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await _register(client)
        response = await client.post(
            "/api/auth/login",
            json={"username": "driver", "password": "secret123"},
        )

    assert response.status_code == 200
    bundle = response.json()["data"]
    assert set(bundle) == {"token", "expiration", "username", "role"}
    assert bundle["username"] == "driver"
    assert bundle["role"] == "User"


@pytest.mark.asyncio
async def test_login_invalid_password():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await _register(client)
        response = await client.post(
            "/api/auth/login",
            json={"username": "driver", "password": "wrongpassword"},
        )

    assert response.status_code == 401
    data = response.json()
    assert data["status"] == "error"
    assert data["message"] == "Invalid username or password."


@pytest.mark.asyncio
async def test_login_nonexistent_user():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/api/auth/login",
            json={"username": "nobody", "password": "whatever"},
        )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid username or password."


@pytest.mark.asyncio
async def test_me_with_token():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        token = (await _register(client)).json()["data"]["token"]
        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["username"] == "driver"
    assert data["role"] == "User"
    assert isinstance(data["user_id"], int)


@pytest.mark.asyncio
async def test_me_without_token():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json()["status"] == "error"


@pytest.mark.asyncio
async def test_me_with_garbage_token():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token."


@pytest.mark.asyncio
async def test_register_race_returns_same_conflict(monkeypatch):
    async def _never_taken(db, username):
        return False

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        first = await _register(client)
        monkeypatch.setattr(auth_service, "_username_taken", _never_taken)
        second = await _register(client, password="another123")

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["message"] == "Username already exists."
