"""Tests for authentication."""
import pytest

from taskmanager.services.auth_service import AuthService
from taskmanager.utils.security import (
    create_access_token,
    decode_token,
    get_password_hash,
    verify_password,
)


def test_password_hashing():
    """Test password hashing and verification."""
    password = "testpassword123"
    hashed = get_password_hash(password)

    assert hashed != password
    assert verify_password(password, hashed)
    assert not verify_password("wrongpassword", hashed)
    assert not verify_password(password, "not-a-bcrypt-hash")


def test_jwt_token_creation():
    """Test JWT token creation and decoding."""
    token = create_access_token({"sub": "42", "username": "alice"})

    assert isinstance(token, str)

    decoded = decode_token(token)
    assert decoded["sub"] == "42"
    assert decoded["username"] == "alice"
    assert decoded["type"] == "access"


def test_decode_rejects_tampered_token():
    with pytest.raises(ValueError):
        decode_token("not.a.token")

    token = create_access_token({"sub": "42"})
    header, payload, _signature = token.split(".")
    with pytest.raises(ValueError):
        decode_token(f"{header}.{payload}.c2lnbmF0dXJl")


@pytest.mark.asyncio
async def test_authenticate_user(db_session, test_user):
    """Test user authentication by username or email."""
    user = await AuthService.authenticate_user(db_session, "alice", "testpassword")
    assert user is not None
    assert user.id == test_user.id

    user = await AuthService.authenticate_user(db_session, "alice@example.com", "testpassword")
    assert user is not None

    assert await AuthService.authenticate_user(db_session, "alice", "wrongpassword") is None
    assert await AuthService.authenticate_user(db_session, "nobody", "testpassword") is None


@pytest.mark.asyncio
async def test_inactive_user_cannot_authenticate(db_session, test_user):
    test_user.is_active = False
    db_session.add(test_user)
    await db_session.commit()

    assert await AuthService.authenticate_user(db_session, "alice", "testpassword") is None


@pytest.mark.asyncio
async def test_signup_login_and_me(client):
    response = await client.post(
        "/api/v1/auth/signup",
        json={
            "username": "carol",
            "email": "carol@example.com",
            "password": "s3cret-pass",
            "full_name": "Carol",
        },
    )
    assert response.status_code == 201
    assert response.json()["role"] == "USER"
    assert "password_hash" not in response.json()

    response = await client.post(
        "/api/v1/auth/login",
        data={"username": "carol", "password": "s3cret-pass"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["username"] == "carol"

    response = await client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {body['access_token']}"},
    )
    assert response.status_code == 200
    assert response.json()["email"] == "carol@example.com"


@pytest.mark.asyncio
async def test_signup_rejects_duplicates(client, test_user):
    payload = {"username": "alice", "email": "new@example.com", "password": "whatever1"}
    response = await client.post("/api/v1/auth/signup", json=payload)
    assert response.status_code == 409

    payload = {"username": "alice2", "email": "alice@example.com", "password": "whatever1"}
    response = await client.post("/api/v1/auth/signup", json=payload)
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_login_with_wrong_password(client, test_user):
    response = await client.post(
        "/api/v1/auth/login",
        data={"username": "alice", "password": "nope"},
    )
    assert response.status_code == 401
