"""Integration tests for the authentication endpoints."""

import pytest

from rd_prediction.infrastructure.persistence.sqlalchemy.repositories import SQLAlchemyUserRepository
from rd_prediction.tests.helpers import API, register, user_payload

pytestmark = pytest.mark.asyncio


async def test_register_returns_user_and_token(client, faker):
    payload = user_payload(faker)

    response = await client.post(f"{API}/auth/register", json=payload)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    user = body["data"]["user"]
    assert user["username"] == payload["username"]
    assert user["email"] == payload["email"].lower()
    assert user["role"] == "user"
    assert user["predictionCount"] == 0
    assert "password" not in user
    assert "hashedPassword" not in user
    assert body["data"]["token"]


async def test_duplicate_email_is_rejected(client, app, faker):
    payload = user_payload(faker)
    await client.post(f"{API}/auth/register", json=payload)

    response = await client.post(
        f"{API}/auth/register",
        json=user_payload(faker, email=payload["email"].upper()),
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "already exists" in response.json()["message"]
    repository = SQLAlchemyUserRepository(app.state.actual_session_factory)
    assert await repository.count() == 1
    assert await repository.get_by_username(payload["username"]) is not None
    assert (await repository.get_by_email(payload["email"])).username == payload["username"]


async def test_duplicate_username_is_rejected(client, faker):
    payload = user_payload(faker)
    await client.post(f"{API}/auth/register", json=payload)

    response = await client.post(
        f"{API}/auth/register",
        json=user_payload(faker, username=payload["username"]),
    )

    assert response.status_code == 400
    assert "already exists" in response.json()["message"]


async def test_register_validation_errors(client, faker):
    response = await client.post(
        f"{API}/auth/register",
        json=user_payload(faker, password="123", email="not-an-email"),
    )

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    fields = {error["field"] for error in body["errors"]}
    assert {"password", "email"} <= fields


async def test_login(client, faker):
    payload = user_payload(faker)
    await client.post(f"{API}/auth/register", json=payload)

    response = await client.post(
        f"{API}/auth/login", json={"email": payload["email"], "password": payload["password"]}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token"]
    assert data["user"]["lastLogin"] is not None


async def test_login_with_wrong_password(client, faker):
    payload = user_payload(faker)
    await client.post(f"{API}/auth/register", json=payload)

    response = await client.post(
        f"{API}/auth/login", json={"email": payload["email"], "password": "wrong-password"}
    )

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}


async def test_login_with_unknown_email(client):
    response = await client.post(
        f"{API}/auth/login", json={"email": "nobody@mail.com", "password": "whatever"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


async def test_me(client, faker):
    headers, data = await register(client, faker)

    response = await client.get(f"{API}/auth/me", headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["user"]["id"] == data["user"]["id"]


async def test_me_requires_token(client):
    response = await client.get(f"{API}/auth/me")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["success"] is False


async def test_me_rejects_invalid_token(client):
    response = await client.get(f"{API}/auth/me", headers={"Authorization": "Bearer nonsense"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


async def test_profile_matches_me(client, faker):
    headers, data = await register(client, faker)

    response = await client.get(f"{API}/auth/profile", headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["user"]["id"] == data["user"]["id"]


async def test_update_profile(client, faker):
    headers, data = await register(client, faker)

    response = await client.put(
        f"{API}/auth/profile", headers=headers, json={"username": "fresh_name", "email": "Fresh@Mail.com"}
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["message"] == "Profile updated successfully"
    assert body["data"]["user"]["username"] == "fresh_name"
    assert body["data"]["user"]["email"] == "fresh@mail.com"
    assert body["data"]["user"]["id"] == data["user"]["id"]
    me = await client.get(f"{API}/auth/me", headers=headers)
    assert me.json()["data"]["user"]["username"] == "fresh_name"


async def test_update_profile_rejects_values_of_another_user(client, faker):
    _, taken = await register(client, faker, username="taken_name")
    headers, own = await register(client, faker)

    by_email = await client.put(f"{API}/auth/profile", headers=headers, json={"email": taken["user"]["email"]})
    by_username = await client.put(f"{API}/auth/profile", headers=headers, json={"username": "taken_name"})

    for response in (by_email, by_username):
        assert response.status_code == 400
        assert response.json()["message"] == "Email or username already taken by another user"
    me = (await client.get(f"{API}/auth/me", headers=headers)).json()["data"]["user"]
    assert me["email"] == own["user"]["email"]
    assert me["username"] == own["user"]["username"]


async def test_update_profile_validation(client, faker):
    headers, _ = await register(client, faker)

    response = await client.put(f"{API}/auth/profile", headers=headers, json={"username": "bad name!"})

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


async def test_change_password(client, faker):
    payload = user_payload(faker, password="OldSecret1")
    token = (await client.post(f"{API}/auth/register", json=payload)).json()["data"]["token"]
    headers = {"Authorization": f"Bearer {token}"}

    response = await client.put(
        f"{API}/auth/change-password",
        headers=headers,
        json={"currentPassword": "OldSecret1", "newPassword": "NewSecret2", "confirmPassword": "NewSecret2"},
    )

    assert response.status_code == 200, response.text
    assert response.json() == {"success": True, "message": "Password changed successfully"}
    old_login = await client.post(f"{API}/auth/login", json={"email": payload["email"], "password": "OldSecret1"})
    new_login = await client.post(f"{API}/auth/login", json={"email": payload["email"], "password": "NewSecret2"})
    assert old_login.status_code == 401
    assert new_login.status_code == 200


async def test_change_password_with_wrong_current_password(client, faker):
    headers, _ = await register(client, faker)

    response = await client.put(
        f"{API}/auth/change-password",
        headers=headers,
        json={"currentPassword": "not-it", "newPassword": "NewSecret2", "confirmPassword": "NewSecret2"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Current password is incorrect"


async def test_change_password_rejects_weak_or_mismatched_password(client, faker):
    payload = user_payload(faker, password="OldSecret1")
    token = (await client.post(f"{API}/auth/register", json=payload)).json()["data"]["token"]
    headers = {"Authorization": f"Bearer {token}"}

    weak = await client.put(
        f"{API}/auth/change-password",
        headers=headers,
        json={"currentPassword": "OldSecret1", "newPassword": "alllowercase", "confirmPassword": "alllowercase"},
    )
    mismatched = await client.put(
        f"{API}/auth/change-password",
        headers=headers,
        json={"currentPassword": "OldSecret1", "newPassword": "NewSecret2", "confirmPassword": "NewSecret3"},
    )

    assert weak.status_code == 400
    assert "uppercase letter" in weak.json()["message"]
    assert mismatched.status_code == 400
    assert mismatched.json()["message"] == "Validation failed"


async def test_profile_routes_require_token(client):
    assert (await client.put(f"{API}/auth/profile", json={"username": "someone"})).status_code == 401
    password_change = {"currentPassword": "x", "newPassword": "NewSecret2", "confirmPassword": "NewSecret2"}
    assert (await client.put(f"{API}/auth/change-password", json=password_change)).status_code == 401
