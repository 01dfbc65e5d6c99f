"""Shared helpers for the test suite."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from io import BytesIO
from typing import Any

from asgi_lifespan import LifespanManager
from faker import Faker
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from PIL import Image

from rd_prediction.domain.entities.user import User

API = "/api"


def make_png(color: tuple[int, int, int] = (120, 120, 120), size: tuple[int, int] = (64, 64)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@asynccontextmanager
async def lifespan_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """AsyncClient bound to ``app`` with startup and shutdown run around it."""
    async with LifespanManager(app) as manager:
        transport = ASGITransport(app=manager.app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


def user_payload(faker: Faker, **overrides: Any) -> dict[str, Any]:
    username = f"{faker.user_name()[:20]}{faker.random_int(100, 999)}"
    payload = {
        "username": username,
        "email": f"{username.lower().replace('.', '_')}@mail.com",
        "password": faker.password(length=12),
    }
    payload.update(overrides)
    return payload


async def register(client: AsyncClient, faker: Faker, **overrides: Any) -> tuple[dict[str, str], dict]:
    """Register a fresh user and return bearer headers with the response data."""
    response = await client.post(f"{API}/auth/register", json=user_payload(faker, **overrides))
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    return {"Authorization": f"Bearer {data['token']}"}, data


async def upload(
    client: AsyncClient,
    headers: dict[str, str],
    file_name: str = "chest_xray.png",
    content: bytes | None = None,
    content_type: str = "image/png",
    route: str = "predict",
    **fields: Any,
):
    files = {"file": (file_name, content if content is not None else make_png(), content_type)}
    data = {key: str(value) for key, value in fields.items()}
    return await client.post(f"{API}/prediction/{route}", headers=headers, files=files, data=data)


def build_user(faker: Faker, **overrides: Any) -> User:
    """Unsaved User entity with a fake identity."""
    payload = user_payload(faker)
    values = {
        "username": payload["username"],
        "email": payload["email"],
        "hashed_password": "not-a-real-hash",
    }
    values.update(overrides)
    return User(**values)
