"""
Global test configuration.

Every test gets its own SQLite file under pytest's tmp_path, demo-mode model
dispatch and a disabled Gemini client unless a test builds its own.
"""

from collections.abc import AsyncGenerator
from uuid import UUID

import pytest
import pytest_asyncio
from faker import Faker
from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rd_prediction.app_factory import create_application
from rd_prediction.core.config import Settings
from rd_prediction.domain.entities.user import User
from rd_prediction.infrastructure.persistence.sqlalchemy.database import (
    create_engine,
    create_schema,
    create_session_factory,
)
from rd_prediction.infrastructure.persistence.sqlalchemy.repositories import (
    SQLAlchemyPredictionRepository,
    SQLAlchemyUserRepository,
)
from rd_prediction.tests.helpers import build_user, lifespan_client


@pytest.fixture
def faker() -> Faker:
    fake = Faker()
    fake.seed_instance(1234)
    return fake


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway database with external services off."""
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        JWT_SECRET_KEY="test_secret_key_for_testing_only",
        ACCESS_TOKEN_EXPIRE_MINUTES=30,
        MODEL_DIR=str(tmp_path / "models"),
        LOG_DIR=str(tmp_path / "logs"),
        DEMO_MODE=True,
        GEMINI_API_KEY=None,
        SENTRY_DSN=None,
    )


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_application(settings_override=test_settings)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with lifespan_client(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def session_factory(test_settings: Settings) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_engine(test_settings)
    await create_schema(engine)
    try:
        yield create_session_factory(engine)
    finally:
        await engine.dispose()


@pytest.fixture
def user_repository(session_factory) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(session_factory)


@pytest.fixture
def prediction_repository(session_factory) -> SQLAlchemyPredictionRepository:
    return SQLAlchemyPredictionRepository(session_factory)


@pytest_asyncio.fixture
async def saved_user(user_repository: SQLAlchemyUserRepository, faker: Faker) -> User:
    return await user_repository.create(build_user(faker))


@pytest_asyncio.fixture
async def other_user(user_repository: SQLAlchemyUserRepository, faker: Faker) -> User:
    return await user_repository.create(build_user(faker))


@pytest.fixture
def unknown_id() -> UUID:
    return UUID("00000000-0000-4000-8000-000000000000")
