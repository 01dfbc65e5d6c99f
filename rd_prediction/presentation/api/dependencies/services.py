"""
Service dependencies for API routes.

Long-lived collaborators (settings, session factory, JWT service, password
handler, model dispatcher, enrichment client) are created once by the
application factory and kept on ``app.state``. Repositories and application
services are assembled per request from them.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rd_prediction.application.services.auth_service import AuthService
from rd_prediction.application.services.prediction_service import PredictionService
from rd_prediction.core.config import Settings
from rd_prediction.core.utils.logging import get_logger
from rd_prediction.infrastructure.ml.dispatcher import ModelDispatcher
from rd_prediction.infrastructure.persistence.sqlalchemy.repositories import (
    SQLAlchemyPredictionRepository,
    SQLAlchemyUserRepository,
)
from rd_prediction.infrastructure.security.jwt.jwt_service import JWTService
from rd_prediction.infrastructure.security.password.password_handler import PasswordHandler
from rd_prediction.infrastructure.services.gemini.gemini_service import GeminiEnrichmentService

logger = get_logger(__name__)


def _from_state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        logger.error(f"'{name}' not found on app.state")
        raise RuntimeError(f"{name} not found on app.state")
    return value


def get_app_settings(request: Request) -> Settings:
    return _from_state(request, "settings")


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return _from_state(request, "actual_session_factory")


def get_jwt_service(request: Request) -> JWTService:
    return _from_state(request, "jwt_service")


def get_password_handler(request: Request) -> PasswordHandler:
    return _from_state(request, "password_handler")


def get_model_dispatcher(request: Request) -> ModelDispatcher:
    return _from_state(request, "model_dispatcher")


def get_enrichment_service(request: Request) -> GeminiEnrichmentService | None:
    return getattr(request.app.state, "enrichment_service", None)


SessionFactoryDep = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]


def get_user_repository(session_factory: SessionFactoryDep) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(session_factory)


def get_prediction_repository(session_factory: SessionFactoryDep) -> SQLAlchemyPredictionRepository:
    return SQLAlchemyPredictionRepository(session_factory)


def get_auth_service(
    user_repository: Annotated[SQLAlchemyUserRepository, Depends(get_user_repository)],
    password_handler: Annotated[PasswordHandler, Depends(get_password_handler)],
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
) -> AuthService:
    return AuthService(user_repository, password_handler, jwt_service)


def get_prediction_service(
    prediction_repository: Annotated[SQLAlchemyPredictionRepository, Depends(get_prediction_repository)],
    user_repository: Annotated[SQLAlchemyUserRepository, Depends(get_user_repository)],
    dispatcher: Annotated[ModelDispatcher, Depends(get_model_dispatcher)],
    enrichment: Annotated[GeminiEnrichmentService | None, Depends(get_enrichment_service)],
) -> PredictionService:
    return PredictionService(prediction_repository, user_repository, dispatcher, enrichment)


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
PredictionServiceDep = Annotated[PredictionService, Depends(get_prediction_service)]
