"""SQLAlchemy repository implementations."""

from rd_prediction.infrastructure.persistence.sqlalchemy.repositories.prediction_repository import (
    SQLAlchemyPredictionRepository,
)
from rd_prediction.infrastructure.persistence.sqlalchemy.repositories.user_repository import (
    SQLAlchemyUserRepository,
)

__all__ = ["SQLAlchemyPredictionRepository", "SQLAlchemyUserRepository"]
