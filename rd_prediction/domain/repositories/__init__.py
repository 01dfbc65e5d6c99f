"""Domain repository interfaces."""

from rd_prediction.domain.repositories.prediction_repository import (
    PredictionFilters,
    PredictionRepository,
    PredictionStats,
)
from rd_prediction.domain.repositories.user_repository import UserRepository

__all__ = ["PredictionFilters", "PredictionRepository", "PredictionStats", "UserRepository"]
