"""FastAPI dependency providers."""

from rd_prediction.presentation.api.dependencies.auth import CurrentUserDep, get_current_user
from rd_prediction.presentation.api.dependencies.services import (
    AuthServiceDep,
    PredictionServiceDep,
    SettingsDep,
)

__all__ = [
    "AuthServiceDep",
    "CurrentUserDep",
    "PredictionServiceDep",
    "SettingsDep",
    "get_current_user",
]
