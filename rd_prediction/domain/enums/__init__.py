"""Domain enumerations."""

from rd_prediction.domain.enums.model_type import AUTO_DETECT, ModelType
from rd_prediction.domain.enums.prediction_status import PredictionStatus
from rd_prediction.domain.enums.role import UserRole

__all__ = ["AUTO_DETECT", "ModelType", "PredictionStatus", "UserRole"]
