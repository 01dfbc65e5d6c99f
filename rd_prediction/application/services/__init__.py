from rd_prediction.application.services.auth_service import AuthService
from rd_prediction.application.services.prediction_service import PredictionService

__all__ = ["AuthService", "PredictionService"]
