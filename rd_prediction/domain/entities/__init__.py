"""Domain entities."""

from rd_prediction.domain.entities.prediction import (
    ClassScore,
    Enrichment,
    InputData,
    PatientInfo,
    PredictionRecord,
    PredictionResult,
    RequestMetadata,
    risk_category,
)
from rd_prediction.domain.entities.user import User

__all__ = [
    "ClassScore",
    "Enrichment",
    "InputData",
    "PatientInfo",
    "PredictionRecord",
    "PredictionResult",
    "RequestMetadata",
    "User",
    "risk_category",
]
