"""Prediction record status values."""

from enum import Enum


class PredictionStatus(str, Enum):
    """Three-state lifecycle of a prediction record."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not PredictionStatus.PENDING
