"""Exceptions raised by the prediction record lifecycle and model selection."""

from rd_prediction.domain.exceptions.base import DomainException


class InvalidModelError(DomainException):
    """Raised when a prediction request names a classifier that does not exist."""

    def __init__(self, model_type: str):
        self.model_type = model_type
        super().__init__(f"Invalid model type: {model_type}")


class InvalidStatusTransitionError(DomainException):
    """Raised when a terminal prediction record is asked to change status again."""

    def __init__(self, record_id: object, current_status: str, target_status: str):
        self.record_id = record_id
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            f"Prediction {record_id} is already {current_status} and cannot become {target_status}"
        )
