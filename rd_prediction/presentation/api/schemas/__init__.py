"""API request and response schemas."""

from rd_prediction.presentation.api.schemas.common import (
    ApiResponse,
    CamelModel,
    ErrorItem,
    ErrorResponse,
    MessageResponse,
)

__all__ = ["ApiResponse", "CamelModel", "ErrorItem", "ErrorResponse", "MessageResponse"]
