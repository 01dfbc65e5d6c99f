"""
Core exceptions package.

This package contains the application-level exceptions used throughout the service.
"""

from rd_prediction.core.exceptions.base_exceptions import (
    AuthError,
    AuthenticationException,
    AuthorizationException,
    BaseException,
    ConfigurationError,
    ExternalServiceError,
    ExternalServiceException,
    InferenceError,
    ModelExecutionError,
    NotFoundError,
    ResourceNotFoundException,
    ValidationError,
    ValidationException,
)

__all__ = [
    "AuthError",
    "AuthenticationException",
    "AuthorizationException",
    "BaseException",
    "ConfigurationError",
    "ExternalServiceError",
    "ExternalServiceException",
    "InferenceError",
    "ModelExecutionError",
    "NotFoundError",
    "ResourceNotFoundException",
    "ValidationError",
    "ValidationException",
]
