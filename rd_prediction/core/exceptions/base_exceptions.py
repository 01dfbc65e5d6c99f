"""
Base exceptions for the application.

This module defines the foundational exception classes that form the basis of the
application's exception hierarchy. Each class carries the HTTP status the API
layer answers with when the exception escapes a route.
"""

from typing import Any

ErrorDetail = str | list[Any] | dict[str, Any] | None


class BaseException(Exception):
    """
    Base exception for all application exceptions.

    Attributes:
        message: A human-readable error message
        detail: Additional information about the error
        code: An error code for machine processing
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        detail: ErrorDetail = None,
        code: str | None = None,
    ) -> None:
        self.message = message
        self.detail = detail
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} - {self.detail}"
        return self.message


class ValidationException(BaseException):
    """Exception raised for validation errors."""

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        detail: ErrorDetail = None,
        code: str = "VALIDATION_ERROR",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class ResourceNotFoundException(BaseException):
    """Exception raised when a requested resource is not found."""

    status_code = 404

    def __init__(
        self,
        message: str = "Resource not found",
        detail: ErrorDetail = None,
        code: str = "RESOURCE_NOT_FOUND",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class AuthenticationException(BaseException):
    """Exception raised for authentication errors."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication failed",
        detail: ErrorDetail = None,
        code: str = "AUTHENTICATION_ERROR",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class AuthorizationException(BaseException):
    """Exception raised for authorization errors."""

    status_code = 403

    def __init__(
        self,
        message: str = "Not authorized",
        detail: ErrorDetail = None,
        code: str = "AUTHORIZATION_ERROR",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class ConfigurationError(BaseException):
    """Exception raised when a required service is not configured."""

    status_code = 503

    def __init__(
        self,
        message: str = "Service not configured",
        detail: ErrorDetail = None,
        code: str = "CONFIGURATION_ERROR",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class ExternalServiceException(BaseException):
    """Exception raised when an external service call fails."""

    status_code = 502

    def __init__(
        self,
        message: str = "External service error",
        detail: ErrorDetail = None,
        code: str = "EXTERNAL_SERVICE_ERROR",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


class ModelExecutionError(BaseException):
    """Exception raised when an ML model fails during execution."""

    status_code = 500

    def __init__(
        self,
        message: str = "Model execution error",
        detail: ErrorDetail = None,
        code: str = "MODEL_EXECUTION_ERROR",
    ) -> None:
        super().__init__(message=message, detail=detail, code=code)


# Names used across the service layer
AuthError = AuthenticationException
ValidationError = ValidationException
NotFoundError = ResourceNotFoundException
ExternalServiceError = ExternalServiceException
InferenceError = ModelExecutionError
