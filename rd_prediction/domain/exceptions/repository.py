"""
Repository exceptions module.

This module defines exceptions related to repository operations.
"""

from rd_prediction.domain.exceptions.base import DomainException


class RepositoryException(DomainException):
    """Base exception for repository-related errors."""

    def __init__(self, message: str = "Repository operation failed"):
        super().__init__(message)


class EntityNotFoundException(RepositoryException):
    """Exception raised when an entity is not found."""

    def __init__(self, message: str = "Entity not found"):
        super().__init__(message)


class DuplicateEntityException(RepositoryException):
    """Exception raised when attempting to create a duplicate entity."""

    def __init__(self, message: str = "Entity already exists"):
        super().__init__(message)


# Alias used by the SQLAlchemy repositories
RepositoryError = RepositoryException
