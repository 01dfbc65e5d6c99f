"""Domain exceptions package."""

from rd_prediction.domain.exceptions.base import DomainException
from rd_prediction.domain.exceptions.prediction_exceptions import (
    InvalidModelError,
    InvalidStatusTransitionError,
)
from rd_prediction.domain.exceptions.repository import (
    DuplicateEntityException,
    EntityNotFoundException,
    RepositoryError,
    RepositoryException,
)

__all__ = [
    "DomainException",
    "DuplicateEntityException",
    "EntityNotFoundException",
    "InvalidModelError",
    "InvalidStatusTransitionError",
    "RepositoryError",
    "RepositoryException",
]
