"""
User Repository domain interface.

This module defines the repository interface for User entities in the domain layer.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from rd_prediction.domain.entities.user import User


class UserRepository(ABC):
    """Repository interface for User accounts."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Persist a new user.

        Raises:
            DuplicateEntityException: If the email or username is already registered
        """

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> User | None:
        """Retrieve a user by their unique ID."""

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Retrieve a user by their email address (case-insensitive)."""

    @abstractmethod
    async def get_by_username(self, username: str) -> User | None:
        """Retrieve a user by their username."""

    @abstractmethod
    async def update_last_login(self, user_id: UUID) -> None:
        """Record a successful login."""

    @abstractmethod
    async def increment_prediction_count(self, user_id: UUID) -> None:
        """Bump the running prediction counter of a user."""

    @abstractmethod
    async def update_profile(
        self,
        user_id: UUID,
        username: str | None = None,
        email: str | None = None,
    ) -> User:
        """
        Change the username and/or email of an account.

        Raises:
            EntityNotFoundException: If the user does not exist
            DuplicateEntityException: If another account already uses the value
        """

    @abstractmethod
    async def update_password(self, user_id: UUID, hashed_password: str) -> None:
        """Replace the stored password hash."""
