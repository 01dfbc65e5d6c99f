"""
Base SQLAlchemy repository implementation.

This module provides a foundational repository implementation using SQLAlchemy ORM.
Each write runs in its own short transaction opened from the session factory,
so status transitions are independent single-row updates.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rd_prediction.core.utils.logging import get_logger
from rd_prediction.domain.exceptions import RepositoryError

# Type variables for entity mapping
EntityT = TypeVar("EntityT")  # Domain entity
ModelT = TypeVar("ModelT")  # SQLAlchemy model

logger = get_logger(__name__)


class BaseSQLAlchemyRepository(Generic[EntityT, ModelT]):
    """
    Base repository implementation for SQLAlchemy ORM models.

    Provides session handling, common read operations and the mapping hooks
    between domain entities and ORM models.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], model_class: type[ModelT]):
        """
        Initialize the repository with a session factory and model class.

        Args:
            session_factory: SQLAlchemy async session factory
            model_class: SQLAlchemy model class
        """
        if session_factory is None:
            raise ValueError("session_factory must be provided")
        self._session_factory = session_factory
        self._model_class = model_class

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """
        Open a session, run the block in a transaction and commit it.

        SQLAlchemy errors are rolled back and re-raised as RepositoryError.
        """
        async with self._session_factory() as session:
            try:
                async with session.begin():
                    yield session
            except SQLAlchemyError as e:
                logger.error(f"Error during {operation}: {e}")
                raise RepositoryError(f"Failed to {operation}: {e!s}") from e

    async def get_by_id(self, entity_id: Any) -> EntityT | None:
        """
        Get an entity by its ID.

        Args:
            entity_id: ID of the entity to retrieve

        Returns:
            The entity if found, None otherwise

        Raises:
            RepositoryError: If database operation fails
        """
        async with self._transaction("get entity by ID") as session:
            model = await session.get(self._model_class, entity_id)
            return self._to_entity(model) if model else None

    async def count(self) -> int:
        """
        Count all entities.

        Raises:
            RepositoryError: If database operation fails
        """
        async with self._transaction("count entities") as session:
            result = await session.execute(select(func.count()).select_from(self._model_class))
            return result.scalar() or 0

    def _to_model(self, entity: EntityT) -> ModelT:
        """
        Convert a domain entity to an ORM model.

        Raises:
            NotImplementedError: Must be implemented by derived classes
        """
        raise NotImplementedError("Repository must implement _to_model")

    def _to_entity(self, model: ModelT) -> EntityT:
        """
        Convert an ORM model to a domain entity.

        Raises:
            NotImplementedError: Must be implemented by derived classes
        """
        raise NotImplementedError("Repository must implement _to_entity")
