"""
User repository implementation using SQLAlchemy.

Persists and retrieves User entities, bridging between the domain entity and
the UserModel table.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError

from rd_prediction.core.utils.logging import get_logger
from rd_prediction.domain.entities.user import User
from rd_prediction.domain.enums import UserRole
from rd_prediction.domain.exceptions import DuplicateEntityException, EntityNotFoundException
from rd_prediction.domain.repositories.user_repository import UserRepository
from rd_prediction.infrastructure.persistence.sqlalchemy.config.base import utcnow
from rd_prediction.infrastructure.persistence.sqlalchemy.models.user import UserModel
from rd_prediction.infrastructure.persistence.sqlalchemy.repositories.base_repository import (
    BaseSQLAlchemyRepository,
)

logger = get_logger(__name__)


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; every stored value is UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SQLAlchemyUserRepository(BaseSQLAlchemyRepository[User, UserModel], UserRepository):
    """SQLAlchemy implementation of the UserRepository interface."""

    def __init__(self, session_factory):
        super().__init__(session_factory, UserModel)

    async def create(self, user: User) -> User:
        """
        Create a new user in the database.

        Args:
            user: The domain User entity to persist

        Returns:
            The created User domain entity

        Raises:
            DuplicateEntityException: If the email or username is already taken
        """
        # Pre-check gives a precise message; the unique constraints still guard races
        if await self.get_by_email(user.email):
            raise DuplicateEntityException("User with this email already exists")
        if await self.get_by_username(user.username):
            raise DuplicateEntityException("User with this username already exists")

        model = self._to_model(user)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(model)
                    await session.flush()
        except IntegrityError as e:
            logger.warning(f"Integrity error when creating user: {e}")
            raise DuplicateEntityException("User with this email or username already exists") from e

        logger.info(f"Created user {model.id}")
        return self._to_entity(model)

    async def get_by_id(self, user_id: UUID) -> User | None:
        return await super().get_by_id(user_id)

    async def get_by_email(self, email: str) -> User | None:
        async with self._transaction("get user by email") as session:
            result = await session.execute(
                select(UserModel).where(UserModel.email == email.strip().lower())
            )
            model = result.scalars().first()
            return self._to_entity(model) if model else None

    async def get_by_username(self, username: str) -> User | None:
        async with self._transaction("get user by username") as session:
            result = await session.execute(select(UserModel).where(UserModel.username == username))
            model = result.scalars().first()
            return self._to_entity(model) if model else None

    async def update_last_login(self, user_id: UUID) -> None:
        async with self._transaction("update last login") as session:
            await session.execute(
                update(UserModel).where(UserModel.id == user_id).values(last_login=utcnow())
            )

    async def increment_prediction_count(self, user_id: UUID) -> None:
        async with self._transaction("increment prediction count") as session:
            await session.execute(
                update(UserModel)
                .where(UserModel.id == user_id)
                .values(prediction_count=UserModel.prediction_count + 1)
            )

    async def update_profile(
        self,
        user_id: UUID,
        username: str | None = None,
        email: str | None = None,
    ) -> User:
        values: dict = {}
        if username is not None:
            values["username"] = username
        if email is not None:
            values["email"] = email.strip().lower()

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    model = await session.get(UserModel, user_id)
                    if model is None:
                        raise EntityNotFoundException("User not found")
                    if values:
                        clash = await session.execute(
                            select(UserModel.id).where(
                                UserModel.id != user_id,
                                or_(*(getattr(UserModel, key) == value for key, value in values.items())),
                            )
                        )
                        if clash.first() is not None:
                            raise DuplicateEntityException("Email or username already taken by another user")
                        for key, value in values.items():
                            setattr(model, key, value)
                        model.updated_at = utcnow()
                        await session.flush()
                    entity = self._to_entity(model)
        except IntegrityError as e:
            logger.warning(f"Integrity error when updating user {user_id}: {e}")
            raise DuplicateEntityException("Email or username already taken by another user") from e

        logger.info(f"Updated profile of user {user_id}")
        return entity

    async def update_password(self, user_id: UUID, hashed_password: str) -> None:
        async with self._transaction("update password") as session:
            result = await session.execute(
                update(UserModel).where(UserModel.id == user_id).values(hashed_password=hashed_password)
            )
            if result.rowcount == 0:
                raise EntityNotFoundException("User not found")

    def _to_model(self, entity: User) -> UserModel:
        return UserModel(
            id=entity.id,
            username=entity.username,
            email=str(entity.email).lower(),
            hashed_password=entity.hashed_password,
            role=entity.role.value,
            prediction_count=entity.prediction_count,
            is_active=entity.is_active,
            last_login=entity.last_login,
            created_at=entity.created_at,
            updated_at=entity.updated_at or entity.created_at,
        )

    def _to_entity(self, model: UserModel) -> User:
        return User(
            id=model.id,
            username=model.username,
            email=model.email,
            hashed_password=model.hashed_password,
            role=UserRole(model.role),
            prediction_count=model.prediction_count or 0,
            is_active=model.is_active,
            last_login=as_utc(model.last_login),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )
