"""
Authentication service.

Registers accounts, checks credentials, edits profiles and passwords, and
resolves bearer tokens back to users.
"""

import logging
import re
from datetime import datetime, timezone
from uuid import UUID

from rd_prediction.core.exceptions import AuthenticationException, ValidationError
from rd_prediction.domain.entities.user import User
from rd_prediction.domain.enums import UserRole
from rd_prediction.domain.repositories.user_repository import UserRepository
from rd_prediction.infrastructure.security.jwt.jwt_service import JWTService
from rd_prediction.infrastructure.security.password.password_handler import PasswordHandler

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
PASSWORD_COMPLEXITY = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


class AuthService:
    """Account registration, login and token resolution."""

    def __init__(
        self,
        user_repository: UserRepository,
        password_handler: PasswordHandler,
        jwt_service: JWTService,
    ):
        self.user_repository = user_repository
        self.password_handler = password_handler
        self.jwt_service = jwt_service

    def issue_token(self, user: User) -> str:
        return self.jwt_service.create_access_token(user.id, roles=user.roles)

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        role: UserRole = UserRole.USER,
    ) -> tuple[User, str]:
        """
        Create an account and return it with a fresh access token.

        Raises:
            ValidationError: If the password is too short
            DuplicateEntityException: If the email or username is taken
        """
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

        user = User(
            username=username.strip(),
            email=email.strip().lower(),
            hashed_password=self.password_handler.get_password_hash(password),
            role=role,
        )
        created = await self.user_repository.create(user)
        logger.info(f"Registered user {created.id}")
        return created, self.issue_token(created)

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """
        Check credentials and return the user with a fresh access token.

        Raises:
            AuthenticationException: If the email is unknown, the password is
                wrong or the account is inactive
        """
        user = await self.user_repository.get_by_email(email)
        if user is None or not self.password_handler.verify_password(password, user.hashed_password):
            logger.info("Login rejected: invalid credentials")
            raise AuthenticationException("Invalid credentials")
        if not user.is_active:
            raise AuthenticationException("Invalid credentials")

        await self.user_repository.update_last_login(user.id)
        user.last_login = datetime.now(timezone.utc)
        logger.info(f"User {user.id} logged in")
        return user, self.issue_token(user)

    async def get_user(self, user_id: UUID) -> User:
        user = await self.user_repository.get_by_id(user_id)
        if user is None or not user.is_active:
            raise AuthenticationException("User not found or inactive")
        return user

    async def authenticate_token(self, token: str) -> User:
        """
        Resolve a bearer token to its user.

        Raises:
            AuthenticationException: If the token is invalid or the user is gone
        """
        payload = self.jwt_service.decode_token(token)
        return await self.get_user(payload.user_id)

    async def update_profile(self, user: User, username: str | None = None, email: str | None = None) -> User:
        """
        Change the username and/or email of the current account.

        Raises:
            DuplicateEntityException: If another account already uses the value
        """
        updated = await self.user_repository.update_profile(
            user.id,
            username=username.strip() if username else None,
            email=email.strip().lower() if email else None,
        )
        logger.info(f"User {user.id} updated their profile")
        return updated

    async def change_password(self, user: User, current_password: str, new_password: str) -> None:
        """
        Replace the password after checking the current one.

        Raises:
            ValidationError: If the current password is wrong or the new one is too weak
        """
        if not self.password_handler.verify_password(current_password, user.hashed_password):
            raise ValidationError("Current password is incorrect")
        if len(new_password) < MIN_PASSWORD_LENGTH or not PASSWORD_COMPLEXITY.match(new_password):
            raise ValidationError(
                "New password must be at least 6 characters long and contain at least one "
                "lowercase letter, one uppercase letter, and one number"
            )

        await self.user_repository.update_password(user.id, self.password_handler.get_password_hash(new_password))
        logger.info(f"User {user.id} changed their password")
