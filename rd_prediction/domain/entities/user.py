"""
User Entity Module

This module defines the User entity for the domain layer. It carries no
dependency on infrastructure or application layers.
"""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from rd_prediction.domain.enums import UserRole


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    """User domain entity representing an account that owns prediction records."""

    id: UUID = Field(default_factory=uuid4, description="Unique identifier for the user")
    username: str = Field(..., min_length=3, max_length=30, description="Username for display")
    email: EmailStr = Field(..., description="User's email address, stored lower-case")
    hashed_password: str = Field(..., description="Hashed password for authentication")
    role: UserRole = Field(default=UserRole.USER, description="User's role in the system")
    prediction_count: int = Field(default=0, ge=0, description="Number of predictions created")
    is_active: bool = Field(default=True, description="Whether the user is active")
    last_login: datetime | None = Field(default=None, description="When the user last logged in")
    created_at: datetime = Field(default_factory=_utcnow, description="When the user was created")
    updated_at: datetime | None = Field(default=None, description="When the user was last updated")

    model_config = ConfigDict(from_attributes=True)

    @property
    def roles(self) -> list[str]:
        """Roles as plain strings, the form carried in access tokens."""
        return [self.role.value]
