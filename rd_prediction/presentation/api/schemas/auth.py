"""Request and response schemas for the auth routes."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, model_validator

from rd_prediction.domain.enums import UserRole
from rd_prediction.presentation.api.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=3, max_length=30, description="Display name, unique")
    email: EmailStr = Field(..., description="Login e-mail, unique")
    password: str = Field(..., min_length=6, description="At least 6 characters")
    role: UserRole = UserRole.USER


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UpdateProfileRequest(CamelModel):
    username: str | None = Field(None, min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_]+$")
    email: EmailStr | None = None


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "ChangePasswordRequest":
        if self.confirm_password != self.new_password:
            raise ValueError("Password confirmation does not match new password")
        return self


class UserResponse(CamelModel):
    """Public view of an account. The password hash is never included."""

    id: UUID
    username: str
    email: str
    role: UserRole
    prediction_count: int
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime


class AuthData(CamelModel):
    user: UserResponse
    token: str


class UserData(CamelModel):
    user: UserResponse
