"""Security infrastructure: access tokens and password hashing."""

from rd_prediction.infrastructure.security.jwt.jwt_service import JWTService
from rd_prediction.infrastructure.security.password.password_handler import PasswordHandler

__all__ = ["JWTService", "PasswordHandler"]
