"""
JWT service for access-token issue and validation.

Tokens are HS256-signed and carry ``sub`` (the user id), ``exp``, ``iat``,
``type`` (always ``access``), ``roles`` and a random ``jti``.
"""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from rd_prediction.core.config import Settings
from rd_prediction.core.exceptions import AuthenticationException
from rd_prediction.core.utils.logging import get_logger
from rd_prediction.infrastructure.security.jwt import jose_adapter

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"


class TokenPayload(BaseModel):
    """Validated claims of an access token."""

    sub: str
    exp: int
    iat: int
    type: str = ACCESS_TOKEN_TYPE
    roles: list[str] = Field(default_factory=list)
    jti: str | None = None

    @property
    def user_id(self) -> UUID:
        return UUID(self.sub)


class JWTService:
    """Issues and validates access tokens using the configured signing key."""

    def __init__(self, settings: Settings):
        self.secret_key = settings.JWT_SECRET_KEY.get_secret_value()
        self.algorithm = settings.JWT_ALGORITHM
        self.access_token_expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
        self.token_issuer = settings.JWT_ISSUER
        self.token_audience = settings.JWT_AUDIENCE

    def _build_payload(
        self,
        subject: str,
        roles: list[str] | None,
        expires_in: timedelta,
    ) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "sub": subject,
            "type": ACCESS_TOKEN_TYPE,
            "iat": int(now.timestamp()),
            "jti": str(uuid4()),
            "exp": int((now + expires_in).timestamp()),
            "roles": roles or [],
        }
        if self.token_issuer:
            payload["iss"] = self.token_issuer
        if self.token_audience:
            payload["aud"] = self.token_audience
        return payload

    def create_access_token(
        self,
        subject: str | UUID,
        roles: list[str] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """
        Create a signed access token for a user.

        Args:
            subject: The user id the token identifies
            roles: Role names carried in the token
            expires_delta: Lifetime override, defaults to the configured expiry

        Returns:
            The encoded JWT
        """
        if subject is None or str(subject) == "":
            raise ValueError("subject is required")
        expires_in = expires_delta or timedelta(minutes=self.access_token_expire_minutes)
        payload = self._build_payload(str(subject), roles, expires_in)
        return jose_adapter.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> TokenPayload:
        """
        Validate a token and return its claims.

        Raises:
            AuthenticationException: If the token is expired, malformed, badly
                signed or not an access token
        """
        try:
            claims = jose_adapter.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.token_audience,
                issuer=self.token_issuer,
            )
        except jose_adapter.ExpiredSignatureError as e:
            logger.info("Rejected expired access token")
            raise AuthenticationException("Token has expired") from e
        except jose_adapter.JWTError as e:
            logger.info(f"Rejected invalid access token: {e}")
            raise AuthenticationException("Invalid token") from e

        try:
            payload = TokenPayload.model_validate(claims)
            UUID(payload.sub)
        except ValueError as e:
            raise AuthenticationException("Invalid token") from e

        if payload.type != ACCESS_TOKEN_TYPE:
            raise AuthenticationException("Invalid token type")
        return payload
