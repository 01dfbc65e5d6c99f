"""
Password handler.

Hashes and verifies user passwords with passlib.
"""

from passlib.context import CryptContext

from rd_prediction.core.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SCHEMES = ["bcrypt"]


class PasswordHandler:
    """
    Handles password hashing and verification using passlib.
    Allows configuration of hashing schemes.
    """

    def __init__(self, schemes: list[str] | None = None, deprecated: str = "auto"):
        """
        Initialize the PasswordHandler with specified schemes.

        Args:
            schemes: List of hashing schemes (e.g., ["bcrypt"])
            deprecated: Handling of deprecated hashes ("auto", "warn", "error")
        """
        self.schemes = schemes or DEFAULT_SCHEMES
        self.context = CryptContext(schemes=self.schemes, deprecated=deprecated)
        logger.debug(f"PasswordHandler initialized with schemes: {self.schemes}")

    def get_password_hash(self, password: str) -> str:
        """
        Hashes a plain text password.

        Raises:
            ValueError: If hashing fails.
        """
        try:
            return self.context.hash(password)
        except (TypeError, ValueError) as e:
            logger.error(f"Password hashing failed: {e}")
            raise ValueError("Password hashing failed.") from e

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verifies a plain text password against a hashed password.

        Returns:
            True if the password matches, False otherwise (including malformed hashes).
        """
        try:
            return self.context.verify(plain_password, hashed_password)
        except (TypeError, ValueError) as e:
            logger.warning(f"Password verification encountered an issue: {e}")
            return False
