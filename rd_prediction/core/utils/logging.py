"""
Logging utilities.

Provides the filter that keeps credentials and contact details out of log
output, and the ``get_logger`` helper used by infrastructure modules.
"""

import logging
import re

_EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_BEARER_PATTERN = re.compile(r"(Bearer\s+)[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+")
_JWT_PATTERN = re.compile(r"eyJ[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+")


class SensitiveDataFilter(logging.Filter):
    """Custom logging filter that masks e-mail addresses and bearer tokens."""

    def __init__(self, name: str = "SensitiveDataFilter"):
        super().__init__(name)

    def filter(self, record: logging.LogRecord) -> bool:
        """Sanitize the formatted message of the log record in place."""
        original_message = record.getMessage()
        sanitized_message = sanitize_text(original_message)

        if sanitized_message != original_message:
            record.msg = sanitized_message
            record.args = ()

        return True


def sanitize_text(text: str) -> str:
    """Replace e-mail addresses and JWTs in ``text`` with placeholders."""
    text = _BEARER_PATTERN.sub(r"\1[REDACTED_TOKEN]", text)
    text = _JWT_PATTERN.sub("[REDACTED_TOKEN]", text)
    return _EMAIL_PATTERN.sub("[REDACTED_EMAIL]", text)


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance for the specified name.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Logger carrying the sensitive data filter
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, SensitiveDataFilter) for f in logger.filters):
        logger.addFilter(SensitiveDataFilter())
    return logger
