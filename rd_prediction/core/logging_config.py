"""
Logging Configuration Module.

Builds the ``dictConfig`` dictionary for the service from its settings. Every
handler runs the sensitive data filter so that e-mail addresses and bearer
tokens never reach the console or log files in plain text.
"""

import logging
import logging.config
from pathlib import Path
from typing import Any

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s"
DETAILED_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 10


def _rotating_file(path: Path, level: str) -> dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filters": ["sensitive_data"],
        "filename": str(path),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": LOG_BACKUP_COUNT,
        "encoding": "utf8",
        "delay": True,
    }


def build_logging_config(
    level: str = "INFO",
    log_dir: str | Path = "logs",
    sql_level: str = "WARNING",
) -> dict[str, Any]:
    """
    Build the logging configuration dictionary.

    Args:
        level: Level for the application and uvicorn loggers
        log_dir: Directory holding ``app.log`` and ``error.log``
        sql_level: Level for SQLAlchemy engine logging

    Returns:
        A configuration accepted by ``logging.config.dictConfig``
    """
    log_dir = Path(log_dir)
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
            "detailed": {"format": DETAILED_LOG_FORMAT, "datefmt": DATE_FORMAT},
        },
        "filters": {
            "sensitive_data": {"()": "rd_prediction.core.utils.logging.SensitiveDataFilter"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "standard",
                "filters": ["sensitive_data"],
                "stream": "ext://sys.stdout",
            },
            "file_handler": _rotating_file(log_dir / "app.log", level),
            "error_file_handler": _rotating_file(log_dir / "error.log", "ERROR"),
        },
        "loggers": {
            "rd_prediction": {
                "level": level,
                "handlers": ["console", "file_handler", "error_file_handler"],
                "propagate": False,
            },
            "uvicorn": {
                "level": level,
                "handlers": ["console", "file_handler"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": sql_level.upper(),
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {"level": level, "handlers": ["console"]},
    }


def setup_logging(
    level: str = "INFO",
    log_dir: str | Path = "logs",
    config: dict[str, Any] | None = None,
) -> None:
    """
    Configure the logging system.

    Args:
        level: Application log level
        log_dir: Directory for the rotating log files, created if missing
        config: Complete configuration to apply instead of the built one
    """
    if config is None:
        config = build_logging_config(level, log_dir)

    Path(config["handlers"]["file_handler"]["filename"]).parent.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(config)

    logging.getLogger(__name__).debug("Logging configured successfully")
