"""
SQLAlchemy base configuration.

This module provides the declarative base for SQLAlchemy models and the
timestamp mixin shared by every table. Follows SQLAlchemy 2.0 typing patterns.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, DateTime
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase, AsyncAttrs):
    """SQLAlchemy 2.0 declarative base with async support."""

    def __repr__(self) -> str:
        attrs = [
            f"{key}={value!r}"
            for key, value in self.__dict__.items()
            if not key.startswith("_")
        ]
        return f"{self.__class__.__name__}({', '.join(attrs)})"

    def dict(self) -> dict[str, Any]:
        """Get dictionary representation of the mapped column values."""
        return {column.key: getattr(self, column.key) for column in self.__mapper__.column_attrs}


class TimestampMixin:
    """
    Mixin to add created_at and updated_at timestamps to models.

    Timestamps are produced in Python with microsecond precision so that
    newest-first ordering stays stable on SQLite.
    """

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
