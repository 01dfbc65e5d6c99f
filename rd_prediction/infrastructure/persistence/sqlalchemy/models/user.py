"""
SQLAlchemy model for user accounts.

The DOMAIN entity lives in rd_prediction.domain.entities.user; the repository
converts between the two.
"""

import uuid

from sqlalchemy import UUID, Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from rd_prediction.infrastructure.persistence.sqlalchemy.config.base import Base, TimestampMixin


class UserModel(Base, TimestampMixin):
    """Represents the structure of the 'users' table."""

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(30), unique=True, nullable=False, comment="Display name, unique")
    email = Column(String(255), unique=True, nullable=False, index=True, comment="Lower-cased login email")
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")
    prediction_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    predictions = relationship(
        "PredictionModel",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
