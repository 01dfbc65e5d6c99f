"""
SQLAlchemy model for prediction records.

Structured parts of a record (input reference, patient info, result, client
metadata) are stored as JSON documents. Fields used for filtering and
aggregation are kept in their own columns next to them.
"""

import uuid

from sqlalchemy import UUID, Boolean, Column, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from rd_prediction.infrastructure.persistence.sqlalchemy.config.base import Base, TimestampMixin
from rd_prediction.infrastructure.persistence.sqlalchemy.types import JSONType


class PredictionModel(Base, TimestampMixin):
    """Represents the structure of the 'predictions' table."""

    __tablename__ = "predictions"
    __table_args__ = (
        Index("ix_predictions_user_created", "user_id", "created_at"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    input_data = Column(JSONType, nullable=False)
    model_type = Column(String(32), nullable=True, index=True)
    auto_detected = Column(Boolean, nullable=False, default=False)
    patient_id = Column(String(64), nullable=True, index=True)
    patient_info = Column(JSONType, nullable=True)
    result = Column(JSONType, nullable=True)
    confidence = Column(Float, nullable=True)
    is_positive = Column(Boolean, nullable=True)
    model_version = Column(String(32), nullable=False, default="1.0")
    processing_time = Column(Integer, nullable=True)
    status = Column(String(16), nullable=False, default="pending", index=True)
    error_message = Column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    request_metadata = Column("metadata", JSONType, nullable=True)

    user = relationship("UserModel", back_populates="predictions")
