"""
Prediction Repository domain interface.

Defines the durable CRUD and query surface for PredictionRecord entities,
together with the filter and aggregate types it exchanges.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from rd_prediction.domain.entities.prediction import (
    InputData,
    PatientInfo,
    PredictionRecord,
    PredictionResult,
    RequestMetadata,
)
from rd_prediction.domain.enums import ModelType, PredictionStatus


class PredictionFilters(BaseModel):
    """Optional narrowing of a user's history."""

    patient_id: str | None = None
    model_type: ModelType | None = None
    status: PredictionStatus | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None

    model_config = ConfigDict(protected_namespaces=())


class PredictionStats(BaseModel):
    """Aggregate over one user's prediction records."""

    count: int = 0
    avg_confidence: float = 0.0
    success_count: int = 0
    failed_count: int = 0
    model_distribution: dict[str, int] = Field(default_factory=dict)
    positive_results: int = 0
    avg_processing_time: float = 0.0
    recent_activity: list[PredictionRecord] = Field(default_factory=list)


class PredictionRepository(ABC):
    """Repository interface for PredictionRecord entities."""

    @abstractmethod
    async def create(
        self,
        user_id: UUID,
        input_meta: InputData,
        *,
        model_type: ModelType | None = None,
        auto_detected: bool = False,
        patient_info: PatientInfo | None = None,
        metadata: RequestMetadata | None = None,
        model_version: str = "1.0",
    ) -> PredictionRecord:
        """
        Insert a new record in ``pending`` status.

        Raises:
            ValidationError: If ``user_id`` or ``input_meta`` is missing
        """

    @abstractmethod
    async def mark_completed(
        self,
        record_id: UUID,
        result: PredictionResult,
        processing_time_ms: int,
        *,
        model_type: ModelType | None = None,
        model_version: str | None = None,
    ) -> PredictionRecord:
        """
        Move a pending record to ``completed``.

        Raises:
            EntityNotFoundException: If the record does not exist
            InvalidStatusTransitionError: If the record is already terminal
        """

    @abstractmethod
    async def mark_failed(self, record_id: UUID, message: str) -> PredictionRecord:
        """
        Move a pending record to ``failed``.

        Raises:
            EntityNotFoundException: If the record does not exist
            InvalidStatusTransitionError: If the record is already terminal
        """

    @abstractmethod
    async def get_by_id(self, record_id: UUID) -> PredictionRecord | None:
        """Fetch a record regardless of owner."""

    @abstractmethod
    async def get_for_user(self, record_id: UUID, user_id: UUID) -> PredictionRecord:
        """
        Fetch a record owned by ``user_id``.

        Raises:
            EntityNotFoundException: If the record is unknown or owned by someone else
        """

    @abstractmethod
    async def list_for_user(
        self,
        user_id: UUID,
        page: int = 1,
        page_size: int = 10,
        filters: PredictionFilters | None = None,
    ) -> tuple[list[PredictionRecord], int]:
        """Return one page of records, newest first, and the total matching count."""

    @abstractmethod
    async def stats(self, user_id: UUID, since: datetime | None = None) -> PredictionStats:
        """Aggregate the user's records, optionally only those created after ``since``."""

    @abstractmethod
    async def delete(self, record_id: UUID, user_id: UUID) -> None:
        """
        Hard-delete a record owned by ``user_id``.

        Raises:
            EntityNotFoundException: If the record is unknown or owned by someone else
        """
