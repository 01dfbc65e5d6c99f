"""
Prediction record entity.

A PredictionRecord is the persisted outcome of one image-analysis request.
It is created ``pending`` when an upload is accepted and moves exactly once
to ``completed`` or ``failed``.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from rd_prediction.domain.enums import ModelType, PredictionStatus
from rd_prediction.domain.exceptions import InvalidStatusTransitionError

HIGH_RISK_CONFIDENCE = 0.75


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InputData(BaseModel):
    """Reference to the uploaded payload. The image bytes themselves are not stored."""

    file_name: str
    file_size: int = Field(..., ge=0)
    content_type: str | None = None


class PatientInfo(BaseModel):
    """Optional patient context supplied with an upload."""

    patient_id: str | None = None
    patient_name: str | None = None
    age: int | None = Field(default=None, ge=0, le=150)
    weight: float | None = Field(default=None, ge=1, le=500)
    gender: str | None = None
    symptoms: str | None = None
    medical_history: str | None = None

    def is_empty(self) -> bool:
        return not any(value is not None and value != "" for value in self.model_dump().values())


class RequestMetadata(BaseModel):
    """Client context captured at upload time."""

    ip_address: str | None = None
    user_agent: str | None = None
    file_size: int | None = None
    file_name: str | None = None


class ClassScore(BaseModel):
    label: str
    probability: float = Field(..., ge=0.0, le=1.0)


class Enrichment(BaseModel):
    """Natural-language text returned by the generative-AI service."""

    interpretation: str | None = None
    disease_info: str | None = None
    model: str | None = None
    generated_at: datetime = Field(default_factory=_utcnow)


class PredictionResult(BaseModel):
    """Classification outcome stored on a completed record."""

    predicted_class: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    category: str | None = None
    class_scores: list[ClassScore] = Field(default_factory=list)
    is_positive: bool = False
    threshold: float | None = None
    interpretation: str | None = None
    demo_mode: bool = False
    enrichment: Enrichment | None = None


def risk_category(is_positive: bool | None, confidence: float | None) -> str:
    """
    Bucket a result into the risk labels shown by the client.

    Negative results are low risk. Positive results are high risk once the
    classifier is at least 75% confident, medium risk below that.
    """
    if is_positive is None or confidence is None:
        return "Unknown"
    if not is_positive:
        return "Low Risk"
    if confidence >= HIGH_RISK_CONFIDENCE:
        return "High Risk"
    return "Medium Risk"


class PredictionRecord(BaseModel):
    """Domain entity for a single prediction request and its outcome."""

    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    input_data: InputData
    model_type: ModelType | None = None
    auto_detected: bool = False
    patient_info: PatientInfo | None = None
    result: PredictionResult | None = None
    model_version: str = "1.0"
    processing_time: int | None = Field(default=None, ge=0)
    status: PredictionStatus = PredictionStatus.PENDING
    error_message: str | None = None
    metadata: RequestMetadata = Field(default_factory=RequestMetadata)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(protected_namespaces=(), from_attributes=True)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def _ensure_pending(self, target: PredictionStatus) -> None:
        if self.is_terminal:
            raise InvalidStatusTransitionError(self.id, self.status.value, target.value)

    def mark_completed(
        self,
        result: PredictionResult,
        processing_time_ms: int,
        model_type: ModelType | None = None,
        model_version: str | None = None,
    ) -> None:
        """
        Move a pending record to ``completed``.

        Raises:
            InvalidStatusTransitionError: If the record already reached a terminal state
        """
        self._ensure_pending(PredictionStatus.COMPLETED)
        self.result = result
        self.processing_time = max(int(processing_time_ms), 0)
        if model_type is not None:
            self.model_type = model_type
        if model_version is not None:
            self.model_version = model_version
        self.error_message = None
        self.status = PredictionStatus.COMPLETED
        self.updated_at = _utcnow()

    def mark_failed(self, message: str) -> None:
        """
        Move a pending record to ``failed`` with an error message.

        Raises:
            InvalidStatusTransitionError: If the record already reached a terminal state
        """
        self._ensure_pending(PredictionStatus.FAILED)
        self.error_message = message or "Prediction failed"
        self.result = None
        self.status = PredictionStatus.FAILED
        self.updated_at = _utcnow()

    def owned_by(self, user_id: UUID | Any) -> bool:
        return str(self.user_id) == str(user_id)
