"""Request and response schemas for the prediction routes."""

from datetime import datetime
from math import ceil
from typing import Any, Literal
from uuid import UUID

from pydantic import Field

from rd_prediction.domain.enums import ModelType, PredictionStatus
from rd_prediction.presentation.api.schemas.common import CamelModel


class PatientInfoSchema(CamelModel):
    patient_id: str | None = Field(default=None, max_length=64)
    patient_name: str | None = Field(default=None, min_length=2, max_length=100)
    age: int | None = Field(default=None, ge=0, le=150)
    weight: float | None = Field(default=None, ge=1, le=500)
    gender: Literal["male", "female", "other"] | None = None
    symptoms: str | None = Field(default=None, max_length=1000)
    medical_history: str | None = Field(default=None, max_length=2000)


class InputDataSchema(CamelModel):
    file_name: str
    file_size: int
    content_type: str | None = None


class RequestMetadataSchema(CamelModel):
    ip_address: str | None = None
    user_agent: str | None = None
    file_size: int | None = None
    file_name: str | None = None


class ClassScoreSchema(CamelModel):
    label: str
    probability: float


class EnrichmentSchema(CamelModel):
    interpretation: str | None = None
    disease_info: str | None = None
    model: str | None = None
    generated_at: datetime | None = None


class PredictionResultSchema(CamelModel):
    predicted_class: str
    confidence: float
    category: str | None = None
    class_scores: list[ClassScoreSchema] = Field(default_factory=list)
    is_positive: bool
    threshold: float | None = None
    interpretation: str | None = None
    demo_mode: bool = False
    enrichment: EnrichmentSchema | None = None


class PredictionResponse(CamelModel):
    id: UUID
    user_id: UUID
    input_data: InputDataSchema
    model_type: ModelType | None = None
    auto_detected: bool = False
    patient_info: PatientInfoSchema | None = None
    result: PredictionResultSchema | None = None
    model_version: str
    processing_time: int | None = None
    status: PredictionStatus
    error_message: str | None = None
    metadata: RequestMetadataSchema | None = None
    created_at: datetime
    updated_at: datetime


class PredictionData(CamelModel):
    prediction: PredictionResponse
    result: PredictionResultSchema | None = None
    patient_info: PatientInfoSchema | None = None


class PredictionDetailData(CamelModel):
    prediction: PredictionResponse


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_predictions: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = ceil(total / limit) if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_predictions=total,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class HistoryData(CamelModel):
    predictions: list[PredictionResponse]
    pagination: Pagination


class StatsData(CamelModel):
    total_predictions: int
    avg_confidence: float
    successful_predictions: int
    failed_predictions: int
    model_distribution: dict[str, int]
    positive_results: int
    average_processing_time: float
    recent_activity: list[PredictionResponse]


class ModelInfoSchema(CamelModel):
    name: str
    description: str
    classes: list[str]
    threshold: float
    input_shape: list[int]
    version: str
    is_loaded: bool
    demo_mode: bool


class ModelInfoData(CamelModel):
    models: dict[str, ModelInfoSchema]
    demo_mode: bool


class RecommendationsRequest(CamelModel):
    patient_data: dict[str, Any] | None = None


class RecommendationsData(CamelModel):
    recommendations: str
    generated_at: datetime
    model: str


class HealthResponse(CamelModel):
    status: str
    version: str
    environment: str
    demo_mode: bool
    enrichment: dict[str, str]
