"""
Prediction service.

Orchestrates one image-analysis request: validation, the pending record,
dispatch to a classifier, optional enrichment and the final status write.
Also serves history, detail, statistics, deletion, model information and
health recommendations.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from rd_prediction.core.exceptions import ConfigurationError, ExternalServiceError, InferenceError
from rd_prediction.domain.entities.prediction import (
    Enrichment,
    InputData,
    PatientInfo,
    PredictionRecord,
    PredictionResult,
    RequestMetadata,
)
from rd_prediction.domain.enums import ModelType
from rd_prediction.domain.repositories.prediction_repository import (
    PredictionFilters,
    PredictionRepository,
    PredictionStats,
)
from rd_prediction.domain.repositories.user_repository import UserRepository
from rd_prediction.infrastructure.ml.dispatcher import ModelDispatcher
from rd_prediction.infrastructure.ml.model_configs import get_model_config
from rd_prediction.infrastructure.services.gemini.gemini_service import GeminiEnrichmentService

logger = logging.getLogger(__name__)


class PredictionService:
    """Use cases around prediction records."""

    def __init__(
        self,
        prediction_repository: PredictionRepository,
        user_repository: UserRepository,
        dispatcher: ModelDispatcher,
        enrichment: GeminiEnrichmentService | None = None,
    ):
        self.prediction_repository = prediction_repository
        self.user_repository = user_repository
        self.dispatcher = dispatcher
        self.enrichment = enrichment

    async def predict(
        self,
        user_id: UUID,
        image_bytes: bytes,
        file_name: str,
        content_type: str | None = None,
        model_type: str | None = None,
        patient_info: PatientInfo | None = None,
        metadata: RequestMetadata | None = None,
        enhanced: bool = False,
    ) -> PredictionRecord:
        """
        Classify an uploaded image and persist the outcome.

        The model key and image are validated before anything is written.
        After that a pending record exists, and it always ends ``completed``
        or ``failed``. Enrichment is only attempted when ``enhanced`` is set
        and never fails the request.

        Raises:
            InvalidModelError: If ``model_type`` names an unknown classifier
            ValidationError: If the image is empty or too large
            InferenceError: If the classifier fails; the record is marked failed
        """
        requested = ModelType.parse(model_type)
        self.dispatcher.validate_input(image_bytes)
        resolved, auto_detected = self.dispatcher.resolve(requested, file_name, patient_info)

        record = await self.prediction_repository.create(
            user_id,
            InputData(file_name=file_name, file_size=len(image_bytes), content_type=content_type),
            model_type=resolved,
            auto_detected=auto_detected,
            patient_info=patient_info,
            metadata=metadata,
            model_version=get_model_config(resolved).version,
        )

        failure_prefix = "Enhanced prediction failed" if enhanced else "Prediction failed"
        try:
            await self.user_repository.increment_prediction_count(user_id)
            outcome = await self.dispatcher.predict(image_bytes, resolved)
        except InferenceError as e:
            await self.prediction_repository.mark_failed(record.id, e.message)
            raise InferenceError(f"{failure_prefix}: {e.message}") from e
        except Exception as e:
            await self.prediction_repository.mark_failed(record.id, str(e) or type(e).__name__)
            raise

        result = outcome.result
        if enhanced:
            result.enrichment = await self._try_enrich(resolved, result, patient_info, record.id)

        record = await self.prediction_repository.mark_completed(
            record.id,
            result,
            outcome.processing_time_ms,
            model_type=resolved,
            model_version=outcome.model_version,
        )
        logger.info(
            f"Prediction {record.id} completed with {resolved.value}: "
            f"{result.predicted_class} ({result.confidence:.3f})"
        )
        return record

    async def _try_enrich(
        self,
        model_type: ModelType,
        result: PredictionResult,
        patient_info: PatientInfo | None,
        record_id: UUID,
    ) -> Enrichment | None:
        if self.enrichment is None or not self.enrichment.is_configured:
            return None
        try:
            return await self.enrichment.enrich(model_type, result, patient_info)
        except ExternalServiceError as e:
            logger.warning(f"Enrichment skipped for prediction {record_id}: {e.message}")
            return None

    async def get_history(
        self,
        user_id: UUID,
        page: int = 1,
        limit: int = 10,
        filters: PredictionFilters | None = None,
    ) -> tuple[list[PredictionRecord], int]:
        return await self.prediction_repository.list_for_user(user_id, page, limit, filters)

    async def get_prediction(self, user_id: UUID, prediction_id: UUID) -> PredictionRecord:
        return await self.prediction_repository.get_for_user(prediction_id, user_id)

    async def delete_prediction(self, user_id: UUID, prediction_id: UUID) -> None:
        await self.prediction_repository.delete(prediction_id, user_id)
        logger.info(f"User {user_id} deleted prediction {prediction_id}")

    async def get_stats(self, user_id: UUID, days: int | None = None) -> PredictionStats:
        """Aggregate the user's records, limited to the last ``days`` days when given."""
        since = None
        if days is not None:
            since = datetime.now(timezone.utc) - timedelta(days=days)
        return await self.prediction_repository.stats(user_id, since)

    def get_model_info(self) -> dict[str, Any]:
        return self.dispatcher.get_model_info()

    async def get_recommendations(self, patient_data: dict[str, Any] | None) -> dict[str, Any]:
        """
        Raises:
            ValidationError: If no patient data is given
            ConfigurationError: If the enrichment service is not configured
            ExternalServiceError: If the call fails
        """
        if self.enrichment is None:
            raise ConfigurationError("AI recommendations service is not configured")
        return await self.enrichment.health_recommendations(patient_data)
