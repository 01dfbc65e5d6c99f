"""
Gemini enrichment service.

Wraps google-generativeai to attach natural-language text to classification
results. Every call is a single attempt bounded by a timeout. Failures are
raised as ExternalServiceError; whether they reach the client is the
caller's decision.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any

import google.generativeai as genai

from rd_prediction.core.exceptions import ConfigurationError, ExternalServiceError, ValidationError
from rd_prediction.core.utils.logging import get_logger
from rd_prediction.domain.entities.prediction import Enrichment, PatientInfo, PredictionResult
from rd_prediction.domain.enums import ModelType
from rd_prediction.infrastructure.services.gemini.prompts import (
    HEALTH_CHECK_PROMPT,
    disease_info_prompt,
    interpretation_prompt,
    recommendations_prompt,
)

logger = get_logger(__name__)


class GeminiEnrichmentService:
    """Client for the Gemini generative model."""

    def __init__(
        self,
        api_key: str | None,
        model_name: str = "gemini-1.5-flash",
        timeout_seconds: float = 30.0,
        enabled: bool = True,
        model: Any | None = None,
    ):
        """
        Args:
            api_key: Gemini API key; the service is disabled without one
            model_name: Generative model to call
            timeout_seconds: Upper bound for a single call
            enabled: Switch to turn enrichment off even when a key is present
            model: Pre-built model object exposing ``generate_content_async``
        """
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self._model = model
        if self._model is None and enabled and api_key:
            genai.configure(api_key=api_key)
            self._model = genai.GenerativeModel(model_name=model_name)
        if not enabled:
            self._model = None
        logger.info(f"Gemini enrichment {'enabled' if self.is_configured else 'disabled'} ({model_name})")

    @property
    def is_configured(self) -> bool:
        return self._model is not None

    async def _generate(self, prompt: str) -> str:
        try:
            response = await asyncio.wait_for(
                self._model.generate_content_async(prompt), timeout=self.timeout_seconds
            )
            text = (response.text or "").strip()
        except asyncio.TimeoutError as e:
            raise ExternalServiceError(
                f"Gemini request timed out after {self.timeout_seconds}s"
            ) from e
        except Exception as e:  # the SDK surfaces transport, quota and safety errors with many types
            raise ExternalServiceError(f"Gemini request failed: {e}") from e

        if not text:
            raise ExternalServiceError("Gemini returned an empty response")
        return text

    async def interpret(
        self,
        model_type: ModelType,
        result: PredictionResult,
        patient_info: PatientInfo | None = None,
    ) -> str | None:
        """
        Ask for a specialist-style reading of a classification.

        Returns:
            The generated text, or None when the service is not configured

        Raises:
            ExternalServiceError: If the call fails or times out
        """
        if not self.is_configured:
            return None
        return await self._generate(interpretation_prompt(model_type, result, patient_info))

    async def disease_info(self, disease_name: str, patient_info: PatientInfo | None = None) -> str | None:
        """Patient-facing information about a detected condition."""
        if not self.is_configured:
            return None
        return await self._generate(disease_info_prompt(disease_name, patient_info))

    async def enrich(
        self,
        model_type: ModelType,
        result: PredictionResult,
        patient_info: PatientInfo | None = None,
    ) -> Enrichment | None:
        """
        Build the enrichment block for a result.

        Disease information is only requested for positive results.

        Raises:
            ExternalServiceError: If any underlying call fails
        """
        if not self.is_configured:
            return None
        interpretation = await self.interpret(model_type, result, patient_info)
        disease_info = None
        if result.is_positive:
            disease_info = await self.disease_info(result.predicted_class, patient_info)
        return Enrichment(
            interpretation=interpretation,
            disease_info=disease_info,
            model=self.model_name,
        )

    async def health_recommendations(self, patient_data: dict[str, Any] | None) -> dict[str, Any]:
        """
        Personalised recommendations for a patient profile.

        Raises:
            ValidationError: If no patient data is given
            ConfigurationError: If the service is not configured
            ExternalServiceError: If the call fails or times out
        """
        if not patient_data:
            raise ValidationError("Patient data is required")
        if not self.is_configured:
            raise ConfigurationError("AI recommendations service is not configured")

        recommendations = await self._generate(recommendations_prompt(patient_data))
        return {
            "recommendations": recommendations,
            "generated_at": datetime.now(timezone.utc),
            "model": self.model_name,
        }

    async def health_check(self) -> dict[str, str]:
        """Report ``disabled``, ``healthy`` or ``error`` with a short message."""
        if not self.is_configured:
            return {"status": "disabled", "message": "Gemini AI not configured"}
        try:
            await self._generate(HEALTH_CHECK_PROMPT)
        except ExternalServiceError as e:
            logger.warning(f"Gemini health check failed: {e.message}")
            return {"status": "error", "message": e.message}
        return {"status": "healthy", "message": "Gemini AI service is working"}
