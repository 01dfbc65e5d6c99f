"""
Model dispatch.

Maps a requested or inferred model key to one of the fixed classifiers, runs
it off the event loop and shapes the outcome into a PredictionResult.
"""

import asyncio
import os
import time
from dataclasses import dataclass
from typing import Any

import numpy as np

from rd_prediction.core.exceptions import ValidationError
from rd_prediction.core.utils.logging import get_logger
from rd_prediction.domain.entities.prediction import (
    ClassScore,
    PatientInfo,
    PredictionResult,
    risk_category,
)
from rd_prediction.domain.enums import ModelType
from rd_prediction.infrastructure.ml.classifiers import (
    DemoClassifier,
    ModelUnavailableError,
    OnnxImageClassifier,
)
from rd_prediction.infrastructure.ml.model_configs import (
    FILENAME_KEYWORD_SCORE,
    FILENAME_KEYWORDS,
    MODEL_CONFIGS,
    SYMPTOM_KEYWORD_SCORE,
    SYMPTOM_KEYWORDS,
    ModelConfig,
    interpretation_for,
)

logger = get_logger(__name__)

DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024


@dataclass
class DispatchResult:
    """What one dispatch produced, ready to be stored on a record."""

    model_type: ModelType
    result: PredictionResult
    model_version: str
    processing_time_ms: int


class ModelDispatcher:
    """
    Selects, loads and runs the image classifiers.

    Each ONNX session is created lazily and cached for the life of the
    dispatcher. A model whose artifact is missing or fails to load answers in
    demo mode instead of failing the request, and ``demo_mode=True`` forces
    that for every model.
    """

    def __init__(
        self,
        model_dir: str = "models",
        demo_mode: bool = False,
        max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
    ):
        self.model_dir = model_dir
        self.demo_mode = demo_mode
        self.max_image_bytes = max_image_bytes
        self._classifiers = {
            model_type: OnnxImageClassifier(config, os.path.join(model_dir, config.artifact))
            for model_type, config in MODEL_CONFIGS.items()
        }
        self._demo_classifiers = {
            model_type: DemoClassifier(config) for model_type, config in MODEL_CONFIGS.items()
        }
        self._unavailable: dict[ModelType, str] = {}
        logger.info(f"Model dispatcher initialized (model_dir={model_dir}, demo_mode={demo_mode})")

    @staticmethod
    def auto_detect(file_name: str | None, patient_info: PatientInfo | None = None) -> ModelType:
        """
        Best-effort guess of the right classifier from the upload context.

        Filename keywords score 3 each and symptom or history keywords score 2
        each. Ties go to the model listed first, and pneumonia is the default
        when nothing matches.
        """
        name = (file_name or "").lower()
        patient_text = ""
        if patient_info is not None:
            patient_text = " ".join(
                part for part in (patient_info.symptoms, patient_info.medical_history) if part
            ).lower()

        scores = {model_type: 0 for model_type in MODEL_CONFIGS}
        for model_type in scores:
            for keyword in FILENAME_KEYWORDS[model_type]:
                if keyword in name:
                    scores[model_type] += FILENAME_KEYWORD_SCORE
            for keyword in SYMPTOM_KEYWORDS[model_type]:
                if keyword in patient_text:
                    scores[model_type] += SYMPTOM_KEYWORD_SCORE

        best = ModelType.PNEUMONIA
        for model_type, score in scores.items():
            if score > scores[best]:
                best = model_type
        return best

    def validate_input(self, image_bytes: bytes | None) -> None:
        """
        Raises:
            ValidationError: If the image is empty or larger than the limit
        """
        if not image_bytes:
            raise ValidationError("Image data cannot be empty")
        if len(image_bytes) > self.max_image_bytes:
            raise ValidationError("Image file too large (max 10MB)")

    def resolve(
        self,
        model_type: ModelType | None,
        file_name: str | None,
        patient_info: PatientInfo | None = None,
    ) -> tuple[ModelType, bool]:
        """Return the model to run and whether it was picked by auto-detection."""
        if model_type is not None:
            return model_type, False
        detected = self.auto_detect(file_name, patient_info)
        logger.info(f"Auto-detected model {detected.value} for upload")
        return detected, True

    def is_demo(self, model_type: ModelType) -> bool:
        return self.demo_mode or model_type in self._unavailable

    async def predict(
        self,
        image_bytes: bytes,
        model_type: ModelType | None = None,
        file_name: str | None = None,
        patient_info: PatientInfo | None = None,
    ) -> DispatchResult:
        """
        Run a classifier on an image.

        Inference runs in a worker thread so the event loop stays free.

        Raises:
            ValidationError: If the image is empty or too large
            InferenceError: If the image cannot be decoded or the model fails
        """
        self.validate_input(image_bytes)
        resolved, _ = self.resolve(model_type, file_name, patient_info)
        started = time.perf_counter()
        result, version = await asyncio.to_thread(self._predict_sync, image_bytes, resolved)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        return DispatchResult(
            model_type=resolved,
            result=result,
            model_version=version,
            processing_time_ms=elapsed_ms,
        )

    def _predict_sync(self, image_bytes: bytes, model_type: ModelType) -> tuple[PredictionResult, str]:
        config = MODEL_CONFIGS[model_type]
        if not self.is_demo(model_type):
            try:
                probabilities = self._classifiers[model_type].predict(image_bytes)
                return self._build_result(config, probabilities, demo=False), config.version
            except ModelUnavailableError as e:
                self._unavailable[model_type] = str(e)
                logger.warning(f"{model_type.value} model unavailable, using demo mode: {e}")

        probabilities = self._demo_classifiers[model_type].predict(image_bytes)
        return self._build_result(config, probabilities, demo=True), f"{config.version}-demo"

    @staticmethod
    def _build_result(config: ModelConfig, probabilities: np.ndarray, demo: bool) -> PredictionResult:
        scores = [
            ClassScore(label=label, probability=round(float(min(max(p, 0.0), 1.0)), 6))
            for label, p in zip(config.classes, probabilities)
        ]
        top = max(scores, key=lambda score: score.probability)
        is_positive = top.label != config.negative_class and top.probability >= config.threshold
        return PredictionResult(
            predicted_class=top.label,
            confidence=top.probability,
            category=risk_category(is_positive, top.probability),
            class_scores=scores,
            is_positive=is_positive,
            threshold=config.threshold,
            interpretation=interpretation_for(config.model_type, top.label, top.probability),
            demo_mode=demo,
        )

    def get_model_info(self) -> dict[str, Any]:
        """Describe every model, including whether it is loaded or answering in demo mode."""
        models = {}
        for model_type, config in MODEL_CONFIGS.items():
            models[model_type.value] = {
                "name": config.name,
                "description": config.description,
                "classes": config.classes,
                "threshold": config.threshold,
                "input_shape": config.input_shape,
                "version": config.version,
                "is_loaded": self._classifiers[model_type].is_loaded,
                "demo_mode": self.is_demo(model_type),
            }
        return {"models": models, "demo_mode": self.demo_mode}
