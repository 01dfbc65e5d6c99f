"""
Classifier backends.

``OnnxImageClassifier`` runs a real artifact with onnxruntime. The session is
loaded lazily on first use and cached. ``DemoClassifier`` returns canned
probabilities seeded from the image bytes, so the same upload always gets the
same answer.
"""

import os
import threading

import numpy as np
import onnxruntime as ort

from rd_prediction.core.exceptions import InferenceError
from rd_prediction.core.utils.logging import get_logger
from rd_prediction.infrastructure.ml.model_configs import ModelConfig
from rd_prediction.infrastructure.ml.preprocessing import preprocess_image, to_probabilities

logger = get_logger(__name__)

SEED_BYTES = 1024


class ModelUnavailableError(RuntimeError):
    """The artifact for a model is missing or cannot be loaded."""


class OnnxImageClassifier:
    """Runs one ONNX artifact on the CPU execution provider."""

    def __init__(self, config: ModelConfig, model_path: str):
        self.config = config
        self.model_path = model_path
        self._session: ort.InferenceSession | None = None
        self._input_name: str | None = None
        self._channels_first = False
        self._lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._session is not None

    def load(self) -> None:
        """
        Load the inference session if it is not loaded yet.

        Raises:
            ModelUnavailableError: If the artifact is missing or unloadable
        """
        with self._lock:
            if self._session is not None:
                return
            if not os.path.exists(self.model_path):
                raise ModelUnavailableError(f"Model artifact not found: {self.model_path}")
            try:
                session = ort.InferenceSession(self.model_path, providers=["CPUExecutionProvider"])
            except Exception as e:  # onnxruntime raises its own untyped errors
                raise ModelUnavailableError(f"Failed to load {self.model_path}: {e}") from e

            model_input = session.get_inputs()[0]
            shape = model_input.shape
            self._channels_first = len(shape) == 4 and shape[1] == 3
            self._input_name = model_input.name
            self._session = session
            logger.info(f"Loaded {self.config.model_type.value} model from {self.model_path}")

    def predict(self, image_bytes: bytes) -> np.ndarray:
        """
        Classify an image and return one probability per class.

        Raises:
            ModelUnavailableError: If the model cannot be loaded
            InferenceError: If the image cannot be decoded or inference fails
        """
        self.load()
        tensor = preprocess_image(image_bytes)
        if self._channels_first:
            tensor = np.transpose(tensor, (0, 3, 1, 2))

        try:
            outputs = self._session.run(None, {self._input_name: tensor})
        except Exception as e:  # onnxruntime raises its own untyped errors
            raise InferenceError(f"Model inference failed: {e}") from e

        return to_probabilities(outputs[0], len(self.config.classes))


class DemoClassifier:
    """Deterministic stand-in used when no real model is available."""

    def __init__(self, config: ModelConfig):
        self.config = config

    def predict(self, image_bytes: bytes) -> np.ndarray:
        seed = int(np.frombuffer(image_bytes[:SEED_BYTES], dtype=np.uint8).sum())
        rng = np.random.default_rng(seed)
        return rng.dirichlet(np.ones(len(self.config.classes)))
