"""Image classifier runtime: model catalogue, preprocessing and dispatch."""

from rd_prediction.infrastructure.ml.dispatcher import DispatchResult, ModelDispatcher
from rd_prediction.infrastructure.ml.model_configs import MODEL_CONFIGS, ModelConfig

__all__ = ["DispatchResult", "MODEL_CONFIGS", "ModelConfig", "ModelDispatcher"]
