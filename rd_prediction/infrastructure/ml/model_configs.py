"""
Catalogue of the image classifiers the service can run.

Every model takes a 224x224 RGB image. The threshold is the probability the
top class needs before a non-negative prediction counts as positive.
"""

from pydantic import BaseModel, ConfigDict

from rd_prediction.domain.enums import ModelType

MODEL_VERSION = "1.0"
INPUT_SIZE = (224, 224)
INPUT_SHAPE = [224, 224, 3]


class ModelConfig(BaseModel):
    """Static description of one classifier."""

    model_type: ModelType
    name: str
    description: str
    classes: list[str]
    threshold: float
    negative_class: str
    artifact: str
    input_shape: list[int] = INPUT_SHAPE
    version: str = MODEL_VERSION

    model_config = ConfigDict(frozen=True, protected_namespaces=())


MODEL_CONFIGS: dict[ModelType, ModelConfig] = {
    ModelType.PNEUMONIA: ModelConfig(
        model_type=ModelType.PNEUMONIA,
        name="Pneumonia Detection",
        description="Chest X-ray classifier for pneumonia",
        classes=["Normal", "Pneumonia"],
        threshold=0.5,
        negative_class="Normal",
        artifact="pneumonia.onnx",
    ),
    ModelType.BRAIN_TUMOR: ModelConfig(
        model_type=ModelType.BRAIN_TUMOR,
        name="Brain Tumor Classification",
        description="Brain MRI classifier for glioma and meningioma",
        classes=["glioma", "meningioma", "notumor"],
        threshold=0.25,
        negative_class="notumor",
        artifact="brain_tumor.onnx",
    ),
    ModelType.TUBERCULOSIS: ModelConfig(
        model_type=ModelType.TUBERCULOSIS,
        name="Tuberculosis Detection",
        description="Chest X-ray classifier for tuberculosis",
        classes=["Normal", "Tuberculosis"],
        threshold=0.5,
        negative_class="Normal",
        artifact="tuberculosis.onnx",
    ),
}

# Filename keywords score +3, patient text keywords +2.
FILENAME_KEYWORDS: dict[ModelType, list[str]] = {
    ModelType.PNEUMONIA: ["xray", "chest", "lung", "thorax", "pneumonia", "pneu"],
    ModelType.BRAIN_TUMOR: ["brain", "mri", "ct", "head", "tumor", "glioma", "meningioma", "cranial"],
    ModelType.TUBERCULOSIS: ["tb", "tuberculosis", "tbc", "koch", "mycobacterium"],
}

SYMPTOM_KEYWORDS: dict[ModelType, list[str]] = {
    ModelType.PNEUMONIA: ["cough", "fever", "chest pain", "breathing"],
    ModelType.BRAIN_TUMOR: ["headache", "seizure", "vision", "memory"],
    ModelType.TUBERCULOSIS: ["night sweat", "weight loss", "fatigue", "blood cough"],
}

FILENAME_KEYWORD_SCORE = 3
SYMPTOM_KEYWORD_SCORE = 2

INTERPRETATIONS: dict[ModelType, dict[str, str]] = {
    ModelType.PNEUMONIA: {
        "Normal": "Normal chest X-ray. No signs of pneumonia detected ({confidence}% confidence).",
        "Pneumonia": (
            "Pneumonia detected in chest X-ray ({confidence}% confidence). "
            "Recommend medical consultation."
        ),
    },
    ModelType.BRAIN_TUMOR: {
        "glioma": (
            "Glioma type brain tumor detected ({confidence}% confidence). "
            "Immediate medical attention required."
        ),
        "meningioma": (
            "Meningioma type brain tumor detected ({confidence}% confidence). "
            "Medical consultation recommended."
        ),
        "notumor": "No brain tumor detected in scan ({confidence}% confidence).",
    },
    ModelType.TUBERCULOSIS: {
        "Normal": "Normal chest X-ray. No signs of tuberculosis detected ({confidence}% confidence).",
        "Tuberculosis": (
            "Tuberculosis detected in chest X-ray ({confidence}% confidence). "
            "Immediate medical attention required."
        ),
    },
}


def get_model_config(model_type: ModelType) -> ModelConfig:
    return MODEL_CONFIGS[model_type]


def interpretation_for(model_type: ModelType, predicted_class: str, confidence: float) -> str:
    """Template sentence for a classification; confidence is given in [0, 1]."""
    percent = f"{confidence * 100:.1f}"
    template = INTERPRETATIONS.get(model_type, {}).get(predicted_class)
    if template is None:
        return f"{predicted_class} detected with {percent}% confidence."
    return template.format(confidence=percent)
