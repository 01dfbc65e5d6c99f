"""Tests for model selection, demo inference and result shaping."""

import numpy as np
import pytest

from rd_prediction.core.exceptions import InferenceError, ValidationError
from rd_prediction.domain.entities.prediction import PatientInfo
from rd_prediction.domain.enums import ModelType
from rd_prediction.infrastructure.ml import MODEL_CONFIGS, ModelDispatcher
from rd_prediction.infrastructure.ml.model_configs import interpretation_for
from rd_prediction.infrastructure.ml.preprocessing import preprocess_image, softmax, to_probabilities
from rd_prediction.tests.helpers import make_png


@pytest.fixture
def dispatcher(tmp_path) -> ModelDispatcher:
    return ModelDispatcher(model_dir=str(tmp_path), demo_mode=True)


class TestAutoDetect:
    @pytest.mark.parametrize(
        ("file_name", "expected"),
        [
            ("chest_xray.png", ModelType.PNEUMONIA),
            ("brain_mri.jpg", ModelType.BRAIN_TUMOR),
            ("tb_scan.png", ModelType.TUBERCULOSIS),
            ("upload.png", ModelType.PNEUMONIA),
            (None, ModelType.PNEUMONIA),
        ],
    )
    def test_file_name_keywords(self, file_name, expected):
        assert ModelDispatcher.auto_detect(file_name) is expected

    def test_tie_goes_to_first_model(self):
        assert ModelDispatcher.auto_detect("lung_brain.png") is ModelType.PNEUMONIA

    def test_symptoms_contribute(self):
        patient = PatientInfo(symptoms="Night sweats and weight loss")
        assert ModelDispatcher.auto_detect("upload.png", patient) is ModelType.TUBERCULOSIS

    def test_file_name_outweighs_single_symptom(self):
        patient = PatientInfo(symptoms="persistent headache")
        assert ModelDispatcher.auto_detect("chest.png", patient) is ModelType.PNEUMONIA


class TestValidateInput:
    def test_empty_image(self, dispatcher):
        with pytest.raises(ValidationError, match="Image data cannot be empty"):
            dispatcher.validate_input(b"")

    def test_too_large(self, tmp_path):
        small = ModelDispatcher(model_dir=str(tmp_path), demo_mode=True, max_image_bytes=16)
        with pytest.raises(ValidationError, match="too large"):
            small.validate_input(b"x" * 17)


def test_resolve_keeps_explicit_model(dispatcher):
    assert dispatcher.resolve(ModelType.BRAIN_TUMOR, "chest_xray.png") == (ModelType.BRAIN_TUMOR, False)
    assert dispatcher.resolve(None, "chest_xray.png") == (ModelType.PNEUMONIA, True)


@pytest.mark.asyncio
async def test_demo_prediction_is_deterministic(dispatcher):
    image = make_png((10, 200, 30))

    first = await dispatcher.predict(image, ModelType.BRAIN_TUMOR)
    second = await dispatcher.predict(image, ModelType.BRAIN_TUMOR)

    assert first.result == second.result
    assert first.model_version == "1.0-demo"
    assert first.result.demo_mode is True
    assert first.result.predicted_class in MODEL_CONFIGS[ModelType.BRAIN_TUMOR].classes
    assert 0.0 <= first.result.confidence <= 1.0
    assert len(first.result.class_scores) == 3
    assert sum(score.probability for score in first.result.class_scores) == pytest.approx(1.0, abs=1e-4)


@pytest.mark.asyncio
async def test_auto_detected_prediction(dispatcher):
    outcome = await dispatcher.predict(make_png(), file_name="tb_scan.png")

    assert outcome.model_type is ModelType.TUBERCULOSIS
    assert outcome.processing_time_ms >= 0


@pytest.mark.asyncio
async def test_missing_artifact_falls_back_to_demo(tmp_path):
    dispatcher = ModelDispatcher(model_dir=str(tmp_path), demo_mode=False)
    assert dispatcher.is_demo(ModelType.PNEUMONIA) is False

    outcome = await dispatcher.predict(make_png(), ModelType.PNEUMONIA)

    assert outcome.model_version.endswith("-demo")
    assert outcome.result.demo_mode is True
    info = dispatcher.get_model_info()
    assert info["models"]["pneumonia"]["demo_mode"] is True
    assert info["models"]["pneumonia"]["is_loaded"] is False
    assert info["models"]["tuberculosis"]["demo_mode"] is False


def test_model_info_lists_every_model(dispatcher):
    info = dispatcher.get_model_info()

    assert set(info["models"]) == {"pneumonia", "brainTumor", "tuberculosis"}
    assert info["demo_mode"] is True
    assert info["models"]["brainTumor"]["classes"] == ["glioma", "meningioma", "notumor"]


def test_positive_result_needs_threshold():
    config = MODEL_CONFIGS[ModelType.PNEUMONIA]
    positive = ModelDispatcher._build_result(config, np.array([0.1, 0.9]), demo=False)
    negative = ModelDispatcher._build_result(config, np.array([0.8, 0.2]), demo=False)

    assert positive.predicted_class == "Pneumonia"
    assert positive.is_positive is True
    assert positive.category == "High Risk"
    assert negative.is_positive is False
    assert negative.category == "Low Risk"


def test_interpretation_templates():
    text = interpretation_for(ModelType.PNEUMONIA, "Pneumonia", 0.875)
    assert "87.5%" in text
    assert "Pneumonia detected" in text


class TestPreprocessing:
    def test_preprocess_shape_and_range(self):
        tensor = preprocess_image(make_png(size=(31, 17)))

        assert tensor.shape == (1, 224, 224, 3)
        assert tensor.dtype == np.float32
        assert tensor.min() >= 0.0
        assert tensor.max() <= 1.0

    def test_undecodable_image(self):
        with pytest.raises(InferenceError, match="Unable to decode image"):
            preprocess_image(b"definitely not an image")

    def test_softmax_sums_to_one(self):
        probabilities = softmax(np.array([2.0, 1.0, -1.0]))
        assert probabilities.sum() == pytest.approx(1.0)
        assert probabilities.argmax() == 0

    def test_logits_are_normalized(self):
        probabilities = to_probabilities(np.array([[3.0, -2.0, 0.5]]), 3)
        assert probabilities.sum() == pytest.approx(1.0)

    def test_probability_vector_passes_through(self):
        probabilities = to_probabilities(np.array([0.25, 0.75]), 2)
        assert probabilities.tolist() == [0.25, 0.75]

    def test_single_sigmoid_output_is_expanded(self):
        probabilities = to_probabilities(np.array([[0.8]]), 2)
        assert probabilities.tolist() == pytest.approx([0.2, 0.8])

    def test_size_mismatch(self):
        with pytest.raises(InferenceError, match="outputs for 3 classes"):
            to_probabilities(np.array([0.1, 0.9]), 3)
