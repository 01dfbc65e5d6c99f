"""Tests for the prediction record lifecycle."""

from uuid import uuid4

import pytest

from rd_prediction.domain.entities.prediction import (
    InputData,
    PatientInfo,
    PredictionRecord,
    PredictionResult,
    risk_category,
)
from rd_prediction.domain.enums import ModelType, PredictionStatus
from rd_prediction.domain.exceptions import InvalidModelError, InvalidStatusTransitionError


@pytest.fixture
def record() -> PredictionRecord:
    return PredictionRecord(
        user_id=uuid4(),
        input_data=InputData(file_name="chest_xray.png", file_size=2048, content_type="image/png"),
        model_type=ModelType.PNEUMONIA,
    )


@pytest.fixture
def result() -> PredictionResult:
    return PredictionResult(predicted_class="Pneumonia", confidence=0.82, is_positive=True)


def test_new_record_is_pending(record):
    assert record.status is PredictionStatus.PENDING
    assert record.result is None
    assert not record.is_terminal


def test_mark_completed_sets_result(record, result):
    record.mark_completed(result, 120, model_version="1.0-demo")

    assert record.status is PredictionStatus.COMPLETED
    assert record.result == result
    assert record.processing_time == 120
    assert record.model_version == "1.0-demo"
    assert record.error_message is None


def test_mark_failed_clears_result(record):
    record.mark_failed("Unable to decode image")

    assert record.status is PredictionStatus.FAILED
    assert record.result is None
    assert record.error_message == "Unable to decode image"


@pytest.mark.parametrize("first", ["completed", "failed"])
def test_terminal_record_cannot_change_again(record, result, first):
    if first == "completed":
        record.mark_completed(result, 10)
    else:
        record.mark_failed("boom")

    with pytest.raises(InvalidStatusTransitionError):
        record.mark_completed(result, 10)
    with pytest.raises(InvalidStatusTransitionError):
        record.mark_failed("again")


def test_owned_by_compares_ids(record):
    assert record.owned_by(record.user_id)
    assert record.owned_by(str(record.user_id))
    assert not record.owned_by(uuid4())


@pytest.mark.parametrize(
    ("is_positive", "confidence", "expected"),
    [
        (False, 0.99, "Low Risk"),
        (True, 0.75, "High Risk"),
        (True, 0.9, "High Risk"),
        (True, 0.6, "Medium Risk"),
        (None, 0.6, "Unknown"),
    ],
)
def test_risk_category(is_positive, confidence, expected):
    assert risk_category(is_positive, confidence) == expected


def test_patient_info_is_empty():
    assert PatientInfo().is_empty()
    assert PatientInfo(symptoms="").is_empty()
    assert not PatientInfo(patient_id="P-1").is_empty()


class TestModelTypeParse:
    @pytest.mark.parametrize("value", [None, "", "   ", "auto"])
    def test_auto_detection_values(self, value):
        assert ModelType.parse(value) is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("pneumonia", ModelType.PNEUMONIA),
            ("brainTumor", ModelType.BRAIN_TUMOR),
            ("tuberculosis", ModelType.TUBERCULOSIS),
        ],
    )
    def test_known_keys(self, value, expected):
        assert ModelType.parse(value) is expected

    def test_unknown_key_raises(self):
        with pytest.raises(InvalidModelError) as exc_info:
            ModelType.parse("covid")
        assert str(exc_info.value) == "Invalid model type: covid"
