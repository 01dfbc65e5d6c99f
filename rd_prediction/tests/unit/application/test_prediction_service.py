"""Tests for the prediction use case with mocked collaborators."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from rd_prediction.application.services.prediction_service import PredictionService
from rd_prediction.core.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    InferenceError,
    ValidationError,
)
from rd_prediction.domain.entities.prediction import InputData, PredictionRecord
from rd_prediction.domain.enums import ModelType
from rd_prediction.domain.exceptions import InvalidModelError, RepositoryError
from rd_prediction.infrastructure.ml import ModelDispatcher
from rd_prediction.tests.helpers import make_png

pytestmark = pytest.mark.asyncio


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def prediction_repository(user_id):
    repo = AsyncMock()

    async def create(owner, input_meta, **kwargs):
        return PredictionRecord(user_id=owner, input_data=input_meta, model_type=kwargs.get("model_type"))

    async def mark_completed(record_id, result, processing_time_ms, **kwargs):
        record = PredictionRecord(
            id=record_id, user_id=user_id, input_data=InputData(file_name="x.png", file_size=1)
        )
        record.mark_completed(result, processing_time_ms, kwargs.get("model_type"), kwargs.get("model_version"))
        return record

    repo.create.side_effect = create
    repo.mark_completed.side_effect = mark_completed
    return repo


@pytest.fixture
def user_repository():
    return AsyncMock()


@pytest.fixture
def dispatcher(tmp_path) -> ModelDispatcher:
    return ModelDispatcher(model_dir=str(tmp_path), demo_mode=True)


def _service(prediction_repository, user_repository, dispatcher, enrichment=None) -> PredictionService:
    return PredictionService(prediction_repository, user_repository, dispatcher, enrichment)


async def test_predict_completes_record(prediction_repository, user_repository, dispatcher, user_id):
    service = _service(prediction_repository, user_repository, dispatcher)

    record = await service.predict(user_id, make_png(), "brain_mri.png")

    assert record.result is not None
    assert record.model_type is ModelType.BRAIN_TUMOR
    assert record.model_version == "1.0-demo"
    create_kwargs = prediction_repository.create.await_args.kwargs
    assert create_kwargs["auto_detected"] is True
    user_repository.increment_prediction_count.assert_awaited_once_with(user_id)
    prediction_repository.mark_failed.assert_not_awaited()


async def test_unknown_model_is_rejected_before_any_write(
    prediction_repository, user_repository, dispatcher, user_id
):
    service = _service(prediction_repository, user_repository, dispatcher)

    with pytest.raises(InvalidModelError):
        await service.predict(user_id, make_png(), "scan.png", model_type="covid")

    prediction_repository.create.assert_not_awaited()
    user_repository.increment_prediction_count.assert_not_awaited()


async def test_empty_image_is_rejected_before_any_write(
    prediction_repository, user_repository, dispatcher, user_id
):
    service = _service(prediction_repository, user_repository, dispatcher)

    with pytest.raises(ValidationError):
        await service.predict(user_id, b"", "scan.png")

    prediction_repository.create.assert_not_awaited()


async def test_inference_failure_marks_record_failed(
    prediction_repository, user_repository, dispatcher, user_id
):
    dispatcher.predict = AsyncMock(side_effect=InferenceError("Unable to decode image: bad header"))
    service = _service(prediction_repository, user_repository, dispatcher)

    with pytest.raises(InferenceError) as exc_info:
        await service.predict(user_id, b"garbage", "chest_xray.png", enhanced=True)

    assert exc_info.value.message == "Enhanced prediction failed: Unable to decode image: bad header"
    record_id, message = prediction_repository.mark_failed.await_args.args
    assert message == "Unable to decode image: bad header"
    prediction_repository.mark_completed.assert_not_awaited()


async def test_unexpected_failure_marks_record_failed_and_propagates(
    prediction_repository, user_repository, dispatcher, user_id
):
    dispatcher.predict = AsyncMock(side_effect=RuntimeError("worker crashed"))
    service = _service(prediction_repository, user_repository, dispatcher)

    with pytest.raises(RuntimeError):
        await service.predict(user_id, make_png(), "chest_xray.png")

    assert prediction_repository.mark_failed.await_args.args[1] == "worker crashed"


async def test_counter_failure_marks_record_failed(
    prediction_repository, user_repository, dispatcher, user_id
):
    user_repository.increment_prediction_count.side_effect = RepositoryError("db down")
    service = _service(prediction_repository, user_repository, dispatcher)

    with pytest.raises(RepositoryError):
        await service.predict(user_id, make_png(), "chest_xray.png")

    prediction_repository.mark_failed.assert_awaited_once()
    assert prediction_repository.mark_failed.await_args.args[1] == "db down"
    prediction_repository.mark_completed.assert_not_awaited()


async def test_enrichment_failure_does_not_fail_prediction(
    prediction_repository, user_repository, dispatcher, user_id
):
    enrichment = MagicMock(is_configured=True)
    enrichment.enrich = AsyncMock(side_effect=ExternalServiceError("Gemini request failed"))
    service = _service(prediction_repository, user_repository, dispatcher, enrichment)

    record = await service.predict(user_id, make_png(), "chest_xray.png", enhanced=True)

    assert record.result.enrichment is None
    enrichment.enrich.assert_awaited_once()
    prediction_repository.mark_failed.assert_not_awaited()


async def test_plain_prediction_never_calls_enrichment(
    prediction_repository, user_repository, dispatcher, user_id
):
    enrichment = MagicMock(is_configured=True)
    enrichment.enrich = AsyncMock()
    service = _service(prediction_repository, user_repository, dispatcher, enrichment)

    await service.predict(user_id, make_png(), "chest_xray.png")

    enrichment.enrich.assert_not_awaited()


async def test_stats_window(prediction_repository, user_repository, dispatcher, user_id):
    service = _service(prediction_repository, user_repository, dispatcher)

    await service.get_stats(user_id)
    await service.get_stats(user_id, days=7)

    assert prediction_repository.stats.await_args_list[0].args == (user_id, None)
    since = prediction_repository.stats.await_args_list[1].args[1]
    assert since is not None


async def test_recommendations_without_client(prediction_repository, user_repository, dispatcher):
    service = _service(prediction_repository, user_repository, dispatcher)

    with pytest.raises(ConfigurationError):
        await service.get_recommendations({"age": 30})
