"""
Prediction endpoints.

Upload an image for classification, browse and delete past predictions,
view aggregate statistics, describe the available models and request
health recommendations.

Fixed paths are registered before ``/{prediction_id}`` so they are not
captured by it.
"""

from datetime import date, datetime, time
from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status

from rd_prediction.application.services.prediction_service import PredictionService
from rd_prediction.core.config import Settings
from rd_prediction.core.exceptions import ValidationError
from rd_prediction.core.utils.logging import get_logger
from rd_prediction.domain.entities.prediction import PatientInfo, RequestMetadata
from rd_prediction.domain.entities.user import User
from rd_prediction.domain.enums import ModelType, PredictionStatus
from rd_prediction.domain.exceptions import EntityNotFoundException
from rd_prediction.domain.repositories.prediction_repository import PredictionFilters
from rd_prediction.presentation.api.dependencies import (
    CurrentUserDep,
    PredictionServiceDep,
    SettingsDep,
)
from rd_prediction.presentation.api.schemas.common import ApiResponse, MessageResponse
from rd_prediction.presentation.api.schemas.prediction import (
    HistoryData,
    ModelInfoData,
    Pagination,
    PatientInfoSchema,
    PredictionData,
    PredictionDetailData,
    PredictionResponse,
    RecommendationsData,
    RecommendationsRequest,
    StatsData,
)

router = APIRouter()
logger = get_logger(__name__)

FILE_REQUIRED = "Medical image file is required"
FILE_TOO_LARGE = "File too large. Maximum size is 10MB."
INVALID_FILE_TYPE = "Invalid file type. Please upload a valid medical image file."


class UploadForm:
    """Multipart fields shared by the plain and enhanced prediction routes."""

    def __init__(
        self,
        file: Annotated[UploadFile | None, File()] = None,
        model_type: Annotated[str | None, Form(alias="modelType")] = None,
        patient_id: Annotated[str | None, Form(alias="patientId", max_length=64)] = None,
        patient_name: Annotated[str | None, Form(alias="patientName", min_length=2, max_length=100)] = None,
        age: Annotated[int | None, Form(ge=0, le=150)] = None,
        weight: Annotated[float | None, Form(ge=1, le=500)] = None,
        gender: Annotated[Literal["male", "female", "other"] | None, Form()] = None,
        symptoms: Annotated[str | None, Form(max_length=1000)] = None,
        medical_history: Annotated[str | None, Form(alias="medicalHistory", max_length=2000)] = None,
    ):
        self.file = file
        self.model_type = model_type
        self.patient_info = PatientInfo(
            patient_id=patient_id,
            patient_name=patient_name,
            age=age,
            weight=weight,
            gender=gender,
            symptoms=symptoms,
            medical_history=medical_history,
        )


UploadFormDep = Annotated[UploadForm, Depends()]


async def _read_upload(form: UploadForm, settings: Settings) -> bytes:
    if form.file is None or not form.file.filename:
        raise ValidationError(FILE_REQUIRED)
    if form.file.content_type not in settings.ALLOWED_UPLOAD_CONTENT_TYPES:
        raise ValidationError(INVALID_FILE_TYPE)

    max_bytes = settings.MAX_UPLOAD_SIZE_BYTES
    content = await form.file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise ValidationError(FILE_TOO_LARGE)
    return content


def _parse_date_bound(value: str | None, field: str, end_of_day: bool = False) -> datetime | None:
    """Parse a history date filter; a bare ``dateTo`` date covers that whole day."""
    if not value:
        return None
    try:
        if len(value) == 10:
            day = date.fromisoformat(value)
            return datetime.combine(day, time.max if end_of_day else time.min)
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"{field} must be an ISO 8601 date or datetime") from None


async def _run_prediction(
    request: Request,
    form: UploadForm,
    current_user: User,
    prediction_service: PredictionService,
    settings: Settings,
    enhanced: bool,
) -> PredictionData:
    content = await _read_upload(form, settings)
    metadata = RequestMetadata(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        file_size=len(content),
        file_name=form.file.filename,
    )
    record = await prediction_service.predict(
        user_id=current_user.id,
        image_bytes=content,
        file_name=form.file.filename,
        content_type=form.file.content_type,
        model_type=form.model_type,
        patient_info=form.patient_info,
        metadata=metadata,
        enhanced=enhanced,
    )

    prediction = PredictionResponse.model_validate(record)
    data = PredictionData(prediction=prediction, result=prediction.result)
    if enhanced and record.patient_info is not None:
        data.patient_info = PatientInfoSchema.model_validate(record.patient_info)
    return data


@router.post(
    "/predict",
    response_model=ApiResponse[PredictionData],
    status_code=status.HTTP_201_CREATED,
    summary="Classify a medical image",
)
async def predict(
    request: Request,
    form: UploadFormDep,
    current_user: CurrentUserDep,
    prediction_service: PredictionServiceDep,
    settings: SettingsDep,
) -> ApiResponse[PredictionData]:
    data = await _run_prediction(request, form, current_user, prediction_service, settings, enhanced=False)
    return ApiResponse(message="Prediction completed successfully", data=data)


@router.post(
    "/enhanced",
    response_model=ApiResponse[PredictionData],
    status_code=status.HTTP_201_CREATED,
    summary="Classify a medical image and add an AI interpretation",
)
async def enhanced_predict(
    request: Request,
    form: UploadFormDep,
    current_user: CurrentUserDep,
    prediction_service: PredictionServiceDep,
    settings: SettingsDep,
) -> ApiResponse[PredictionData]:
    data = await _run_prediction(request, form, current_user, prediction_service, settings, enhanced=True)
    return ApiResponse(message="Enhanced prediction completed successfully", data=data)


@router.get("/history", response_model=ApiResponse[HistoryData], summary="Paginated prediction history")
async def history(
    current_user: CurrentUserDep,
    prediction_service: PredictionServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    patient_id: Annotated[str | None, Query(alias="patientId")] = None,
    model_type: Annotated[str | None, Query(alias="modelType")] = None,
    status_filter: Annotated[PredictionStatus | None, Query(alias="status")] = None,
    date_from: Annotated[str | None, Query(alias="dateFrom")] = None,
    date_to: Annotated[str | None, Query(alias="dateTo")] = None,
) -> ApiResponse[HistoryData]:
    filters = PredictionFilters(
        patient_id=patient_id,
        model_type=ModelType.parse(model_type),
        status=status_filter,
        date_from=_parse_date_bound(date_from, "dateFrom"),
        date_to=_parse_date_bound(date_to, "dateTo", end_of_day=True),
    )
    records, total = await prediction_service.get_history(current_user.id, page, limit, filters)
    return ApiResponse(
        data=HistoryData(
            predictions=[PredictionResponse.model_validate(record) for record in records],
            pagination=Pagination.build(page, limit, total),
        )
    )


@router.get("/stats", response_model=ApiResponse[StatsData], summary="Aggregate statistics")
async def stats(
    current_user: CurrentUserDep,
    prediction_service: PredictionServiceDep,
    days: Annotated[int | None, Query(ge=1, le=3650)] = None,
) -> ApiResponse[StatsData]:
    result = await prediction_service.get_stats(current_user.id, days)
    return ApiResponse(
        data=StatsData(
            total_predictions=result.count,
            avg_confidence=result.avg_confidence,
            successful_predictions=result.success_count,
            failed_predictions=result.failed_count,
            model_distribution=result.model_distribution,
            positive_results=result.positive_results,
            average_processing_time=result.avg_processing_time,
            recent_activity=[PredictionResponse.model_validate(r) for r in result.recent_activity],
        )
    )


@router.get("/model-info", response_model=ApiResponse[ModelInfoData], summary="Available models")
async def model_info(
    current_user: CurrentUserDep,
    prediction_service: PredictionServiceDep,
) -> ApiResponse[ModelInfoData]:
    return ApiResponse(data=ModelInfoData.model_validate(prediction_service.get_model_info()))


@router.post(
    "/recommendations",
    response_model=ApiResponse[RecommendationsData],
    summary="Personalised health recommendations",
)
async def recommendations(
    payload: RecommendationsRequest,
    current_user: CurrentUserDep,
    prediction_service: PredictionServiceDep,
) -> ApiResponse[RecommendationsData]:
    result = await prediction_service.get_recommendations(payload.patient_data)
    return ApiResponse(data=RecommendationsData.model_validate(result))


def _parse_id(prediction_id: str) -> UUID:
    try:
        return UUID(prediction_id)
    except ValueError as e:
        raise EntityNotFoundException("Prediction not found") from e


@router.get("/{prediction_id}", response_model=ApiResponse[PredictionDetailData], summary="Prediction detail")
async def get_prediction(
    prediction_id: str,
    current_user: CurrentUserDep,
    prediction_service: PredictionServiceDep,
) -> ApiResponse[PredictionDetailData]:
    record = await prediction_service.get_prediction(current_user.id, _parse_id(prediction_id))
    return ApiResponse(data=PredictionDetailData(prediction=PredictionResponse.model_validate(record)))


@router.delete("/{prediction_id}", response_model=MessageResponse, summary="Delete a prediction")
async def delete_prediction(
    prediction_id: str,
    current_user: CurrentUserDep,
    prediction_service: PredictionServiceDep,
) -> MessageResponse:
    await prediction_service.delete_prediction(current_user.id, _parse_id(prediction_id))
    return MessageResponse(message="Prediction deleted successfully")
