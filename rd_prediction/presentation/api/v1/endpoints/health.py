"""Service health endpoint."""

from fastapi import APIRouter, Request

from rd_prediction.presentation.api.dependencies import SettingsDep
from rd_prediction.presentation.api.dependencies.services import get_enrichment_service
from rd_prediction.presentation.api.schemas.prediction import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse, summary="Service health")
async def health(request: Request, settings: SettingsDep) -> HealthResponse:
    enrichment = get_enrichment_service(request)
    if enrichment is None:
        enrichment_status = {"status": "disabled", "message": "Gemini AI not configured"}
    else:
        enrichment_status = await enrichment.health_check()

    return HealthResponse(
        status="ok",
        version=settings.API_VERSION,
        environment=settings.ENVIRONMENT,
        demo_mode=settings.DEMO_MODE,
        enrichment=enrichment_status,
    )
