"""
Main API router.

Aggregates all endpoint routers; the application factory mounts it under
``API_PREFIX``.
"""

from fastapi import APIRouter

from rd_prediction.presentation.api.v1.endpoints.auth import router as auth_router
from rd_prediction.presentation.api.v1.endpoints.health import router as health_router
from rd_prediction.presentation.api.v1.endpoints.predictions import router as predictions_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(predictions_router, prefix="/prediction", tags=["Predictions"])
api_router.include_router(health_router, tags=["Health"])
