"""
Prediction API endpoints for HousePricePro.

Endpoints:
    GET  /health          - Health check
    POST /predict         - Validate features, price them and store the result
    GET  /model-metrics   - Current model quality metrics

Errors raised by the services (ValidationError, EstimationError,
PersistenceError, MetricsUnavailableError) are rendered by the exception
handler registered in ``house_price_pro.main``.
"""

import json
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from house_price_pro.config import Settings
from house_price_pro.errors import ValidationError
from house_price_pro.models import ErrorResponse, HealthResponse, ModelMetrics, PredictionResult
from house_price_pro.services.metrics_service import MetricsService
from house_price_pro.services.prediction_service import PredictionService
from house_price_pro.storage import MemStorage
from house_price_pro.validation import BODY_FIELD

logger = logging.getLogger(__name__)

router = APIRouter()


# Dependencies resolve against the app that received the request.


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> MemStorage:
    return request.app.state.storage


def get_prediction_service(request: Request) -> PredictionService:
    return request.app.state.prediction_service


def get_metrics_service(request: Request) -> MetricsService:
    return request.app.state.metrics_service


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    tags=["Health"],
)
async def health_check(
    settings: Settings = Depends(get_app_settings),
    storage: MemStorage = Depends(get_storage),
) -> HealthResponse:
    properties, predictions = storage.counts()
    return HealthResponse(
        status="healthy",
        engine_command=list(settings.engine_command),
        engine_timeout_seconds=settings.engine_timeout_seconds,
        stored_properties=properties,
        stored_predictions=predictions,
        timestamp=datetime.now(timezone.utc),
    )


@router.post(
    "/predict",
    response_model=PredictionResult,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or estimation failure"},
        500: {"model": ErrorResponse, "description": "Persistence failure"},
    },
    summary="Predict House Price",
    description="""
    Estimate the market price of a house with a confidence interval.

    The body is validated before the estimation engine is called. On success
    the property and its prediction are stored.
    """,
    tags=["Prediction"],
)
async def predict(
    request: Request,
    service: PredictionService = Depends(get_prediction_service),
) -> PredictionResult:
    logger.info("Prediction request received")
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(BODY_FIELD, f"request body is not valid JSON: {e}") from e

    return await run_in_threadpool(service.predict, payload)


@router.get(
    "/model-metrics",
    response_model=ModelMetrics,
    responses={500: {"model": ErrorResponse, "description": "Metrics unavailable"}},
    summary="Model Metrics",
    description="Aggregate accuracy statistics for the current estimation model.",
    tags=["Prediction"],
)
async def model_metrics(
    service: MetricsService = Depends(get_metrics_service),
) -> ModelMetrics:
    logger.info("Model metrics requested")
    return await run_in_threadpool(service.get_metrics)
