"""
FastAPI application entry point for the HousePricePro API.

This module creates and configures the FastAPI application, including:
- CORS middleware
- Logging configuration
- Router mounting
- Error handling for the prediction error taxonomy
- Startup/shutdown event handlers

Usage:
    Development:
        uvicorn house_price_pro.main:app --reload --host 0.0.0.0 --port 8000

    Production:
        uvicorn house_price_pro.main:app --host 0.0.0.0 --port 8000 --workers 4
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from house_price_pro.api.prediction import router as prediction_router
from house_price_pro.config import Settings, get_settings
from house_price_pro.errors import EstimationError, HousePriceError
from house_price_pro.services.estimator import EstimatorBoundary
from house_price_pro.services.metrics_service import MetricsService
from house_price_pro.services.prediction_service import PredictionService
from house_price_pro.storage import MemStorage

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager for startup and shutdown events."""
    settings: Settings = app.state.settings
    logger.info("Starting %s API v%s...", settings.app_name, settings.app_version)
    logger.info(
        "Estimation engine: %s (model dir: %s, timeout: %.1fs, max concurrency: %d)",
        " ".join(settings.engine_command),
        settings.model_dir,
        settings.engine_timeout_seconds,
        settings.engine_max_concurrency,
    )

    yield  # Application runs here

    properties, predictions = app.state.storage.counts()
    logger.info(
        "Shutting down %s API (%d properties, %d predictions stored)...",
        settings.app_name,
        properties,
        predictions,
    )


async def handle_house_price_error(request: Request, exc: HousePriceError) -> JSONResponse:
    """Render any service error as ``{error, message, ...}`` with its status code."""
    if isinstance(exc, EstimationError) and exc.detail:
        logger.warning("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.detail)
    else:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="""
## HousePricePro API

Estimate a house's market price from structural and location features.

### Endpoints

- **GET /api/health** - Check API health
- **POST /api/predict** - Price estimate with a confidence interval
- **GET /api/model-metrics** - Accuracy statistics for the current model

Estimates are produced by an out-of-process estimation engine. Each
successful prediction is stored together with the property it describes.
        """,
        version=settings.app_version,
        openapi_tags=[
            {"name": "Health", "description": "API health and status endpoints"},
            {"name": "Prediction", "description": "House price prediction endpoints"},
        ],
        lifespan=lifespan,
    )
    # Services are built once per app from the settings it was created with.
    storage = MemStorage()
    estimator = EstimatorBoundary(settings.engine_config())
    app.state.settings = settings
    app.state.storage = storage
    app.state.prediction_service = PredictionService(
        estimator, storage, reject_unknown_fields=settings.reject_unknown_fields
    )
    app.state.metrics_service = MetricsService(estimator)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(HousePriceError, handle_house_price_error)
    app.include_router(prediction_router, prefix=settings.api_prefix)

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": f"{settings.app_name} API",
            "version": settings.app_version,
            "docs": "/docs",
            "health": f"{settings.api_prefix}/health",
        }

    return app


app = create_app()


# For running directly with Python (not recommended for production)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "house_price_pro.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
