"""
Services package for the HousePricePro API.

This package contains the prediction protocol services:
- estimator: Process boundary to the estimation engine
- prediction_service: Validation -> estimation -> persistence orchestration
- metrics_service: Model metrics retrieval
"""

from house_price_pro.services.estimator import Estimator, EstimatorBoundary
from house_price_pro.services.metrics_service import MetricsService
from house_price_pro.services.prediction_service import PredictionService

__all__ = [
    "Estimator",
    "EstimatorBoundary",
    "MetricsService",
    "PredictionService",
]
