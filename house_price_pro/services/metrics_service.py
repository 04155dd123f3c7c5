"""
Metrics retrieval: a read-only pass-through to the engine's metrics mode.

Metrics are fetched fresh on every call; nothing is cached here.
"""

import logging

from house_price_pro.errors import EstimationError, MetricsUnavailableError
from house_price_pro.models import ModelMetrics
from house_price_pro.services.estimator import Estimator

logger = logging.getLogger(__name__)


class MetricsService:
    def __init__(self, estimator: Estimator):
        self.estimator = estimator

    def get_metrics(self) -> ModelMetrics:
        """Fetch current model metrics.

        Raises:
            MetricsUnavailableError: If the engine call fails for any reason
        """
        try:
            return self.estimator.fetch_metrics()
        except EstimationError as e:
            logger.error("Model metrics unavailable: %s", e.cause)
            raise MetricsUnavailableError(e.cause) from e
