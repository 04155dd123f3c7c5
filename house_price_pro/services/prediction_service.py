"""
Prediction orchestrator: validation -> estimation -> persistence.

The property and its prediction are two separate writes with no shared
transaction. A failure writing the prediction after the property was stored
is reported as ``PersistenceError`` carrying the orphaned property id.

Persistence failures fail the whole request: the caller gets the error,
not an unsaved estimate.
"""

import logging
from collections.abc import Mapping
from typing import Any

from house_price_pro.errors import PersistenceError
from house_price_pro.models import InsertPrediction, PredictionResult
from house_price_pro.services.estimator import Estimator
from house_price_pro.storage import Storage
from house_price_pro.validation import validate

logger = logging.getLogger(__name__)


class PredictionService:
    """Composes the validation layer, estimator boundary and storage.

    Attributes:
        estimator: Boundary used to price validated features
        storage: Persistence collaborator for properties and predictions
        reject_unknown_fields: Whether unknown input keys are a validation error
    """

    def __init__(self, estimator: Estimator, storage: Storage, *, reject_unknown_fields: bool = False):
        self.estimator = estimator
        self.storage = storage
        self.reject_unknown_fields = reject_unknown_fields

    def predict(self, raw: Mapping[str, Any]) -> PredictionResult:
        """Validate, price and persist a property.

        Args:
            raw: Untrusted feature mapping from the caller

        Returns:
            The engine's PredictionResult, once property and prediction are stored

        Raises:
            ValidationError: Input failed the schema; the engine was not called
            EstimationError: The engine failed; nothing was persisted
            PersistenceError: A storage write failed
        """
        features = validate(raw, reject_unknown=self.reject_unknown_fields)
        logger.info(
            "Prediction request validated. Location: %s, sqft: %d", features.location, features.sqft
        )

        result = self.estimator.estimate(features)

        try:
            prop = self.storage.create_property(features)
        except Exception as e:
            logger.error("Failed to store property: %s", e, exc_info=True)
            raise PersistenceError(f"Failed to store property: {e}") from e

        try:
            stored = self.storage.create_prediction(InsertPrediction.from_result(prop.id, result))
        except Exception as e:
            logger.error(
                "Failed to store prediction for property %s; property is orphaned: %s",
                prop.id,
                e,
                exc_info=True,
            )
            raise PersistenceError(f"Failed to store prediction: {e}", property_id=prop.id) from e

        logger.info(
            "Prediction completed. Property: %s, Prediction: %s, Price: $%.2f",
            prop.id,
            stored.id,
            result.estimated_price,
        )
        return result
