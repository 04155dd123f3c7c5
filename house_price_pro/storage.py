"""
Persistence collaborator for properties and predictions.

The prediction flow depends only on the ``Storage`` protocol. ``MemStorage``
is the default implementation: process-local dictionaries guarded by a lock,
so concurrent requests can write safely.
"""

import threading
import uuid
from datetime import datetime, timezone
from typing import Optional, Protocol

from house_price_pro.models import InsertPrediction, Property, PropertyFeatures, StoredPrediction


def generate_id(prefix: str) -> str:
    """Generate a unique record ID.

    Returns:
        String in format: <prefix>-YYYYMMDD-HHMMSS-uuid8
    """
    now = datetime.now(timezone.utc)
    date_str = now.strftime("%Y%m%d-%H%M%S")
    short_uuid = uuid.uuid4().hex[:8]
    return f"{prefix}-{date_str}-{short_uuid}"


class Storage(Protocol):
    def create_property(self, features: PropertyFeatures) -> Property:
        ...

    def create_prediction(self, prediction: InsertPrediction) -> StoredPrediction:
        ...

    def get_property(self, property_id: str) -> Optional[Property]:
        ...

    def get_prediction(self, prediction_id: str) -> Optional[StoredPrediction]:
        ...

    def list_predictions(self, property_id: Optional[str] = None) -> list[StoredPrediction]:
        ...


class MemStorage:
    """In-memory ``Storage``; records live as long as the process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._properties: dict[str, Property] = {}
        self._predictions: dict[str, StoredPrediction] = {}

    def create_property(self, features: PropertyFeatures) -> Property:
        record = Property(
            **features.model_dump(),
            id=generate_id("prop"),
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._properties[record.id] = record
        return record

    def create_prediction(self, prediction: InsertPrediction) -> StoredPrediction:
        with self._lock:
            if prediction.property_id not in self._properties:
                raise KeyError(f"Unknown property: {prediction.property_id}")
            record = StoredPrediction(
                **prediction.model_dump(),
                id=generate_id("pred"),
                created_at=datetime.now(timezone.utc),
            )
            self._predictions[record.id] = record
        return record

    def get_property(self, property_id: str) -> Optional[Property]:
        with self._lock:
            return self._properties.get(property_id)

    def get_prediction(self, prediction_id: str) -> Optional[StoredPrediction]:
        with self._lock:
            return self._predictions.get(prediction_id)

    def list_predictions(self, property_id: Optional[str] = None) -> list[StoredPrediction]:
        with self._lock:
            records = list(self._predictions.values())
        if property_id is None:
            return records
        return [r for r in records if r.property_id == property_id]

    def counts(self) -> tuple[int, int]:
        """Number of stored (properties, predictions)."""
        with self._lock:
            return len(self._properties), len(self._predictions)
