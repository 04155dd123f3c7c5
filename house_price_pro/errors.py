"""
Error taxonomy for the prediction protocol.

Each error knows the HTTP status it maps to and how to render itself as a
JSON body, so the API layer can translate any of them with one handler.

    ValidationError          -> 400  (client input malformed)
    EstimationError          -> 400  (engine crashed, timed out or sent garbage)
    PersistenceError         -> 500  (storage write failed)
    MetricsUnavailableError  -> 500  (metrics call failed)
"""

from typing import Any, Optional


class HousePriceError(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": type(self).__name__, "message": self.message}


class ValidationError(HousePriceError):
    """Raised when a property feature set fails schema validation."""

    status_code = 400

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid value for '{field}': {reason}")
        self.field = field
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["field"] = self.field
        return body


class EstimationError(HousePriceError):
    """Raised when the estimation engine fails or returns an unusable response.

    ``cause`` is the engine's captured diagnostic output, or one of the
    fixed causes ``"timeout"`` / ``"malformed response"``. ``detail``
    carries parser output for malformed responses.
    """

    status_code = 400

    TIMEOUT = "timeout"
    MALFORMED = "malformed response"

    def __init__(self, cause: str, detail: Optional[str] = None):
        super().__init__(f"Estimation engine failed: {cause}")
        self.cause = cause
        self.detail = detail


class PersistenceError(HousePriceError):
    """Raised when storing a property or prediction fails.

    When the property was written but the prediction was not, ``property_id``
    identifies the orphaned record for later reconciliation.
    """

    status_code = 500

    def __init__(self, message: str, property_id: Optional[str] = None):
        if property_id is not None:
            message = f"{message} (orphaned property: {property_id})"
        super().__init__(message)
        self.property_id = property_id

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["propertyId"] = self.property_id
        return body


class MetricsUnavailableError(HousePriceError):
    """Raised when model metrics cannot be retrieved from the engine."""

    status_code = 500

    def __init__(self, cause: str):
        super().__init__("Failed to retrieve model metrics")
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["cause"] = self.cause
        return body
