"""
Pydantic models for the HousePricePro prediction protocol.

This module defines the data structures for:
- Property features (the validated estimation input)
- Prediction results returned by the estimation engine
- Persisted properties and predictions
- Model quality metrics
- Error responses

JSON keys are camelCase (``estimatedPrice``, ``yearBuilt``) to match the
engine wire format and the web client; Python attributes stay snake_case.
Both spellings are accepted on input.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    protected_namespaces=(),
)

PropertyType = Literal["single_family", "condo", "townhouse", "multi_family"]

NUMERIC_FEATURES = (
    "sqft",
    "bedrooms",
    "bathrooms",
    "year_built",
    "lot_sqft",
    "floors",
    "garage_spaces",
)


# ==============================================================================
# INPUT MODELS
# ==============================================================================


class PropertyFeatures(BaseModel):
    """Structural and location attributes of a house.

    Required: sqft, bedrooms, bathrooms, location.
    Optional attributes are passed to the engine only when provided.
    Numbers are strict: "1800" and 1800.0 are not accepted as integers.
    """

    model_config = ConfigDict(
        **WIRE_CONFIG,
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "examples": [
                {
                    "sqft": 1800,
                    "bedrooms": 3,
                    "bathrooms": 2,
                    "location": "94107",
                    "yearBuilt": 1990,
                    "propertyType": "single_family",
                }
            ]
        },
    )

    sqft: int = Field(
        ..., strict=True, ge=100, le=50_000, description="Living area in square feet", examples=[1800]
    )
    bedrooms: int = Field(..., strict=True, ge=0, le=20, description="Number of bedrooms", examples=[3])
    bathrooms: float = Field(
        ...,
        strict=True,
        ge=0,
        le=20,
        description="Number of bathrooms (can be fractional, e.g., 2.5)",
        examples=[2],
    )
    location: str = Field(
        ...,
        pattern=r"^\d{5}$",
        description="5-digit ZIP code of the property",
        examples=["94107"],
    )

    year_built: Optional[int] = Field(
        default=None, strict=True, ge=1800, le=2100, description="Year the house was built"
    )
    lot_sqft: Optional[int] = Field(
        default=None, strict=True, ge=0, le=10_000_000, description="Lot size in square feet"
    )
    floors: Optional[float] = Field(default=None, strict=True, ge=1, le=5, description="Number of floors")
    garage_spaces: Optional[int] = Field(
        default=None, strict=True, ge=0, le=10, description="Garage parking spaces"
    )
    property_type: Optional[PropertyType] = Field(default=None, description="Kind of dwelling")

    @field_validator(*NUMERIC_FEATURES, mode="before")
    @classmethod
    def reject_booleans(cls, v):
        """JSON ``true``/``false`` is not a number, even though Python says it is."""
        if isinstance(v, bool):
            raise ValueError("must be a number, not a boolean")
        return v

    def to_engine_payload(self) -> dict:
        """Wire representation sent to the estimation engine."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ==============================================================================
# ENGINE RESPONSE MODELS
# ==============================================================================


class PredictionResult(BaseModel):
    """A confidence-bounded price estimate produced by the engine."""

    model_config = ConfigDict(
        **WIRE_CONFIG,
        frozen=True,
        allow_inf_nan=False,
        json_schema_extra={
            "examples": [
                {
                    "estimatedPrice": 950000,
                    "confidence": 0.82,
                    "lowerBound": 870000,
                    "upperBound": 1030000,
                }
            ]
        },
    )

    estimated_price: float = Field(..., ge=0, description="Estimated market price in USD")
    confidence: float = Field(..., ge=0, le=1, description="Engine confidence in the estimate")
    lower_bound: float = Field(..., ge=0, description="Lower end of the price interval")
    upper_bound: float = Field(..., ge=0, description="Upper end of the price interval")

    @model_validator(mode="after")
    def check_bounds(self) -> "PredictionResult":
        if not self.lower_bound <= self.estimated_price <= self.upper_bound:
            raise ValueError(
                f"bounds out of order: lowerBound={self.lower_bound}, "
                f"estimatedPrice={self.estimated_price}, upperBound={self.upper_bound}"
            )
        return self


class ModelMetrics(BaseModel):
    """Aggregate accuracy statistics for the current model."""

    model_config = ConfigDict(**WIRE_CONFIG, allow_inf_nan=False)

    r2_score: float = Field(..., description="Coefficient of determination on held-out data")
    mean_absolute_error: float = Field(..., ge=0, description="MAE in USD")
    root_mean_squared_error: float = Field(..., ge=0, description="RMSE in USD")
    sample_count: int = Field(..., ge=0, description="Number of evaluation samples")
    model_version: Optional[str] = Field(default=None, description="Version of the evaluated model")
    model_type: Optional[str] = Field(default=None, description="Estimator type")
    generated_at: Optional[datetime] = Field(default=None, description="When these metrics were produced")

    @field_validator("r2_score")
    @classmethod
    def validate_r2(cls, v: float) -> float:
        # R^2 is unbounded below but can never exceed 1.
        if v > 1:
            raise ValueError("r2Score must be <= 1")
        return v


# ==============================================================================
# PERSISTED MODELS
# ==============================================================================


class Property(PropertyFeatures):
    """A stored property: validated features plus identity."""

    id: str = Field(..., description="Property identifier", examples=["prop-20250101-120000-abc12345"])
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")


class InsertPrediction(BaseModel):
    """What the orchestrator hands to storage to record a prediction."""

    model_config = ConfigDict(**WIRE_CONFIG, frozen=True)

    property_id: str
    estimated_price: float
    confidence: float
    lower_bound: float
    upper_bound: float

    @classmethod
    def from_result(cls, property_id: str, result: PredictionResult) -> "InsertPrediction":
        return cls(
            property_id=property_id,
            estimated_price=result.estimated_price,
            confidence=result.confidence,
            lower_bound=result.lower_bound,
            upper_bound=result.upper_bound,
        )


class StoredPrediction(InsertPrediction):
    """A stored prediction referencing its owning property."""

    id: str = Field(..., description="Prediction identifier", examples=["pred-20250101-120000-abc12345"])
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")


# ==============================================================================
# API RESPONSE MODELS
# ==============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    model_config = WIRE_CONFIG

    status: str = Field(..., examples=["healthy"])
    engine_command: list[str] = Field(..., description="Command used to launch the engine")
    engine_timeout_seconds: float
    stored_properties: int
    stored_predictions: int
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Standard error response."""

    model_config = WIRE_CONFIG

    error: str = Field(..., description="Error type", examples=["ValidationError"])
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Invalid value for 'sqft': Field required"],
    )
    field: Optional[str] = Field(default=None, description="Offending input field, if any")
    property_id: Optional[str] = Field(default=None, description="Orphaned property id, if any")
    cause: Optional[str] = Field(default=None, description="Engine diagnostics, if any")
