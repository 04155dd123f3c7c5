"""
Model Tests

Invariants the wire models enforce on anything the engine sends back.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from house_price_pro.models import InsertPrediction, ModelMetrics, PredictionResult


class TestPredictionResult:
    def test_accepts_wire_format(self, engine_result):
        result = PredictionResult.model_validate(engine_result)
        assert result.estimated_price == 950000
        assert result.confidence == 0.82
        assert result.model_dump(by_alias=True) == engine_result

    def test_point_interval_is_valid(self):
        result = PredictionResult(estimated_price=1, confidence=1, lower_bound=1, upper_bound=1)
        assert result.lower_bound == result.upper_bound

    @pytest.mark.parametrize(
        "override",
        [
            {"lowerBound": 960000},
            {"upperBound": 900000},
            {"confidence": 1.2},
            {"confidence": -0.1},
            {"estimatedPrice": -5},
        ],
    )
    def test_rejects_invariant_violations(self, engine_result, override):
        with pytest.raises(PydanticValidationError):
            PredictionResult.model_validate({**engine_result, **override})

    def test_rejects_non_finite_values(self):
        with pytest.raises(PydanticValidationError):
            PredictionResult.model_validate_json(
                '{"estimatedPrice": NaN, "confidence": 0.5, "lowerBound": 1, "upperBound": 2}'
            )

    def test_is_frozen(self, engine_result):
        result = PredictionResult.model_validate(engine_result)
        with pytest.raises(PydanticValidationError):
            result.confidence = 0.1

    def test_insert_prediction_copies_result(self, engine_result):
        result = PredictionResult.model_validate(engine_result)
        insert = InsertPrediction.from_result("prop-1", result)
        assert insert.property_id == "prop-1"
        assert insert.upper_bound == result.upper_bound


class TestModelMetrics:
    def test_accepts_wire_format(self, engine_metrics):
        metrics = ModelMetrics.model_validate(engine_metrics)
        assert metrics.sample_count == 4322
        assert metrics.model_type is None

    def test_negative_r2_allowed(self, engine_metrics):
        metrics = ModelMetrics.model_validate({**engine_metrics, "r2Score": -0.4})
        assert metrics.r2_score == -0.4

    def test_r2_above_one_rejected(self, engine_metrics):
        with pytest.raises(PydanticValidationError):
            ModelMetrics.model_validate({**engine_metrics, "r2Score": 1.5})

    def test_missing_sample_count_rejected(self, engine_metrics):
        del engine_metrics["sampleCount"]
        with pytest.raises(PydanticValidationError):
            ModelMetrics.model_validate(engine_metrics)
