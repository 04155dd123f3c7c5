"""
Shared fixtures for the HousePricePro test suite.

Engine tests run real processes: small Python scripts written into a
temporary directory and launched with the current interpreter.
"""

import sys
import textwrap

import pytest

from house_price_pro.config import EngineConfig
from house_price_pro.errors import EstimationError
from house_price_pro.models import ModelMetrics, PredictionResult, PropertyFeatures

ENGINE_RESULT = {
    "estimatedPrice": 950000,
    "confidence": 0.82,
    "lowerBound": 870000,
    "upperBound": 1030000,
}

ENGINE_METRICS = {
    "r2Score": 0.87,
    "meanAbsoluteError": 61000.0,
    "rootMeanSquaredError": 98000.0,
    "sampleCount": 4322,
    "modelVersion": "v1",
}


@pytest.fixture
def engine_result():
    return dict(ENGINE_RESULT)


@pytest.fixture
def engine_metrics():
    return dict(ENGINE_METRICS)


@pytest.fixture
def sample_request():
    """The canonical request used across the suite."""
    return {"sqft": 1800, "bedrooms": 3, "bathrooms": 2, "location": "94107"}


@pytest.fixture
def sample_features(sample_request):
    return PropertyFeatures.model_validate(sample_request)


@pytest.fixture
def make_engine(tmp_path):
    """Write an engine script and return an EngineConfig that launches it.

    ``make_engine(body, timeout_seconds=..., extra_args=[...])``
    """

    def _make(body: str, *, timeout_seconds: float = 10.0, max_concurrency: int = 4, extra_args=()):
        script = tmp_path / f"engine_{len(list(tmp_path.glob('engine_*.py')))}.py"
        script.write_text(textwrap.dedent(body))
        return EngineConfig(
            command=(sys.executable, str(script), *extra_args),
            timeout_seconds=timeout_seconds,
            max_concurrency=max_concurrency,
        )

    return _make


@pytest.fixture
def fixed_engine(make_engine, tmp_path):
    """Engine that records its stdin and argv, then answers with ENGINE_RESULT or ENGINE_METRICS."""
    capture = tmp_path / "capture"
    capture.mkdir()
    config = make_engine(
        f"""
        import json, sys
        from pathlib import Path

        capture = Path({str(capture)!r})
        calls = len(list(capture.glob("stdin_*")))
        (capture / f"stdin_{{calls}}").write_text(sys.stdin.read())
        (capture / f"argv_{{calls}}").write_text(json.dumps(sys.argv[1:]))
        if "--metrics" in sys.argv:
            json.dump({ENGINE_METRICS!r}, sys.stdout)
        else:
            json.dump({ENGINE_RESULT!r}, sys.stdout)
        """
    )
    return config, capture


class FakeEstimator:
    """In-process Estimator that records calls and returns canned answers."""

    def __init__(self, result=None, metrics=None, error=None):
        self.result = result or PredictionResult.model_validate(ENGINE_RESULT)
        self.metrics = metrics or ModelMetrics.model_validate(ENGINE_METRICS)
        self.error = error
        self.estimate_calls: list[PropertyFeatures] = []
        self.metrics_calls = 0

    def estimate(self, features: PropertyFeatures) -> PredictionResult:
        self.estimate_calls.append(features)
        if self.error is not None:
            raise self.error
        return self.result

    def fetch_metrics(self) -> ModelMetrics:
        self.metrics_calls += 1
        if self.error is not None:
            raise self.error
        return self.metrics


@pytest.fixture
def fake_estimator():
    return FakeEstimator()


@pytest.fixture
def failing_estimator():
    return FakeEstimator(error=EstimationError("Traceback: engine exploded"))

