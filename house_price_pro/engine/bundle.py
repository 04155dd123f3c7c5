"""
Model bundle loading and inference for the reference estimation engine.

A bundle is a directory containing:
- model.pkl:            pickled estimator (e.g. a sklearn Pipeline) whose
                        ``predict`` accepts a pandas DataFrame
- model_features.json:  ordered list of feature columns the model expects
- metrics.json:         evaluation results written at training time

metrics.json keys:
    r2_score, mae, rmse, sample_count   evaluation on held-out data
    residual_std                         std of held-out residuals (USD)
    interval_z                           optional z-score for the interval
    version, model_type                  optional descriptive fields
"""

import json
import logging
import pickle
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

MODEL_FILE = "model.pkl"
FEATURES_FILE = "model_features.json"
METRICS_FILE = "metrics.json"

# Two-sided 80% normal interval
DEFAULT_INTERVAL_Z = 1.2816


@dataclass
class ModelBundle:
    """A loaded model with its feature order and evaluation metrics."""

    model: Any
    feature_names: list[str]
    metrics: dict[str, Any] = field(default_factory=dict)

    @property
    def residual_std(self) -> float:
        return float(self.metrics.get("residual_std", self.metrics.get("rmse", 0.0)))

    @property
    def interval_z(self) -> float:
        return float(self.metrics.get("interval_z", DEFAULT_INTERVAL_Z))


def load_bundle(model_dir: Path) -> ModelBundle:
    """Load a model bundle from disk.

    Raises:
        FileNotFoundError: If any bundle file is missing
    """
    model_path = model_dir / MODEL_FILE
    features_path = model_dir / FEATURES_FILE

    if not model_path.exists():
        raise FileNotFoundError(f"Model file not found: {model_path}")
    if not features_path.exists():
        raise FileNotFoundError(f"Features file not found: {features_path}")

    with open(model_path, "rb") as f:
        model = pickle.load(f)
    with open(features_path) as f:
        feature_names = json.load(f)

    return ModelBundle(model=model, feature_names=feature_names, metrics=load_metrics(model_dir))


def load_metrics(model_dir: Path) -> dict[str, Any]:
    metrics_path = model_dir / METRICS_FILE
    if not metrics_path.exists():
        raise FileNotFoundError(f"Metrics file not found: {metrics_path}")
    with open(metrics_path) as f:
        return json.load(f)


def estimate(bundle: ModelBundle, features: dict[str, Any]) -> dict[str, float]:
    """Price one property and wrap the point estimate in an interval.

    The interval is ``price +/- z * residual_std`` with the lower bound clipped
    at zero. Confidence is one minus the half-width relative to the price.
    """
    frame = pd.DataFrame([features]).reindex(columns=bundle.feature_names)
    price = float(np.asarray(bundle.model.predict(frame)).ravel()[0])
    price = max(price, 0.0)

    half_width = bundle.interval_z * bundle.residual_std
    lower = max(price - half_width, 0.0)
    upper = price + half_width
    confidence = float(np.clip(1.0 - half_width / price, 0.0, 1.0)) if price > 0 else 0.0

    return {
        "estimatedPrice": round(price, 2),
        "confidence": round(confidence, 4),
        "lowerBound": round(lower, 2),
        "upperBound": round(upper, 2),
    }


def describe_metrics(metrics: dict[str, Any]) -> dict[str, Any]:
    """Translate metrics.json into the ModelMetrics wire format.

    Raises:
        KeyError: If a required metric is missing
    """
    return {
        "r2Score": float(metrics["r2_score"]),
        "meanAbsoluteError": float(metrics["mae"]),
        "rootMeanSquaredError": float(metrics["rmse"]),
        "sampleCount": int(metrics["sample_count"]),
        "modelVersion": metrics.get("version"),
        "modelType": metrics.get("model_type"),
        "generatedAt": datetime.now(timezone.utc).isoformat(),
    }
