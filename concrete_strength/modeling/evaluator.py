"""
Held-out evaluation: predictions, Pearson correlation and error tables.
"""

import logging
from typing import NamedTuple, Optional

import numpy as np
import pandas as pd

from ..config.constants import TARGET_COLUMN
from ..data_preparation.normalization import NormalizationParameters, denormalize
from ..utils.exceptions import UndefinedCorrelationError
from .base_trainer import TrainedModel

# Configure module logger
logger = logging.getLogger(__name__)


class EvaluationResult(NamedTuple):
    """Outcome of evaluating one trained model on the test rows."""
    correlation: float
    correlation_original_scale: Optional[float]
    predictions: np.ndarray


def predict(model: TrainedModel, X) -> np.ndarray:
    """
    Forward pass only, one prediction per row of `X` in row order.

    Args:
        model: Trained model
        X: Feature matrix without the target column

    Returns:
        1-d array of predictions
    """
    predictions = np.asarray(model.predict(X), dtype=float).reshape(-1)
    if predictions.shape[0] != len(X):
        raise ValueError(
            f"Model returned {predictions.shape[0]} predictions for {len(X)} rows"
        )
    return predictions


def correlation(a, b) -> float:
    """
    Pearson correlation coefficient between two series.

    Args:
        a: First numeric series
        b: Second numeric series, same length as `a`

    Returns:
        Coefficient in [-1, 1]

    Raises:
        UndefinedCorrelationError: If the lengths differ, fewer than two
            values are given, either series is constant or holds NaN
    """
    a = np.asarray(a, dtype=float).reshape(-1)
    b = np.asarray(b, dtype=float).reshape(-1)

    if a.shape[0] != b.shape[0]:
        raise UndefinedCorrelationError(
            f"Series lengths differ ({a.shape[0]} != {b.shape[0]})"
        )
    if a.shape[0] < 2:
        raise UndefinedCorrelationError("Correlation needs at least two values")

    # A constant series can leave non-zero residuals after centring
    if np.ptp(a) == 0 or np.ptp(b) == 0:
        raise UndefinedCorrelationError("Correlation is undefined for a constant series")

    da = a - a.mean()
    db = b - b.mean()
    r = float(np.dot(da, db) / (np.sqrt(np.dot(da, da)) * np.sqrt(np.dot(db, db))))
    if not np.isfinite(r):
        raise UndefinedCorrelationError("Correlation is undefined for non-finite values")
    return max(-1.0, min(1.0, r))


def evaluate(model: TrainedModel, X, y,
             params: Optional[NormalizationParameters] = None,
             column: str = TARGET_COLUMN) -> EvaluationResult:
    """
    Predict the test rows and correlate the predictions with the truth.

    Args:
        model: Trained model
        X: Test feature matrix
        y: Normalized test targets
        params: When given, correlation is also computed after
            denormalizing both series with these parameters

    Returns:
        EvaluationResult
    """
    predictions = predict(model, X)
    r = correlation(predictions, y)

    r_original = None
    if params is not None:
        r_original = correlation(denormalize(predictions, params, column),
                                 denormalize(y, params, column))

    logger.debug(f"Correlation: {r:.4f} (original scale: {r_original})")
    return EvaluationResult(r, r_original, predictions)


def comparison_table(actual, predicted_normalized,
                     params: NormalizationParameters,
                     column: str = TARGET_COLUMN) -> pd.DataFrame:
    """
    Per-row table of actual value, predictions and absolute error.

    Args:
        actual: Ground truth on the original scale
        predicted_normalized: Model output in normalized space
        params: Parameters captured before normalization

    Returns:
        New DataFrame with columns actual, predicted_normalized, predicted
        and absolute_error
    """
    index = actual.index if isinstance(actual, pd.Series) else None
    actual = np.asarray(actual, dtype=float).reshape(-1)
    predicted_normalized = np.asarray(predicted_normalized, dtype=float).reshape(-1)
    if actual.shape[0] != predicted_normalized.shape[0]:
        raise ValueError(
            f"Got {actual.shape[0]} actual values for {predicted_normalized.shape[0]} predictions"
        )

    predicted = denormalize(predicted_normalized, params, column)
    return pd.DataFrame({
        'actual': actual,
        'predicted_normalized': predicted_normalized,
        'predicted': predicted,
        'absolute_error': np.abs(actual - predicted)
    }, index=index)
