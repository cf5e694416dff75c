"""Trainers backed by scikit-learn estimators."""
import logging
import warnings
from typing import Sequence

import numpy as np
from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import LinearRegression
from sklearn.neural_network import MLPRegressor

from ..config.constants import (
    DEFAULT_TOPOLOGY, DEFAULT_ACTIVATION, DEFAULT_RANDOM_STATE, DEFAULT_STEPMAX
)
from .activations import Activation
from .base_trainer import BaseTrainer, TrainedModel, validate_topology

# Hidden-unit activations MLPRegressor implements natively.
SKLEARN_ACTIVATIONS = ('identity', 'logistic', 'tanh', 'relu')


class EstimatorModel(TrainedModel):
    """Wraps a fitted scikit-learn regressor."""

    def __init__(self, estimator, converged=True, iterations=0, error=float('nan')):
        self.estimator = estimator
        self.converged = converged
        self.iterations = iterations
        self.error = error

    def __repr__(self):
        return f"<EstimatorModel {self.estimator.__class__.__name__}>"

    def predict(self, X) -> np.ndarray:
        return np.asarray(self.estimator.predict(np.asarray(X, dtype=float)), dtype=float).reshape(-1)


def _sse(estimator, X, y) -> float:
    diff = estimator.predict(X) - y
    return 0.5 * float(np.dot(diff, diff))


class MLPRegressorTrainer(BaseTrainer):
    """Feedforward network trained with sklearn's MLPRegressor.

    Only the activations MLPRegressor supports are accepted. A
    ConvergenceWarning is logged as a warning and the fitted estimator is
    still returned.
    """

    name = "mlp"

    def __init__(self, solver: str = 'lbfgs', max_iter: int = DEFAULT_STEPMAX,
                 tol: float = 1e-6, alpha: float = 0.0, log_level=logging.INFO):
        super().__init__(log_level)
        self.solver = solver
        self.max_iter = max_iter
        self.tol = tol
        self.alpha = alpha

    def train(self, X, y,
              topology: Sequence[int] = DEFAULT_TOPOLOGY,
              activation=DEFAULT_ACTIVATION,
              seed: int = DEFAULT_RANDOM_STATE) -> EstimatorModel:
        X, y = self._validate_inputs(X, y)
        topology = validate_topology(topology)

        name = activation.name if isinstance(activation, Activation) else activation
        if name not in SKLEARN_ACTIVATIONS:
            raise ValueError(
                f"MLPRegressor does not support activation '{name}', "
                f"expected one of {SKLEARN_ACTIVATIONS}"
            )

        estimator = MLPRegressor(
            hidden_layer_sizes=topology,
            activation=name,
            solver=self.solver,
            alpha=self.alpha,
            max_iter=self.max_iter,
            tol=self.tol,
            random_state=seed
        )

        self.logger.info(
            f"Fitting MLPRegressor topology={list(topology)} activation={name} "
            f"on {X.shape[0]} rows (seed={seed})"
        )

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always', ConvergenceWarning)
            estimator.fit(X, y)

        converged = not any(issubclass(w.category, ConvergenceWarning) for w in caught)
        if not converged:
            self.logger.warning(
                f"MLPRegressor did not converge within max_iter={self.max_iter}; "
                f"using the partially-trained network"
            )

        return EstimatorModel(estimator, converged=converged,
                              iterations=int(estimator.n_iter_),
                              error=_sse(estimator, X, y))


class LinearRegressionTrainer(BaseTrainer):
    """Ordinary least squares stand-in for a network trainer.

    Ignores topology and activation; useful for exercising the pipeline
    quickly.
    """

    name = "linear"

    def train(self, X, y,
              topology: Sequence[int] = DEFAULT_TOPOLOGY,
              activation=DEFAULT_ACTIVATION,
              seed: int = DEFAULT_RANDOM_STATE) -> EstimatorModel:
        X, y = self._validate_inputs(X, y)
        self.logger.info(f"Fitting LinearRegression on {X.shape[0]} rows")
        estimator = LinearRegression().fit(X, y)
        return EstimatorModel(estimator, converged=True, iterations=1,
                              error=_sse(estimator, X, y))
