"""Base classes for model trainers and the models they produce."""
import logging
from abc import ABC, abstractmethod
from typing import Sequence, Tuple

import numpy as np
import pandas as pd

from ..config.constants import DEFAULT_TOPOLOGY, DEFAULT_ACTIVATION, DEFAULT_RANDOM_STATE


class TrainedModel(ABC):
    """A fitted model usable for forward inference only.

    Attributes:
        converged: Whether training stopped on its convergence criterion
        iterations: Number of training iterations performed
        error: Final training sum of squared errors
    """

    converged: bool = True
    iterations: int = 0
    error: float = float('nan')

    @abstractmethod
    def predict(self, X) -> np.ndarray:
        """Return one prediction per row of `X`, in row order."""
        pass


class BaseTrainer(ABC):
    """Abstract base class for everything that fits a regression model.

    All trainer implementations should inherit from this class and implement
    `train`. Trainers hold configuration only; each call to `train` returns a
    new, independent TrainedModel.
    """

    name = "base"

    def __init__(self, log_level=logging.INFO):
        """Initialize the trainer with logging configuration.

        Args:
            log_level: The logging level to use (e.g., logging.INFO, logging.DEBUG)
        """
        self.logger = logging.getLogger(f"{self.__class__.__name__}")
        self.logger.setLevel(log_level)

    @abstractmethod
    def train(self, X, y,
              topology: Sequence[int] = DEFAULT_TOPOLOGY,
              activation=DEFAULT_ACTIVATION,
              seed: int = DEFAULT_RANDOM_STATE) -> TrainedModel:
        """Fit a model to training data.

        Args:
            X: Training feature matrix, one row per sample
            y: Training target vector
            topology: Hidden-layer widths, in order
            activation: Activation name, Activation or callable for hidden units
            seed: Seed controlling initial weights

        Returns:
            Trained model
        """
        pass

    def _validate_inputs(self, X, y) -> Tuple[np.ndarray, np.ndarray]:
        """Convert inputs to float arrays and check their shapes.

        Raises:
            ValueError: If shapes are inconsistent or data is empty
        """
        X = np.asarray(X.to_numpy() if isinstance(X, pd.DataFrame) else X, dtype=float)
        y = np.asarray(y.to_numpy() if isinstance(y, pd.Series) else y, dtype=float)

        if X.ndim != 2:
            raise ValueError(f"X must be 2-dimensional, got shape {X.shape}")
        y = y.reshape(-1)
        if X.shape[0] != y.shape[0]:
            raise ValueError(
                f"X and y must have the same number of rows ({X.shape[0]} != {y.shape[0]})"
            )
        if X.shape[0] == 0:
            raise ValueError("Cannot train on an empty dataset")
        return X, y


def validate_topology(topology: Sequence[int]) -> Tuple[int, ...]:
    """Return the topology as a tuple of positive ints.

    Raises:
        ValueError: If the topology is empty or contains a non-positive width
    """
    topology = tuple(int(width) for width in topology)
    if not topology:
        raise ValueError("Topology must contain at least one hidden layer")
    if any(width < 1 for width in topology):
        raise ValueError(f"Hidden-layer widths must be positive, got {topology}")
    return topology
