"""
Feedforward neural network for regression, trained on the sum of squared
errors with resilient backpropagation.

Input (R^n) => Hidden (R^h1) => ... => Hidden (R^hk) => Output (R)

Hidden units apply a configurable activation; the output unit computes the
identity. Each layer's weight matrix carries its bias in row 0, so layer `l`
maps [1, a_{l-1}] to the pre-activations z_l.
"""
import logging
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd

from ..config.constants import (
    DEFAULT_TOPOLOGY, DEFAULT_ACTIVATION, DEFAULT_RANDOM_STATE,
    DEFAULT_THRESHOLD, DEFAULT_STEPMAX
)
from .activations import Activation, get_activation
from .base_trainer import BaseTrainer, TrainedModel, validate_topology

ALGORITHMS = ("rprop+", "backprop")

# RPROP step-size adaptation factors and limits.
RPROP_INCREASE = 1.2
RPROP_DECREASE = 0.5
RPROP_STEP_MIN = 1e-10
RPROP_STEP_MAX = 0.1
RPROP_STEP_INIT = 0.1


def _with_bias(A: np.ndarray) -> np.ndarray:
    return np.hstack([np.ones((A.shape[0], 1)), A])


def _forward(weights: Sequence[np.ndarray], activation: Activation,
             X: np.ndarray) -> Tuple[List[np.ndarray], List[np.ndarray]]:
    """
    Run the forward pass, keeping what backpropagation needs.

    Returns:
        (inputs, pre_activations): inputs[l] is the biased input to layer l,
        pre_activations[l] is z_l. The last entry of pre_activations is the
        network output.
    """
    inputs = []
    pre_activations = []
    A = X
    last = len(weights) - 1
    for l, W in enumerate(weights):
        A_b = _with_bias(A)
        Z = A_b @ W
        inputs.append(A_b)
        pre_activations.append(Z)
        A = Z if l == last else activation.function(Z)
    return inputs, pre_activations


def _sse_and_gradient(weights: Sequence[np.ndarray], activation: Activation,
                      X: np.ndarray, y: np.ndarray) -> Tuple[float, List[np.ndarray]]:
    """
    Return 0.5 * sum((output - y)^2) and its gradient w.r.t. every weight matrix.
    """
    inputs, pre_activations = _forward(weights, activation, X)
    diff = pre_activations[-1] - y.reshape(-1, 1)
    error = 0.5 * float(np.sum(diff ** 2))

    gradients = [None] * len(weights)
    delta = diff
    for l in range(len(weights) - 1, -1, -1):
        gradients[l] = inputs[l].T @ delta
        if l > 0:
            # Drop the bias row; it has no upstream unit.
            delta = (delta @ weights[l][1:].T) * activation.derivative(pre_activations[l - 1])
    return error, gradients


class NeuralNetwork(TrainedModel):
    """
    Trained feedforward network. Weights are frozen read-only arrays.

    params: weights[l], shape=(n_{l-1} + 1, n_l), row 0 holding biases.
    """

    def __init__(self, weights: Sequence[np.ndarray], activation: Activation,
                 converged: bool = True, iterations: int = 0,
                 error: float = float('nan')):
        frozen = []
        for W in weights:
            W = np.array(W, dtype=float, copy=True)
            W.flags.writeable = False
            frozen.append(W)
        self.weights = tuple(frozen)
        self.activation = activation
        self.converged = converged
        self.iterations = iterations
        self.error = error

    def __repr__(self):
        return ("<NeuralNetwork ninput=%d, topology=%s, activation=%s>"
                % (self.n_inputs, list(self.topology), self.activation.name))

    @property
    def n_inputs(self) -> int:
        return self.weights[0].shape[0] - 1

    @property
    def topology(self) -> Tuple[int, ...]:
        return tuple(W.shape[1] for W in self.weights[:-1])

    def predict(self, X) -> np.ndarray:
        """
        Parameters
        ----------
        X: ndarray or DataFrame, shape=(nsamples, ninputs)
            Each row of `X` is an observation.

        Returns
        -------
        out: ndarray, shape=(nsamples,)
        """
        X = np.asarray(X.to_numpy() if isinstance(X, pd.DataFrame) else X, dtype=float)
        if X.ndim != 2 or X.shape[1] != self.n_inputs:
            raise ValueError(
                f"Expected input with {self.n_inputs} columns, got shape {X.shape}"
            )
        _, pre_activations = _forward(self.weights, self.activation, X)
        return pre_activations[-1].reshape(-1)


def initialize_weights(n_inputs: int, topology: Sequence[int],
                       rng: np.random.Generator) -> List[np.ndarray]:
    """
    Draw every weight, biases included, from a standard normal.
    """
    sizes = [n_inputs] + list(topology) + [1]
    return [rng.standard_normal((n_in + 1, n_out))
            for n_in, n_out in zip(sizes[:-1], sizes[1:])]


class NeuralNetworkTrainer(BaseTrainer):
    """Fits a NeuralNetwork by minimizing the sum of squared errors.

    Training stops once the largest absolute partial derivative of the error
    drops below `threshold`, or after `stepmax` iterations. Stopping on the
    iteration cap logs a warning and still returns the partially-trained
    network.
    """

    name = "neuralnet"

    def __init__(self, threshold: float = DEFAULT_THRESHOLD,
                 stepmax: int = DEFAULT_STEPMAX,
                 algorithm: str = "rprop+",
                 learning_rate: float = 0.001,
                 log_every: int = 10000,
                 log_level=logging.INFO):
        """
        Args:
            threshold: Convergence threshold on the largest absolute gradient
            stepmax: Maximum number of training iterations
            algorithm: "rprop+" (resilient backpropagation with weight
                backtracking) or "backprop" (plain gradient descent)
            learning_rate: Step size for "backprop"
            log_every: Iterations between DEBUG progress messages
            log_level: Logging level
        """
        super().__init__(log_level)
        if algorithm not in ALGORITHMS:
            raise ValueError(f"Unknown algorithm '{algorithm}', expected one of {ALGORITHMS}")
        if threshold <= 0:
            raise ValueError("threshold must be positive")
        if stepmax < 1:
            raise ValueError("stepmax must be at least 1")
        self.threshold = threshold
        self.stepmax = stepmax
        self.algorithm = algorithm
        self.learning_rate = learning_rate
        self.log_every = log_every

    def train(self, X, y,
              topology: Sequence[int] = DEFAULT_TOPOLOGY,
              activation=DEFAULT_ACTIVATION,
              seed: int = DEFAULT_RANDOM_STATE) -> NeuralNetwork:
        X, y = self._validate_inputs(X, y)
        topology = validate_topology(topology)
        activation = get_activation(activation)

        rng = np.random.default_rng(seed)
        weights = initialize_weights(X.shape[1], topology, rng)

        self.logger.info(
            f"Training network topology={list(topology)} activation={activation.name} "
            f"on {X.shape[0]} rows ({self.algorithm}, seed={seed})"
        )

        if self.algorithm == "rprop+":
            weights, error, iterations, converged = self._rprop(weights, activation, X, y)
        else:
            weights, error, iterations, converged = self._backprop(weights, activation, X, y)

        if converged:
            self.logger.info(f"Converged after {iterations} iterations, error={error:.5f}")
        else:
            self.logger.warning(
                f"Did not converge within stepmax={self.stepmax} iterations "
                f"(error={error:.5f}); using the partially-trained network"
            )

        return NeuralNetwork(weights, activation, converged=converged,
                             iterations=iterations, error=error)

    def _converged(self, gradients) -> bool:
        return max(float(np.max(np.abs(G))) for G in gradients) < self.threshold

    def _log_progress(self, iteration, error):
        if self.log_every and iteration % self.log_every == 0:
            self.logger.debug(f"ITER: {iteration}, SSE: {error:.5f}")

    def _rprop(self, weights, activation, X, y):
        steps = [np.full_like(W, RPROP_STEP_INIT) for W in weights]
        previous = [np.zeros_like(W) for W in weights]
        last_change = [np.zeros_like(W) for W in weights]

        for iteration in range(self.stepmax):
            error, gradients = _sse_and_gradient(weights, activation, X, y)
            if not np.isfinite(error):
                raise FloatingPointError(f"Training error became {error} at iteration {iteration}")
            if self._converged(gradients):
                return weights, error, iteration, True
            self._log_progress(iteration, error)

            for l, G in enumerate(gradients):
                product = G * previous[l]
                increase = product > 0
                decrease = product < 0
                keep = ~decrease

                steps[l][increase] = np.minimum(steps[l][increase] * RPROP_INCREASE, RPROP_STEP_MAX)
                steps[l][decrease] = np.maximum(steps[l][decrease] * RPROP_DECREASE, RPROP_STEP_MIN)

                change = np.zeros_like(G)
                change[keep] = -np.sign(G[keep]) * steps[l][keep]
                # Sign flip: undo the previous move on those weights.
                change[decrease] = -last_change[l][decrease]

                weights[l] = weights[l] + change
                last_change[l] = change
                previous[l] = np.where(decrease, 0.0, G)

        error, gradients = _sse_and_gradient(weights, activation, X, y)
        return weights, error, self.stepmax, self._converged(gradients)

    def _backprop(self, weights, activation, X, y):
        for iteration in range(self.stepmax):
            error, gradients = _sse_and_gradient(weights, activation, X, y)
            if not np.isfinite(error):
                raise FloatingPointError(f"Training error became {error} at iteration {iteration}")
            if self._converged(gradients):
                return weights, error, iteration, True
            self._log_progress(iteration, error)
            weights = [W - self.learning_rate * G for W, G in zip(weights, gradients)]

        error, gradients = _sse_and_gradient(weights, activation, X, y)
        return weights, error, self.stepmax, self._converged(gradients)
