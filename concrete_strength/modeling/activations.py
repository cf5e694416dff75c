"""Activation functions for hidden network units."""
import logging
from typing import Callable, Dict, Optional

import numpy as np

logger = logging.getLogger(__name__)

# Step for the central difference used when no derivative is supplied.
FINITE_DIFFERENCE_STEP = 1e-6


class Activation:
    """Named activation function paired with its derivative.

    Both callables must accept and return numpy arrays elementwise.
    """

    __slots__ = ('name', 'function', 'derivative')

    def __init__(self, name: str,
                 function: Callable[[np.ndarray], np.ndarray],
                 derivative: Optional[Callable[[np.ndarray], np.ndarray]] = None):
        if not callable(function):
            raise TypeError(f"Activation '{name}' function must be callable")
        if derivative is None:
            logger.debug(f"No derivative supplied for '{name}', using finite differences")
            derivative = _finite_difference(function)
        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'function', function)
        object.__setattr__(self, 'derivative', derivative)

    def __setattr__(self, name, value):
        raise AttributeError("Activation is immutable")

    def __call__(self, x):
        return self.function(x)

    def __repr__(self):
        return f"<Activation {self.name}>"


def _finite_difference(function):
    h = FINITE_DIFFERENCE_STEP

    def derivative(x):
        return (function(x + h) - function(x - h)) / (2 * h)

    return derivative


def _logistic(x):
    return 1.0 / (1.0 + np.exp(-x))


def _logistic_derivative(x):
    s = _logistic(x)
    return s * (1.0 - s)


def _softplus(x):
    # log(1 + e^x) without overflow for large x
    return np.logaddexp(0.0, x)


def _tanh_derivative(x):
    return 1.0 - np.tanh(x) ** 2


logistic = Activation('logistic', _logistic, _logistic_derivative)
softplus = Activation('softplus', _softplus, _logistic)
tanh = Activation('tanh', np.tanh, _tanh_derivative)

ACTIVATIONS: Dict[str, Activation] = {
    'logistic': logistic,
    'softplus': softplus,
    'tanh': tanh,
}


def get_activation(activation) -> Activation:
    """Resolve a name, Activation or plain callable to an Activation.

    Args:
        activation: Registered name (e.g. "logistic"), an Activation, or a
            pure numeric callable

    Returns:
        Activation instance

    Raises:
        ValueError: If a name is not registered
    """
    if isinstance(activation, Activation):
        return activation
    if isinstance(activation, str):
        try:
            return ACTIVATIONS[activation]
        except KeyError:
            raise ValueError(
                f"Unknown activation '{activation}', expected one of {sorted(ACTIVATIONS)}"
            )
    if callable(activation):
        name = getattr(activation, '__name__', 'custom')
        return Activation(name, activation)
    raise TypeError(f"Cannot build an activation from {activation!r}")
