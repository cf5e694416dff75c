"""
Min/max normalization of dataset columns and its inverse.
"""

import logging
from typing import Dict, Iterable, Tuple, Union

import numpy as np
import pandas as pd

from ..config.constants import TARGET_COLUMN, DEFAULT_DEGENERATE_POLICY
from ..utils.exceptions import DegenerateColumnError

logger = logging.getLogger(__name__)

DEGENERATE_POLICIES = ("raise", "zero")


class NormalizationParameters:
    """
    Per-column (min, max) pairs captured once from the full dataset.

    Instances are read-only; the same parameters are used for the forward
    normalization of every column and for denormalizing predictions of the
    target column.
    """

    __slots__ = ('_bounds',)

    def __init__(self, bounds: Dict[str, Tuple[float, float]]):
        checked = {}
        for column, (low, high) in bounds.items():
            low, high = float(low), float(high)
            if high < low:
                raise ValueError(f"Column '{column}' has max < min ({high} < {low})")
            checked[column] = (low, high)
        object.__setattr__(self, '_bounds', checked)

    def __setattr__(self, name, value):
        raise AttributeError("NormalizationParameters is immutable")

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> 'NormalizationParameters':
        """
        Capture column-wise min and max of every column in `df`.
        """
        mins = df.min()
        maxs = df.max()
        return cls({column: (mins[column], maxs[column]) for column in df.columns})

    @property
    def columns(self):
        return list(self._bounds)

    def bounds(self, column: str) -> Tuple[float, float]:
        try:
            return self._bounds[column]
        except KeyError:
            raise KeyError(f"No normalization parameters for column '{column}'")

    def is_degenerate(self, column: str) -> bool:
        low, high = self.bounds(column)
        return high == low

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {column: {'min': low, 'max': high}
                for column, (low, high) in self._bounds.items()}

    def __contains__(self, column):
        return column in self._bounds

    def __eq__(self, other):
        if not isinstance(other, NormalizationParameters):
            return NotImplemented
        return self._bounds == other._bounds

    def __repr__(self):
        return f"<NormalizationParameters columns={self.columns}>"


def normalize(df: pd.DataFrame,
              params: NormalizationParameters,
              degenerate: str = DEFAULT_DEGENERATE_POLICY) -> pd.DataFrame:
    """
    Rescale every column of `df` to [0, 1] with (x - min) / (max - min).

    Args:
        df: Frame whose columns all appear in `params`
        params: Parameters captured from the full dataset
        degenerate: What to do with a column where max == min; "raise"
            raises DegenerateColumnError, "zero" maps the column to 0

    Returns:
        A new normalized DataFrame with the same index and column order

    Raises:
        DegenerateColumnError: If a column is constant and policy is "raise"
        ValueError: If the policy is unknown
    """
    if degenerate not in DEGENERATE_POLICIES:
        raise ValueError(
            f"Unknown degenerate policy '{degenerate}', expected one of {DEGENERATE_POLICIES}"
        )

    normalized = {}
    for column in df.columns:
        low, high = params.bounds(column)
        if high == low:
            if degenerate == "raise":
                raise DegenerateColumnError(column, low)
            logger.warning(f"Column '{column}' is constant ({low}); mapping to 0")
            normalized[column] = pd.Series(0.0, index=df.index)
        else:
            normalized[column] = (df[column].astype(float) - low) / (high - low)

    return pd.DataFrame(normalized, index=df.index, columns=df.columns)


def denormalize(values: Union[Iterable[float], np.ndarray, pd.Series],
                params: NormalizationParameters,
                column: str = TARGET_COLUMN) -> np.ndarray:
    """
    Map normalized values back to the original scale of `column`.

    Uses v * (max - min) + min with the parameters captured before
    normalization, never bounds recomputed from a subset.
    """
    low, high = params.bounds(column)
    values = np.asarray(values, dtype=float)
    return values * (high - low) + low
