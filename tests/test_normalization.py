"""
Unit tests for the normalization module.
"""

import unittest

import numpy as np
import pandas as pd

from concrete_strength.data_preparation.normalization import (
    NormalizationParameters, normalize, denormalize
)
from concrete_strength.utils.exceptions import DegenerateColumnError
from tests.helpers import make_concrete_frame


class TestNormalizationParameters(unittest.TestCase):
    """Test cases for NormalizationParameters."""

    def test_from_frame_captures_min_and_max(self):
        """Parameters hold the column-wise min and max."""
        df = pd.DataFrame({'a': [3.0, 1.0, 2.0], 'strength': [10.0, 30.0, 20.0]})
        params = NormalizationParameters.from_frame(df)

        self.assertEqual(params.bounds('a'), (1.0, 3.0))
        self.assertEqual(params.bounds('strength'), (10.0, 30.0))
        self.assertEqual(params.columns, ['a', 'strength'])

    def test_immutable(self):
        """Parameters cannot be reassigned after construction."""
        params = NormalizationParameters({'a': (0.0, 1.0)})
        with self.assertRaises(AttributeError):
            params.extra = 1

    def test_rejects_max_below_min(self):
        with self.assertRaises(ValueError):
            NormalizationParameters({'a': (2.0, 1.0)})

    def test_unknown_column(self):
        params = NormalizationParameters({'a': (0.0, 1.0)})
        with self.assertRaises(KeyError):
            params.bounds('b')

    def test_to_dict(self):
        params = NormalizationParameters({'a': (0, 4)})
        self.assertEqual(params.to_dict(), {'a': {'min': 0.0, 'max': 4.0}})


class TestNormalize(unittest.TestCase):
    """Test cases for normalize and denormalize."""

    def setUp(self):
        """Set up test fixtures."""
        self.df = make_concrete_frame(n_rows=50)
        self.params = NormalizationParameters.from_frame(self.df)

    def test_range_is_unit_interval(self):
        """Every normalized column spans exactly [0, 1]."""
        normalized = normalize(self.df, self.params)

        np.testing.assert_allclose(normalized.min().to_numpy(), 0.0)
        np.testing.assert_allclose(normalized.max().to_numpy(), 1.0)

    def test_returns_new_frame(self):
        """The input frame is left untouched."""
        original = self.df.copy()
        normalized = normalize(self.df, self.params)

        self.assertIsNot(normalized, self.df)
        pd.testing.assert_frame_equal(self.df, original)
        self.assertEqual(list(normalized.columns), list(self.df.columns))

    def test_round_trip(self):
        """Denormalizing with the captured parameters restores every column."""
        normalized = normalize(self.df, self.params)

        for column in self.df.columns:
            restored = denormalize(normalized[column], self.params, column)
            np.testing.assert_allclose(restored, self.df[column].to_numpy(), rtol=1e-10, atol=1e-9)

    def test_denormalize_uses_captured_bounds(self):
        """A subset is denormalized with the full-dataset bounds."""
        normalized = normalize(self.df, self.params)
        subset = normalized['strength'].iloc[10:20]

        restored = denormalize(subset, self.params)

        np.testing.assert_allclose(restored, self.df['strength'].iloc[10:20].to_numpy())

    def test_denormalize_formula(self):
        params = NormalizationParameters({'strength': (2.0, 82.0)})
        np.testing.assert_allclose(denormalize([0.0, 0.5, 1.0], params), [2.0, 42.0, 82.0])

    def test_degenerate_column_raises(self):
        """A constant column is rejected by default instead of producing NaN."""
        df = pd.DataFrame({'a': [1.0, 2.0], 'b': [5.0, 5.0]})
        params = NormalizationParameters.from_frame(df)

        with self.assertRaises(DegenerateColumnError) as ctx:
            normalize(df, params)
        self.assertEqual(ctx.exception.column, 'b')

    def test_degenerate_column_zero_policy(self):
        """With the zero policy a constant column maps to all zeros."""
        df = pd.DataFrame({'a': [1.0, 2.0], 'b': [5.0, 5.0]})
        params = NormalizationParameters.from_frame(df)

        normalized = normalize(df, params, degenerate="zero")

        self.assertEqual(normalized['b'].tolist(), [0.0, 0.0])
        self.assertFalse(normalized.isna().any().any())

    def test_unknown_policy(self):
        with self.assertRaises(ValueError):
            normalize(self.df, self.params, degenerate="nan")


if __name__ == '__main__':
    unittest.main()
