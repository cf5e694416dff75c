"""
Data processor for preparing concrete strength model inputs.
"""

import os
import logging
from typing import Optional, List, NamedTuple

import numpy as np
import pandas as pd

from ..config.constants import (
    DEFAULT_DATA_PATH, DEFAULT_TRAIN_FRACTION, DEFAULT_DEGENERATE_POLICY,
    TARGET_COLUMN, ALL_COLUMNS
)
from ..utils.exceptions import DataValidationError
from .normalization import NormalizationParameters, normalize

# Configure module logger
logger = logging.getLogger(__name__)


class Split(NamedTuple):
    """Order-preserving train/test partition of a dataset."""
    train: pd.DataFrame
    test: pd.DataFrame


class PreparedData(NamedTuple):
    """Everything the modelling step needs from data preparation."""
    raw: pd.DataFrame
    params: NormalizationParameters
    normalized: pd.DataFrame
    split: Split

    @property
    def X_train(self) -> pd.DataFrame:
        return self.split.train[self.feature_columns]

    @property
    def y_train(self) -> pd.Series:
        return self.split.train[TARGET_COLUMN]

    @property
    def X_test(self) -> pd.DataFrame:
        return self.split.test[self.feature_columns]

    @property
    def y_test(self) -> pd.Series:
        return self.split.test[TARGET_COLUMN]

    @property
    def feature_columns(self) -> List[str]:
        return [col for col in self.normalized.columns if col != TARGET_COLUMN]


class DataProcessor:
    """
    Loads, validates, normalizes and splits the concrete mixture dataset.
    """

    def __init__(self,
                 data_path: Optional[str] = None,
                 columns: Optional[List[str]] = None,
                 degenerate_policy: str = DEFAULT_DEGENERATE_POLICY):
        """
        Initialize the DataProcessor.

        Args:
            data_path: Path to the CSV file holding the dataset
            columns: Required columns, target last (defaults to the eight
                mixture features plus strength)
            degenerate_policy: Policy for constant columns during normalization
        """
        self.data_path = data_path or DEFAULT_DATA_PATH
        self.columns = list(columns or ALL_COLUMNS)
        self.degenerate_policy = degenerate_policy

    def _validate_data(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Check that every required column is present, numeric, complete and finite.

        Args:
            df: Raw DataFrame read from disk

        Returns:
            DataFrame restricted to the required columns in canonical order

        Raises:
            DataValidationError: If the data format is invalid
        """
        if not isinstance(df, pd.DataFrame):
            raise DataValidationError("Input data must be a pandas DataFrame")

        if df.empty:
            raise DataValidationError("Input data has no rows")

        missing_cols = [col for col in self.columns if col not in df.columns]
        if missing_cols:
            raise DataValidationError(f"Input data is missing required columns: {missing_cols}")

        df = df[self.columns]

        non_numeric = [col for col in self.columns
                       if not pd.api.types.is_numeric_dtype(df[col])]
        if non_numeric:
            raise DataValidationError(f"Columns contain non-numeric values: {non_numeric}")

        null_counts = df.isna().sum()
        null_counts = null_counts[null_counts > 0]
        if not null_counts.empty:
            first_bad_row = int(df.isna().any(axis=1).to_numpy().nonzero()[0][0])
            raise DataValidationError(
                f"Missing values in columns {null_counts.to_dict()} "
                f"(first at row {first_bad_row})"
            )

        infinite = ~np.isfinite(df.to_numpy(dtype=float))
        if infinite.any():
            bad_cols = [col for col, bad in zip(self.columns, infinite.any(axis=0)) if bad]
            first_bad_row = int(infinite.any(axis=1).nonzero()[0][0])
            raise DataValidationError(
                f"Infinite values in columns {bad_cols} (first at row {first_bad_row})"
            )

        return df.reset_index(drop=True)

    def load_data(self, path: Optional[str] = None) -> pd.DataFrame:
        """
        Read and validate the dataset.

        Args:
            path: CSV path (defaults to the processor's data_path)

        Returns:
            Validated DataFrame

        Raises:
            FileNotFoundError: If the file does not exist
            DataValidationError: If the file content is invalid
        """
        path = path or self.data_path

        if not os.path.exists(path):
            logger.error(f"Data file does not exist: {path}")
            raise FileNotFoundError(f"Data file not found at: {path}")

        logger.info(f"Reading data from {path}")
        try:
            df = pd.read_csv(path)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            logger.error(f"Could not parse {path}: {e}")
            raise DataValidationError(f"Could not parse {path}: {e}") from e

        df = self._validate_data(df)
        logger.info(f"Loaded dataset shape: {df.shape}")
        return df

    def describe(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Summary statistics per column (min, quartiles, mean, max).

        Args:
            df: Dataset to summarize

        Returns:
            DataFrame indexed by statistic with one column per dataset column
        """
        summary = df.describe().loc[['min', '25%', '50%', 'mean', '75%', 'max']]
        logger.info(f"Dataset summary:\n{summary.round(3).to_string()}")
        return summary

    def split(self,
              df: pd.DataFrame,
              train_fraction: float = DEFAULT_TRAIN_FRACTION,
              train_size: Optional[int] = None) -> Split:
        """
        Split rows positionally into a training prefix and a testing suffix.

        No shuffling is performed, so the input must already be in an order
        with no residual structure.

        Args:
            df: Dataset to split
            train_fraction: Fraction of rows used for training; the first
                floor(N * train_fraction) rows are taken
            train_size: Explicit number of training rows, overrides
                `train_fraction`

        Returns:
            Split of (train, test) copies

        Raises:
            ValueError: If the fraction or size would leave either side empty
        """
        n_rows = len(df)

        if train_size is None:
            if not 0 < train_fraction < 1:
                raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")
            split_idx = int(n_rows * train_fraction)
        else:
            split_idx = int(train_size)

        if not 1 <= split_idx <= n_rows - 1:
            raise ValueError(
                f"Split of {n_rows} rows at {split_idx} leaves an empty train or test set"
            )

        logger.warning(
            "Train/test split is positional; assuming the input rows are already shuffled"
        )

        train_df = df.iloc[:split_idx].copy()
        test_df = df.iloc[split_idx:].copy()

        logger.info(f"Data split: {len(train_df)} training samples, {len(test_df)} test samples")

        return Split(train_df, test_df)

    def prepare_data(self,
                     path: Optional[str] = None,
                     train_fraction: float = DEFAULT_TRAIN_FRACTION,
                     train_size: Optional[int] = None) -> PreparedData:
        """
        Load the dataset, normalize every column and split it.

        Normalization parameters are captured once over the full dataset,
        before splitting.

        Args:
            path: CSV path (defaults to the processor's data_path)
            train_fraction: Fraction of rows used for training
            train_size: Explicit number of training rows

        Returns:
            PreparedData bundle
        """
        logger.info("Starting data preparation...")

        raw = self.load_data(path)
        self.describe(raw)

        params = NormalizationParameters.from_frame(raw)
        normalized = normalize(raw, params, degenerate=self.degenerate_policy)

        split = self.split(normalized, train_fraction=train_fraction, train_size=train_size)

        logger.info("Data preparation complete!")
        return PreparedData(raw=raw, params=params, normalized=normalized, split=split)
