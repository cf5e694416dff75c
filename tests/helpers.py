"""
Shared fixtures for the test modules.
"""

import numpy as np
import pandas as pd

from concrete_strength.config.constants import FEATURE_COLUMNS, TARGET_COLUMN


def make_concrete_frame(n_rows=40, seed=0):
    """Synthetic dataset with the real column names and a smooth target."""
    rng = np.random.default_rng(seed)
    data = {column: rng.uniform(10.0, 500.0, n_rows) for column in FEATURE_COLUMNS}
    data['age'] = rng.integers(1, 365, n_rows).astype(float)
    data[TARGET_COLUMN] = (
        0.1 * data['cement'] - 0.05 * data['water'] + 5.0 * np.log(data['age'])
        + rng.normal(0.0, 1.0, n_rows)
    )
    return pd.DataFrame(data)
