"""Data loading, validation, normalization and splitting."""
from .data_processor import DataProcessor, PreparedData, Split
from .normalization import NormalizationParameters, normalize, denormalize

__all__ = [
    'DataProcessor',
    'PreparedData',
    'Split',
    'NormalizationParameters',
    'normalize',
    'denormalize'
]
