"""
Runtime settings assembled from defaults, a .env file and the environment.
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv

from .constants import (
    DEFAULT_DATA_PATH, DEFAULT_OUTPUT_DIR, DEFAULT_TRAIN_FRACTION,
    DEFAULT_RANDOM_STATE, DEFAULT_THRESHOLD, DEFAULT_STEPMAX,
    DEFAULT_TRAINER, DEFAULT_DEGENERATE_POLICY, DEFAULT_LOG_LEVEL,
    ENV_PREFIX, LOG_LEVELS, TRAINERS, DEGENERATE_POLICIES
)

logger = logging.getLogger(__name__)


class Settings:
    """
    Values that control a pipeline run.
    """

    def __init__(self,
                 data_path: str = DEFAULT_DATA_PATH,
                 output_dir: str = DEFAULT_OUTPUT_DIR,
                 train_fraction: float = DEFAULT_TRAIN_FRACTION,
                 train_size: Optional[int] = None,
                 random_state: int = DEFAULT_RANDOM_STATE,
                 threshold: float = DEFAULT_THRESHOLD,
                 stepmax: int = DEFAULT_STEPMAX,
                 trainer: str = DEFAULT_TRAINER,
                 degenerate_policy: str = DEFAULT_DEGENERATE_POLICY,
                 log_level: str = DEFAULT_LOG_LEVEL):
        self.data_path = data_path
        self.output_dir = output_dir
        self.train_fraction = train_fraction
        self.train_size = train_size
        self.random_state = random_state
        self.threshold = threshold
        self.stepmax = stepmax
        self.trainer = trainer
        self.degenerate_policy = degenerate_policy
        self.log_level = log_level

    def __repr__(self):
        return (f"Settings(data_path={self.data_path!r}, "
                f"train_fraction={self.train_fraction}, "
                f"train_size={self.train_size}, "
                f"random_state={self.random_state}, "
                f"trainer={self.trainer!r})")


def _env(name: str) -> Optional[str]:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    if value is not None and value.strip() == "":
        return None
    return value


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """
    Build settings from defaults overridden by CONCRETE_* environment variables.

    Args:
        dotenv_path: Optional path to a .env file (defaults to searching
            the working directory)

    Returns:
        Populated Settings object

    Raises:
        ValueError: If an environment variable cannot be parsed or is not
            one of the accepted choices
    """
    # Load environment variables from .env file if it exists
    load_dotenv(dotenv_path)

    settings = Settings()

    overrides = {
        'data_path': (_env("DATA_PATH"), str, None),
        'output_dir': (_env("OUTPUT_DIR"), str, None),
        'train_fraction': (_env("TRAIN_FRACTION"), float, None),
        'train_size': (_env("TRAIN_SIZE"), int, None),
        'random_state': (_env("RANDOM_STATE"), int, None),
        'threshold': (_env("THRESHOLD"), float, None),
        'stepmax': (_env("STEPMAX"), int, None),
        'trainer': (_env("TRAINER"), str.lower, TRAINERS),
        'degenerate_policy': (_env("DEGENERATE_POLICY"), str.lower, DEGENERATE_POLICIES),
        'log_level': (_env("LOG_LEVEL"), str.upper, LOG_LEVELS),
    }

    for attr, (raw, cast, choices) in overrides.items():
        if raw is None:
            continue
        name = f"{ENV_PREFIX}{attr.upper()}"
        try:
            value = cast(raw)
        except ValueError:
            raise ValueError(f"Invalid value for {name}: {raw!r}")
        if choices is not None and value not in choices:
            raise ValueError(f"Invalid value for {name}: {raw!r}, expected one of {choices}")
        setattr(settings, attr, value)
        logger.debug(f"Setting {attr} overridden from environment: {raw}")

    return settings
