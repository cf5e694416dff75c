"""
Constants and default configuration values for the concrete strength application.
"""

import os

# Directory Paths
DEFAULT_DATA_DIR = "data"
DEFAULT_DATA_FILENAME = "concrete.csv"
DEFAULT_DATA_PATH = os.path.join(DEFAULT_DATA_DIR, DEFAULT_DATA_FILENAME)
DEFAULT_OUTPUT_DIR = os.path.join(DEFAULT_DATA_DIR, "output")

# Dataset columns
FEATURE_COLUMNS = [
    'cement', 'slag', 'ash', 'water',
    'superplastic', 'coarseagg', 'fineagg', 'age'
]
TARGET_COLUMN = 'strength'
ALL_COLUMNS = FEATURE_COLUMNS + [TARGET_COLUMN]

# Split Parameters
DEFAULT_TRAIN_FRACTION = 0.75
REFERENCE_TRAIN_ROWS = 773  # first 773 of 1030 rows, as in the reference analysis

# Network Parameters
DEFAULT_TOPOLOGY = (1,)
DEFAULT_ACTIVATION = "logistic"
DEFAULT_RANDOM_STATE = 12345
DEFAULT_THRESHOLD = 0.01
DEFAULT_STEPMAX = 100000
DEFAULT_TRAINER = "neuralnet"
TRAINERS = ["neuralnet", "mlp", "linear"]

# Degenerate column handling: "raise" or "zero"
DEFAULT_DEGENERATE_POLICY = "raise"
DEGENERATE_POLICIES = ["raise", "zero"]

# Report files
RESULTS_FILENAME = "model_results.csv"
BEST_PREDICTIONS_FILENAME = "best_model_predictions.csv"
SUMMARY_FILENAME = "summary.json"
REPORT_PATTERNS = [RESULTS_FILENAME, BEST_PREDICTIONS_FILENAME, SUMMARY_FILENAME]

# Environment variable prefix for overrides
ENV_PREFIX = "CONCRETE_"

# Logging
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
