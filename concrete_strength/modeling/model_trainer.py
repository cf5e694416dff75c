"""
Trainer module: fits each network configuration, evaluates it on the held-out
rows and reports the best one.
"""

import logging
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

import pandas as pd
from tqdm import tqdm

from ..config.constants import (
    DEFAULT_OUTPUT_DIR, DEFAULT_RANDOM_STATE, DEFAULT_THRESHOLD, DEFAULT_STEPMAX,
    DEFAULT_TRAINER, TARGET_COLUMN, RESULTS_FILENAME, BEST_PREDICTIONS_FILENAME,
    SUMMARY_FILENAME, REPORT_PATTERNS
)
from ..data_preparation.data_processor import PreparedData
from ..utils.file_utils import clean_old_files, save_frame, save_json
from .activations import get_activation
from .base_trainer import BaseTrainer, TrainedModel
from .evaluator import evaluate, comparison_table
from .neural_network import NeuralNetworkTrainer
from .sklearn_trainers import MLPRegressorTrainer, LinearRegressionTrainer

# Configure module logger
logger = logging.getLogger(__name__)


class ModelConfig(NamedTuple):
    """Network configuration to train and evaluate."""
    name: str
    topology: Tuple[int, ...] = (1,)
    activation: str = "logistic"


DEFAULT_CONFIGS = [
    ModelConfig("single_hidden_node", (1,), "logistic"),
    ModelConfig("five_hidden_nodes", (5,), "logistic"),
    ModelConfig("two_layers_softplus", (5, 5), "softplus"),
]

# MLPRegressor has no softplus; relu is its closest built-in.
SKLEARN_CONFIGS = [
    ModelConfig("single_hidden_node", (1,), "logistic"),
    ModelConfig("five_hidden_nodes", (5,), "logistic"),
    ModelConfig("two_layers_relu", (5, 5), "relu"),
]


class ExperimentResult(NamedTuple):
    """Everything produced by one ModelTrainer run."""
    results: pd.DataFrame
    best_model_name: str
    best_predictions: pd.DataFrame
    models: Dict[str, TrainedModel]
    output_paths: Dict[str, str]


def build_trainer(name: str = DEFAULT_TRAINER,
                  threshold: float = DEFAULT_THRESHOLD,
                  stepmax: int = DEFAULT_STEPMAX,
                  log_level=logging.INFO) -> BaseTrainer:
    """
    Create a trainer by name.

    Args:
        name: "neuralnet", "mlp" or "linear"
        threshold: Convergence threshold for the numpy network
        stepmax: Iteration cap for network trainers

    Returns:
        Trainer instance

    Raises:
        ValueError: If the name is unknown
    """
    if name == NeuralNetworkTrainer.name:
        return NeuralNetworkTrainer(threshold=threshold, stepmax=stepmax, log_level=log_level)
    if name == MLPRegressorTrainer.name:
        return MLPRegressorTrainer(max_iter=stepmax, log_level=log_level)
    if name == LinearRegressionTrainer.name:
        return LinearRegressionTrainer(log_level=log_level)
    raise ValueError(f"Unknown trainer '{name}', expected neuralnet, mlp or linear")


def default_configs(trainer: BaseTrainer) -> List[ModelConfig]:
    """The three reference configurations suited to `trainer`."""
    if isinstance(trainer, MLPRegressorTrainer):
        return list(SKLEARN_CONFIGS)
    return list(DEFAULT_CONFIGS)


class ModelTrainer:
    """
    Trains network configurations in order and selects the best by
    test-set correlation.
    """

    def __init__(self,
                 trainer: Optional[BaseTrainer] = None,
                 random_state: int = DEFAULT_RANDOM_STATE,
                 output_dir: str = DEFAULT_OUTPUT_DIR):
        """
        Initialize the ModelTrainer.

        Args:
            trainer: Trainer used for every configuration (defaults to the
                numpy network trainer)
            random_state: Seed passed to the trainer for every configuration
            output_dir: Directory to save report files
        """
        self.trainer = trainer or NeuralNetworkTrainer()
        self.random_state = random_state
        self.output_dir = output_dir
        self.best_model = None
        self.best_model_name = None

    def _train_config(self, prepared: PreparedData, config: ModelConfig) -> TrainedModel:
        activation = config.activation
        # Registered names stay names so sklearn trainers can map them.
        if not isinstance(activation, str):
            activation = get_activation(activation)
        return self.trainer.train(
            prepared.X_train, prepared.y_train,
            topology=config.topology,
            activation=activation,
            seed=self.random_state
        )

    def _evaluate_configs(self, prepared: PreparedData,
                          configs: Sequence[ModelConfig]) -> Tuple[pd.DataFrame, Dict[str, TrainedModel], Dict[str, object]]:
        """
        Train and evaluate every configuration.

        Returns:
            Tuple containing:
                - DataFrame with one row of metrics per configuration
                - Dictionary of configuration name to trained model
                - Dictionary of configuration name to EvaluationResult
        """
        results = []
        models = {}
        evaluations = {}

        for config in tqdm(configs, desc="Training networks"):
            logger.info(f"Training {config.name}...")
            model = self._train_config(prepared, config)
            evaluation = evaluate(model, prepared.X_test, prepared.y_test, prepared.params)

            models[config.name] = model
            evaluations[config.name] = evaluation

            activation = config.activation if isinstance(config.activation, str) \
                else get_activation(config.activation).name
            results.append({
                'model': config.name,
                'topology': "-".join(str(width) for width in config.topology),
                'activation': activation,
                'correlation': evaluation.correlation,
                'correlation_original_scale': evaluation.correlation_original_scale,
                'converged': model.converged,
                'iterations': model.iterations,
                'error': model.error
            })

            logger.info(f"{config.name} - correlation: {evaluation.correlation:.4f}")

        return pd.DataFrame(results), models, evaluations

    def _select_best_model(self, results_df: pd.DataFrame) -> str:
        """
        Select the configuration with the highest test correlation.
        """
        best_model_name = results_df.sort_values('correlation', ascending=False).iloc[0]['model']
        logger.info(f"Best model: {best_model_name}")
        return best_model_name

    def _save_reports(self, results_df: pd.DataFrame, best_table: pd.DataFrame,
                      prepared: PreparedData) -> Dict[str, str]:
        """
        Write the results table, best-model predictions and a JSON summary.

        Returns:
            Dictionary of report name to file path
        """
        clean_old_files(self.output_dir, REPORT_PATTERNS)

        best_row = results_df[results_df['model'] == self.best_model_name].iloc[0]
        summary = {
            'best_model': self.best_model_name,
            'best_correlation': float(best_row['correlation']),
            'correlations': dict(zip(results_df['model'], results_df['correlation'].astype(float))),
            'train_rows': len(prepared.split.train),
            'test_rows': len(prepared.split.test),
            'random_state': self.random_state,
            'trainer': self.trainer.name,
            'normalization': prepared.params.to_dict()
        }

        return {
            'results': save_frame(results_df, self.output_dir, RESULTS_FILENAME),
            'best_predictions': save_frame(best_table, self.output_dir, BEST_PREDICTIONS_FILENAME, index=True),
            'summary': save_json(summary, self.output_dir, SUMMARY_FILENAME)
        }

    def run(self, prepared: PreparedData,
            configs: Optional[Sequence[ModelConfig]] = None,
            save_output: bool = True) -> ExperimentResult:
        """
        Train every configuration, select the best and build its report table.

        Args:
            prepared: Normalized and split data
            configs: Configurations to train (defaults to the three reference
                networks)
            save_output: Whether to write report files to output_dir

        Returns:
            ExperimentResult
        """
        configs = list(configs) if configs is not None else default_configs(self.trainer)
        if not configs:
            raise ValueError("At least one model configuration is required")

        names = [config.name for config in configs]
        if len(set(names)) != len(names):
            raise ValueError(f"Model configuration names must be unique: {names}")

        logger.info("Starting model training and evaluation...")

        results_df, models, evaluations = self._evaluate_configs(prepared, configs)

        self.best_model_name = self._select_best_model(results_df)
        self.best_model = models[self.best_model_name]

        actual = prepared.raw.loc[prepared.split.test.index, TARGET_COLUMN]
        best_table = comparison_table(actual, evaluations[self.best_model_name].predictions,
                                      prepared.params)

        output_paths = {}
        if save_output:
            output_paths = self._save_reports(results_df, best_table, prepared)

        logger.info(f"Model evaluation complete using {self.best_model_name} model.")
        return ExperimentResult(results_df, self.best_model_name, best_table, models, output_paths)
