"""
Main entry point for the concrete strength application.

This script orchestrates data preparation, network training and evaluation.
"""

import os
import logging
import argparse
from typing import List, Optional

import pandas as pd

from .config.constants import LOG_FORMAT, LOG_LEVELS, TRAINERS
from .config.settings import Settings, load_settings
from .data_preparation.data_processor import DataProcessor
from .modeling.model_trainer import ModelTrainer, ExperimentResult, build_trainer
from .utils.file_utils import find_data_file

# Configure logger
logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, level),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()]
    )


def parse_args(argv: Optional[List[str]] = None,
               settings: Optional[Settings] = None) -> argparse.Namespace:
    """
    Parse command-line arguments, using settings for the defaults.

    Returns:
        Parsed arguments namespace
    """
    settings = settings or Settings()

    parser = argparse.ArgumentParser(
        description="Train neural networks predicting concrete compressive strength."
    )
    parser.add_argument(
        '--data-path',
        dest='data_path',
        default=settings.data_path,
        help=f'CSV file with mixture components and strength (default: {settings.data_path})'
    )
    parser.add_argument(
        '--output-dir',
        dest='output_dir',
        default=settings.output_dir,
        help=f'Directory for report files (default: {settings.output_dir})'
    )
    parser.add_argument(
        '--train-fraction',
        dest='train_fraction',
        type=float,
        default=settings.train_fraction,
        help=f'Fraction of rows used for training (default: {settings.train_fraction})'
    )
    parser.add_argument(
        '--train-size',
        dest='train_size',
        type=int,
        default=settings.train_size,
        help='Explicit number of training rows, overrides --train-fraction'
    )
    parser.add_argument(
        '--seed',
        dest='random_state',
        type=int,
        default=settings.random_state,
        help=f'Seed for initial network weights (default: {settings.random_state})'
    )
    parser.add_argument(
        '--trainer',
        dest='trainer',
        default=settings.trainer,
        choices=TRAINERS,
        help=f'Model trainer implementation (default: {settings.trainer})'
    )
    parser.add_argument(
        '--stepmax',
        dest='stepmax',
        type=int,
        default=settings.stepmax,
        help=f'Training iteration cap (default: {settings.stepmax})'
    )
    parser.add_argument(
        '--no-save',
        dest='save_output',
        action='store_false',
        help='Do not write report files'
    )
    parser.add_argument(
        '--log-level',
        dest='loglevel',
        default=settings.log_level,
        choices=LOG_LEVELS,
        help=f'Set the logging level (default: {settings.log_level})'
    )

    return parser.parse_args(argv)


def run_pipeline(data_path: str,
                 output_dir: str,
                 settings: Optional[Settings] = None,
                 save_output: bool = True) -> ExperimentResult:
    """
    Prepare the data, train every reference network and evaluate them.

    Args:
        data_path: CSV file with the dataset, or a directory holding it
        output_dir: Directory for report files
        settings: Run settings (defaults to Settings())
        save_output: Whether to write report files

    Returns:
        ExperimentResult of the run
    """
    settings = settings or Settings()

    # A directory means: use its newest CSV
    if os.path.isdir(data_path):
        data_path = find_data_file(data_path)

    processor = DataProcessor(data_path=data_path,
                              degenerate_policy=settings.degenerate_policy)
    prepared = processor.prepare_data(train_fraction=settings.train_fraction,
                                      train_size=settings.train_size)

    trainer = build_trainer(settings.trainer,
                            threshold=settings.threshold,
                            stepmax=settings.stepmax,
                            log_level=getattr(logging, settings.log_level))
    model_trainer = ModelTrainer(trainer=trainer,
                                 random_state=settings.random_state,
                                 output_dir=output_dir)
    return model_trainer.run(prepared, save_output=save_output)


def report(result: ExperimentResult, rows: int = 10) -> str:
    """
    Render the per-configuration correlations and the head of the best
    model's comparison table.
    """
    columns = ['model', 'topology', 'activation', 'correlation', 'converged', 'iterations']
    with pd.option_context('display.float_format', '{:.4f}'.format):
        lines = [
            "Test-set correlation per configuration:",
            result.results[columns].to_string(index=False),
            "",
            f"Best model: {result.best_model_name}",
            result.best_predictions.head(rows).to_string(),
        ]
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the concrete strength pipeline.
    """
    settings = load_settings()
    args = parse_args(argv, settings)

    # Configure logging
    configure_logging(args.loglevel)

    settings.train_fraction = args.train_fraction
    settings.train_size = args.train_size
    settings.random_state = args.random_state
    settings.trainer = args.trainer
    settings.stepmax = args.stepmax
    settings.log_level = args.loglevel

    logger.info("Starting concrete strength pipeline...")
    logger.debug(f"Settings: {settings}")

    data_path = os.path.abspath(args.data_path)
    output_dir = os.path.abspath(args.output_dir)

    result = run_pipeline(data_path, output_dir, settings=settings, save_output=args.save_output)
    print(report(result))

    logger.info("Concrete strength pipeline completed successfully!")


if __name__ == "__main__":
    main()
