"""
Network trainers, evaluation and experiment orchestration.
"""
from .activations import Activation, logistic, softplus, tanh, get_activation
from .base_trainer import BaseTrainer, TrainedModel
from .neural_network import NeuralNetwork, NeuralNetworkTrainer
from .sklearn_trainers import MLPRegressorTrainer, LinearRegressionTrainer
from .evaluator import EvaluationResult, predict, correlation, evaluate, comparison_table
from .model_trainer import ModelConfig, ModelTrainer, DEFAULT_CONFIGS, build_trainer

__all__ = [
    'Activation',
    'logistic',
    'softplus',
    'tanh',
    'get_activation',
    'BaseTrainer',
    'TrainedModel',
    'NeuralNetwork',
    'NeuralNetworkTrainer',
    'MLPRegressorTrainer',
    'LinearRegressionTrainer',
    'EvaluationResult',
    'predict',
    'correlation',
    'evaluate',
    'comparison_table',
    'ModelConfig',
    'ModelTrainer',
    'DEFAULT_CONFIGS',
    'build_trainer'
]
