"""Genetic-algorithm evolution of fully-connected feed-forward networks."""

from __future__ import annotations

from .config import EvolutionConfig, RunConfig, load_evolution_config, load_run_config
from .errors import (
    EmptyElitePoolError,
    EvonetError,
    InvalidInputError,
    InvalidPercentageError,
    InvalidPopulationSizeError,
    InvalidTopologyError,
    LengthMismatchError,
)
from .evaluator import (
    EvaluationConfig,
    EvaluationStats,
    ParallelEvaluator,
    SyncEvaluator,
)
from .metrics import MetricsRow, MetricsWriter
from .network import (
    NeuralNet,
    expected_synapse_count,
    fitness_key,
    validate_layer_shape,
)
from .neurons import Layer, Neuron, Synapse
from .population import (
    GenerationPlan,
    PopulationManager,
    crossover,
    plan_generation,
)
from .reporters import EventLogger
from .rng import PythonRandom, RandomSource
from .tasks import TASKS, LinearTargetTask, TruthTableTask, get_task
from .training import TrainingResult, run_training

__all__ = [
    "EmptyElitePoolError",
    "EvaluationConfig",
    "EvaluationStats",
    "EventLogger",
    "EvolutionConfig",
    "EvonetError",
    "GenerationPlan",
    "InvalidInputError",
    "InvalidPercentageError",
    "InvalidPopulationSizeError",
    "InvalidTopologyError",
    "Layer",
    "LengthMismatchError",
    "LinearTargetTask",
    "MetricsRow",
    "MetricsWriter",
    "NeuralNet",
    "Neuron",
    "ParallelEvaluator",
    "PopulationManager",
    "PythonRandom",
    "RandomSource",
    "RunConfig",
    "Synapse",
    "SyncEvaluator",
    "TASKS",
    "TrainingResult",
    "TruthTableTask",
    "crossover",
    "expected_synapse_count",
    "fitness_key",
    "get_task",
    "load_evolution_config",
    "load_run_config",
    "plan_generation",
    "run_training",
    "validate_layer_shape",
]
