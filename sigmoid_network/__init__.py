"""Feed-forward sigmoid networks trained with backpropagation and mini-batch SGD."""

from sigmoid_network.activations import sigmoid, sigmoid_prime
from sigmoid_network.costs import (
    CROSS_ENTROPY,
    QUADRATIC,
    CostStrategy,
    CrossEntropyCost,
    QuadraticCost,
    get_cost,
)
from sigmoid_network.errors import (
    ConfigurationError,
    EmptyDatasetError,
    NetworkError,
    ShapeMismatch,
)
from sigmoid_network.evaluation import evaluate, evaluate_strictly, mean_squared_error, total_cost
from sigmoid_network.neural_network import Gradient, Network, new_network
from sigmoid_network.training import TrainingConfig, train

__version__ = "0.1.0"

__all__ = [
    "sigmoid",
    "sigmoid_prime",
    "CostStrategy",
    "QuadraticCost",
    "CrossEntropyCost",
    "QUADRATIC",
    "CROSS_ENTROPY",
    "get_cost",
    "NetworkError",
    "ConfigurationError",
    "ShapeMismatch",
    "EmptyDatasetError",
    "Network",
    "Gradient",
    "new_network",
    "evaluate",
    "evaluate_strictly",
    "mean_squared_error",
    "total_cost",
    "TrainingConfig",
    "train",
]
