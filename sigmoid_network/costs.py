"""
Cost strategies.

A strategy knows two things about a cost C:

  - value(a, y)          : the scalar cost for output activations a and target y
  - derivative(z, a, y)  : the output-layer error signal dC/dz for sigmoid outputs

The error signal is what backpropagation starts from, so a strategy fully
decides the first step of the backward pass.
"""

from abc import ABC, abstractmethod
from typing import Dict, Union

import numpy as np

from sigmoid_network.activations import sigmoid_prime
from sigmoid_network.errors import ConfigurationError


class CostStrategy(ABC):
    name = "abstract"

    @abstractmethod
    def value(self, a: np.ndarray, y: np.ndarray) -> float:
        ...

    @abstractmethod
    def derivative(self, z: np.ndarray, a: np.ndarray, y: np.ndarray) -> np.ndarray:
        ...

    def __repr__(self):
        return "{0}()".format(type(self).__name__)


class QuadraticCost(CostStrategy):
    name = "quadratic"

    def value(self, a, y):
        return 0.5 * float(np.sum((a - y) ** 2))

    def derivative(self, z, a, y):
        # dC/da = (a - y), times the sigmoid slope at the output
        return (a - y) * sigmoid_prime(z)


class CrossEntropyCost(CostStrategy):
    name = "cross_entropy"

    def value(self, a, y):
        # nan_to_num turns 0*log(0) into 0 for saturated outputs
        return float(np.sum(np.nan_to_num(-y * np.log(a) - (1 - y) * np.log(1 - a))))

    def derivative(self, z, a, y):
        # sigma'(z) cancels against the 1 / (a(1-a)) of dC/da
        return a - y


QUADRATIC = QuadraticCost()
CROSS_ENTROPY = CrossEntropyCost()

COSTS: Dict[str, CostStrategy] = {
    QUADRATIC.name: QUADRATIC,
    CROSS_ENTROPY.name: CROSS_ENTROPY,
}


def get_cost(cost: Union[str, CostStrategy]) -> CostStrategy:
    """Resolve a cost given by name ("quadratic", "cross_entropy") or instance."""
    if isinstance(cost, CostStrategy):
        return cost
    try:
        return COSTS[str(cost).lower().replace("-", "_")]
    except KeyError:
        raise ConfigurationError(
            "Unknown cost {0!r}, expected one of {1}".format(cost, sorted(COSTS))
        ) from None
