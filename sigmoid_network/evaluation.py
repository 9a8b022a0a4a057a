"""Scoring helpers for trained networks. They only rely on Network.forward."""

from typing import Sequence

import numpy as np

from sigmoid_network.costs import CostStrategy, get_cost
from sigmoid_network.errors import EmptyDatasetError
from sigmoid_network.neural_network import Example, Network


def _require_examples(examples: Sequence[Example]) -> None:
    if not examples:
        raise EmptyDatasetError("Cannot evaluate on an empty example set")


def _label(y) -> int:
    # Integer class labels are accepted as well as one-hot targets
    y = np.asarray(y)
    return int(y) if y.ndim == 0 else int(np.argmax(y))


def evaluate(network: Network, test_data: Sequence[Example]) -> int:
    """Number of examples whose most active output matches the target label."""
    _require_examples(test_data)
    test_results = [(int(np.argmax(network.forward(x))), _label(y))
                    for (x, y) in test_data]
    return sum(int(x == y) for (x, y) in test_results)


def evaluate_strictly(network: Network, test_data: Sequence[Example], tolerance: float) -> int:
    """
    Like evaluate, but the winning output must also be within `tolerance`
    of the target's winning value (e.g. 0.97 against 1.0 passes for 0.05).
    An integer label stands for a one-hot target, so its winning value is 1.
    """
    _require_examples(test_data)
    correct = 0
    for x, y in test_data:
        output = network.forward(x)
        actual, expected = int(np.argmax(output)), _label(y)
        target = 1.0 if np.ndim(y) == 0 else float(np.ravel(np.asarray(y, dtype=np.float64))[expected])
        if actual == expected and abs(output[actual] - target) < tolerance:
            correct += 1
    return correct


def mean_squared_error(network: Network, test_data: Sequence[Example]) -> float:
    _require_examples(test_data)
    errors = [np.mean((network.forward(x) - np.ravel(y)) ** 2) for x, y in test_data]
    return float(np.mean(errors))


def total_cost(network: Network, test_data: Sequence[Example], cost: CostStrategy) -> float:
    """Mean of cost.value over the examples."""
    _require_examples(test_data)
    cost = get_cost(cost)
    values = [cost.value(network.forward(x), np.ravel(np.asarray(y, dtype=np.float64)))
              for x, y in test_data]
    return float(np.mean(values))
