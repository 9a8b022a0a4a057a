import numpy as np
import pytest

from sigmoid_network.neural_network import new_network


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def small_net():
    return new_network([3, 4, 2], rng=7)


@pytest.fixture
def xor_data():
    return [
        (np.array([0.0, 0.0]), np.array([0.0])),
        (np.array([0.0, 1.0]), np.array([1.0])),
        (np.array([1.0, 0.0]), np.array([1.0])),
        (np.array([1.0, 1.0]), np.array([0.0])),
    ]


def _random_examples(rng, n, n_in, n_out):
    return [(rng.random(n_in), rng.random(n_out)) for _ in range(n)]


@pytest.fixture
def make_examples():
    """Factory for random (input, target) pairs with components in [0, 1)."""
    return _random_examples
