import logging
from dataclasses import dataclass
from typing import List, MutableSequence, Optional, Sequence, Tuple, Union

import numpy as np

from sigmoid_network.activations import sigmoid, sigmoid_prime
from sigmoid_network.costs import QUADRATIC, CostStrategy, get_cost
from sigmoid_network.errors import ConfigurationError, EmptyDatasetError, ShapeMismatch

logger = logging.getLogger(__name__)

Example = Tuple[Sequence[float], Sequence[float]]
RandomSource = Union[None, int, np.random.Generator]


def make_rng(rng: RandomSource = None) -> np.random.Generator:
    """Return a Generator, building one from a seed (or from OS entropy for None)."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def _placeholder() -> np.ndarray:
    # Layer 0 is the input layer and has no parameters
    return np.zeros((0, 0))


@dataclass
class Gradient:
    """Per-layer partial derivatives, laid out exactly like Network.weights/biases."""

    weights: List[np.ndarray]
    biases: List[np.ndarray]

    def __add__(self, other: "Gradient") -> "Gradient":
        return Gradient(
            weights=[w + ow for w, ow in zip(self.weights, other.weights)],
            biases=[b + ob for b, ob in zip(self.biases, other.biases)],
        )


class Network(object):

    def __init__(self, sizes: Sequence[int], rng: RandomSource = None):
        """
        Fully-connected sigmoid network.

        - sizes : layer widths, input layer first, e.g. [784, 30, 10]
        - rng   : numpy Generator (or seed) used for initialization and, by
                  default, for shuffling in learn_stochastically

        weights[l] has shape (sizes[l], sizes[l-1]) and biases[l] has shape
        (sizes[l], 1) for every l >= 1; index 0 holds an empty placeholder.
        """
        sizes = list(sizes)
        if len(sizes) < 2:
            raise ConfigurationError(
                "A network needs at least an input and an output layer, got sizes={0}".format(sizes)
            )
        for size in sizes:
            if not is_positive_int(size):
                raise ConfigurationError("Layer sizes must be positive integers, got {0!r}".format(size))

        self.rng = make_rng(rng)
        self.sizes = tuple(int(s) for s in sizes)
        self.depth = len(self.sizes)
        self.weights = [_placeholder()] + [
            self.rng.standard_normal((y, x)) for x, y in zip(self.sizes[:-1], self.sizes[1:])
        ]
        self.biases = [_placeholder()] + [self.rng.standard_normal((y, 1)) for y in self.sizes[1:]]
        logger.debug("Initialized network with sizes %s", self.sizes)

    def __repr__(self):
        return "Network(sizes={0})".format(list(self.sizes))

    @property
    def num_layers(self) -> int:
        return self.depth

    # ------------------------------------------------------------------
    # Shape checks
    # ------------------------------------------------------------------

    @staticmethod
    def _as_column(v, length: int, what: str) -> np.ndarray:
        arr = np.asarray(v, dtype=np.float64)
        if arr.ndim == 2 and arr.shape[1] != 1:
            raise ShapeMismatch("{0} must be a vector, got an array of shape {1}".format(what, arr.shape))
        if arr.ndim > 2 or arr.size != length:
            raise ShapeMismatch(
                "{0} has {1} components, expected {2}".format(what, arr.size, length)
            )
        return arr.reshape(length, 1)

    def _input_column(self, x) -> np.ndarray:
        return self._as_column(x, self.sizes[0], "input")

    def _target_column(self, y) -> np.ndarray:
        return self._as_column(y, self.sizes[-1], "target")

    def _stack(self, examples: Sequence[Example]) -> Tuple[np.ndarray, np.ndarray]:
        """Stack examples as columns: X is (sizes[0], m), Y is (sizes[-1], m)."""
        xs = [self._input_column(x) for x, _ in examples]
        ys = [self._target_column(y) for _, y in examples]
        return np.hstack(xs), np.hstack(ys)

    # ------------------------------------------------------------------
    # Forward propagation
    # ------------------------------------------------------------------

    def feedforward(self, a: np.ndarray) -> np.ndarray:
        """Propagate a (sizes[0], m) matrix of column inputs; returns (sizes[-1], m)."""
        a = np.asarray(a, dtype=np.float64)
        if a.ndim != 2 or a.shape[0] != self.sizes[0]:
            raise ShapeMismatch(
                "input matrix has shape {0}, expected ({1}, m)".format(a.shape, self.sizes[0])
            )
        for w, b in zip(self.weights[1:], self.biases[1:]):
            a = sigmoid(np.dot(w, a) + b)
        return a

    def forward(self, x) -> np.ndarray:
        """Network output for a single input vector, as a 1-d array in (0, 1)."""
        return self.feedforward(self._input_column(x)).ravel()

    # ------------------------------------------------------------------
    # Backpropagation
    # ------------------------------------------------------------------

    def batch_backpropagation(self, x: np.ndarray, y: np.ndarray,
                              cost: CostStrategy = QUADRATIC) -> Gradient:
        """
        Gradient of the cost summed over a batch.

        x holds one input per column (sizes[0], m) and y the matching targets
        (sizes[-1], m). The returned Gradient is the sum, not the mean, of the
        per-example gradients.
        """
        cost = get_cost(cost)
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        if x.ndim != 2 or y.ndim != 2 or x.shape[1] != y.shape[1]:
            raise ShapeMismatch("inputs {0} and targets {1} must be matrices with one column per example"
                                .format(x.shape, y.shape))
        if x.shape[0] != self.sizes[0] or y.shape[0] != self.sizes[-1]:
            raise ShapeMismatch(
                "batch shapes {0}/{1} do not match layer sizes {2}".format(x.shape, y.shape, self.sizes)
            )

        nabla_w = [np.zeros(w.shape) for w in self.weights]
        nabla_b = [np.zeros(b.shape) for b in self.biases]

        # feedforward, keeping every layer's z and activation
        activation = x
        activations = [x]
        zs = [_placeholder()]
        for w, b in zip(self.weights[1:], self.biases[1:]):
            z = np.dot(w, activation) + b
            zs.append(z)
            activation = sigmoid(z)
            activations.append(activation)

        # backward pass; the cost strategy supplies the output error signal
        last = self.depth - 1
        delta = cost.derivative(zs[last], activations[last], y)
        nabla_w[last] = np.dot(delta, activations[last - 1].transpose())
        nabla_b[last] = delta.sum(axis=1, keepdims=True)
        for l in range(last - 1, 0, -1):
            delta = np.dot(self.weights[l + 1].transpose(), delta) * sigmoid_prime(zs[l])
            # delta . a^T sums the per-example outer products over the batch
            nabla_w[l] = np.dot(delta, activations[l - 1].transpose())
            nabla_b[l] = delta.sum(axis=1, keepdims=True)
        return Gradient(weights=nabla_w, biases=nabla_b)

    def backpropagation(self, x, y, cost: CostStrategy = QUADRATIC) -> Gradient:
        """Gradient for a single (x, y) example: the one-column case of batch_backpropagation."""
        return self.batch_backpropagation(self._input_column(x), self._target_column(y), cost)

    # ------------------------------------------------------------------
    # Parameter updates
    # ------------------------------------------------------------------

    def apply_gradient(self, gradient: Gradient, scale: float) -> None:
        """Move every parameter against the gradient: p -= scale * dp (in place).

        Every layer's shape is checked first, so a mismatched gradient leaves
        the network untouched.
        """
        if len(gradient.weights) != self.depth or len(gradient.biases) != self.depth:
            raise ShapeMismatch(
                "gradient has {0}/{1} layers, expected {2}".format(
                    len(gradient.weights), len(gradient.biases), self.depth)
            )
        for l in range(1, self.depth):
            for kind, param, delta in (("weights", self.weights[l], gradient.weights[l]),
                                       ("biases", self.biases[l], gradient.biases[l])):
                if np.shape(delta) != param.shape:
                    raise ShapeMismatch(
                        "gradient {0}[{1}] has shape {2}, expected {3}".format(
                            kind, l, np.shape(delta), param.shape)
                    )
        for l in range(1, self.depth):
            self.weights[l] -= scale * gradient.weights[l]
            self.biases[l] -= scale * gradient.biases[l]

    def learn_incrementally(self, eta: float, example: Example,
                            cost: CostStrategy = QUADRATIC) -> None:
        """One online gradient step on a single (input, target) example."""
        _check_learning_rate(eta)
        x, y = example
        gradient = self.backpropagation(x, y, get_cost(cost))
        self.apply_gradient(gradient, eta)

    def update_mini_batch(self, mini_batch: Sequence[Example], eta: float,
                          cost: CostStrategy = QUADRATIC) -> None:
        """Apply one averaged gradient step computed over mini_batch."""
        if not mini_batch:
            raise EmptyDatasetError("Cannot update on an empty mini-batch")
        x, y = self._stack(mini_batch)
        gradient = self.batch_backpropagation(x, y, cost)
        self.apply_gradient(gradient, eta / len(mini_batch))

    def learn_stochastically(self, cost: Union[str, CostStrategy], eta: float, batch_size: int,
                             examples: MutableSequence[Example],
                             rng: Optional[np.random.Generator] = None) -> int:
        """
        One epoch of mini-batch stochastic gradient descent.

        - cost       : CostStrategy (or its name)
        - eta        : learning rate, > 0
        - batch_size : mini-batch size, > 0; the last batch may be shorter
        - examples   : mutable sequence of (input, target); shuffled in place
        - rng        : numpy Generator for shuffling; defaults to the
                       network's own generator. Seeds are rejected: a seed
                       rebuilt every epoch would repeat the same permutation

        Returns the number of update steps applied, ceil(len(examples) / batch_size).
        """
        cost = get_cost(cost)
        _check_learning_rate(eta)
        if not is_positive_int(batch_size):
            raise ConfigurationError("batch_size must be a positive integer, got {0!r}".format(batch_size))
        n = len(examples)
        if n == 0:
            raise EmptyDatasetError("Cannot train on an empty training set")
        if rng is not None and not isinstance(rng, np.random.Generator):
            raise ConfigurationError(
                "rng must be a numpy Generator or None, got {0!r}".format(rng)
            )
        # Reject bad examples before the ordering or the weights change
        for x, y in examples:
            self._input_column(x)
            self._target_column(y)

        if rng is None:
            rng = self.rng
        order = rng.permutation(n)
        examples[:] = [examples[i] for i in order]

        mini_batches = [examples[k:k + batch_size] for k in range(0, n, batch_size)]
        for mini_batch in mini_batches:
            self.update_mini_batch(mini_batch, eta, cost)
        return len(mini_batches)


def new_network(sizes: Sequence[int], rng: RandomSource = None) -> Network:
    return Network(sizes, rng=rng)


def is_positive_int(value) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, np.integer)) and value >= 1


def _check_learning_rate(eta: float) -> None:
    if not np.isfinite(eta) or eta <= 0:
        raise ConfigurationError("Learning rate must be a positive number, got {0!r}".format(eta))
