import numpy as np
import pytest

from sigmoid_network.costs import CROSS_ENTROPY, QUADRATIC
from sigmoid_network.errors import ShapeMismatch
from sigmoid_network.neural_network import Gradient, new_network


def numerical_gradient(net, x, y, cost, h=1e-6):
    """Central differences of cost.value with respect to every weight and bias."""

    def c():
        return cost.value(net.forward(x), y)

    grads = []
    for params in (net.weights, net.biases):
        layer_grads = []
        for p in params:
            g = np.zeros(p.shape)
            for idx in np.ndindex(*p.shape):
                saved = p[idx]
                p[idx] = saved + h
                plus = c()
                p[idx] = saved - h
                minus = c()
                p[idx] = saved
                g[idx] = (plus - minus) / (2 * h)
            layer_grads.append(g)
        grads.append(layer_grads)
    return Gradient(weights=grads[0], biases=grads[1])


def explicit_loop_gradient(net, examples, cost):
    """Per-example gradients summed one at a time."""
    total = None
    for x, y in examples:
        g = net.backpropagation(x, y, cost)
        total = g if total is None else total + g
    return total


@pytest.mark.parametrize("cost", [QUADRATIC, CROSS_ENTROPY])
def test_gradient_matches_finite_differences(cost, rng):
    net = new_network([3, 4, 2], rng=rng)
    x = rng.random(3)
    y = rng.random(2)
    analytic = net.backpropagation(x, y, cost)
    numeric = numerical_gradient(net, x, y, cost)
    for l in range(1, net.depth):
        np.testing.assert_allclose(analytic.weights[l], numeric.weights[l], rtol=1e-5, atol=1e-8)
        np.testing.assert_allclose(analytic.biases[l], numeric.biases[l], rtol=1e-5, atol=1e-8)


def test_gradient_check_deep_network(rng):
    net = new_network([2, 3, 3, 2], rng=rng)
    x, y = rng.random(2), np.array([1.0, 0.0])
    analytic = net.backpropagation(x, y, CROSS_ENTROPY)
    numeric = numerical_gradient(net, x, y, CROSS_ENTROPY)
    for l in range(1, net.depth):
        np.testing.assert_allclose(analytic.weights[l], numeric.weights[l], rtol=1e-5, atol=1e-8)
        np.testing.assert_allclose(analytic.biases[l], numeric.biases[l], rtol=1e-5, atol=1e-8)


def test_gradient_has_network_shape(small_net, rng):
    g = small_net.backpropagation(rng.random(3), rng.random(2))
    for l in range(small_net.depth):
        assert g.weights[l].shape == small_net.weights[l].shape
        assert g.biases[l].shape == small_net.biases[l].shape


def test_backpropagation_does_not_mutate(small_net, rng):
    before = [w.copy() for w in small_net.weights]
    small_net.backpropagation(rng.random(3), rng.random(2), CROSS_ENTROPY)
    for w, b in zip(small_net.weights, before):
        np.testing.assert_array_equal(w, b)


@pytest.mark.parametrize("cost", [QUADRATIC, CROSS_ENTROPY])
@pytest.mark.parametrize("m", [1, 2, 9])
def test_batch_equals_sum_of_examples(cost, m, rng, make_examples):
    net = new_network([4, 5, 3, 2], rng=rng)
    examples = make_examples(rng, m, 4, 2)
    x = np.column_stack([e[0] for e in examples])
    y = np.column_stack([e[1] for e in examples])
    batch = net.batch_backpropagation(x, y, cost)
    summed = explicit_loop_gradient(net, examples, cost)
    for l in range(1, net.depth):
        np.testing.assert_allclose(batch.weights[l], summed.weights[l], rtol=1e-10, atol=1e-12)
        np.testing.assert_allclose(batch.biases[l], summed.biases[l], rtol=1e-10, atol=1e-12)


def test_batch_shape_mismatch(small_net, rng):
    with pytest.raises(ShapeMismatch):
        small_net.batch_backpropagation(rng.random((3, 4)), rng.random((2, 5)))
    with pytest.raises(ShapeMismatch):
        small_net.batch_backpropagation(rng.random((2, 4)), rng.random((2, 4)))
    with pytest.raises(ShapeMismatch):
        small_net.batch_backpropagation(rng.random(3), rng.random(2))
    with pytest.raises(ShapeMismatch):
        small_net.backpropagation(rng.random(3), rng.random(4))


def test_update_mini_batch_uses_mean_gradient(small_net, rng, make_examples):
    examples = make_examples(rng, 5, 3, 2)
    summed = explicit_loop_gradient(small_net, examples, CROSS_ENTROPY)
    expected = [w - (0.5 / 5) * dw for w, dw in zip(small_net.weights, summed.weights)]
    small_net.update_mini_batch(examples, 0.5, CROSS_ENTROPY)
    for l in range(1, small_net.depth):
        np.testing.assert_allclose(small_net.weights[l], expected[l], rtol=1e-10)
