import logging
import numbers
import time
from dataclasses import asdict, dataclass, fields
from typing import Any, Callable, Dict, List, MutableSequence, Optional, Sequence

from sigmoid_network.costs import CostStrategy, get_cost
from sigmoid_network.errors import ConfigurationError
from sigmoid_network.evaluation import evaluate
from sigmoid_network.neural_network import Example, Network, RandomSource, is_positive_int, make_rng

logger = logging.getLogger(__name__)


@dataclass
class TrainingConfig:
    """Hyper-parameters for a multi-epoch run."""

    epochs: int = 30
    mini_batch_size: int = 10
    learning_rate: float = 0.5
    cost: str = "cross_entropy"

    def __post_init__(self):
        if not is_positive_int(self.epochs):
            raise ConfigurationError("epochs must be an integer >= 1, got {0!r}".format(self.epochs))
        if not is_positive_int(self.mini_batch_size):
            raise ConfigurationError(
                "mini_batch_size must be an integer >= 1, got {0!r}".format(self.mini_batch_size)
            )
        if (isinstance(self.learning_rate, bool) or not isinstance(self.learning_rate, numbers.Real)
                or not 0 < self.learning_rate < float("inf")):
            raise ConfigurationError("learning_rate must be a number > 0, got {0!r}".format(self.learning_rate))
        if isinstance(self.cost, CostStrategy):
            self.cost = self.cost.name
        get_cost(self.cost)

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> "TrainingConfig":
        """Build a config from a hyper-parameter dict; unrelated keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in params.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def train(network: Network, training_data: MutableSequence[Example], config: TrainingConfig,
          test_data: Optional[Sequence[Example]] = None,
          log_fn: Optional[Callable[[str], None]] = None,
          epoch_callback: Optional[Callable[..., None]] = None,
          rng: RandomSource = None) -> List[Dict[str, Any]]:
    """
    Stochastic Gradient Descent over several epochs.

    - training_data  : list [(x, y), ...], shuffled in place every epoch
    - config         : TrainingConfig (epochs, mini_batch_size, learning_rate, cost)
    - test_data      : evaluated after each epoch when given
    - log_fn(msg)    : progress messages (default: this module's logger)
    - epoch_callback(epoch, metrics, network) : called at the end of each epoch
    - rng            : Generator or seed for shuffling (default: the network's)

    Returns the list of per-epoch metrics dicts.
    """
    if log_fn is None:
        log_fn = logger.info

    cost = get_cost(config.cost)
    rng = network.rng if rng is None else make_rng(rng)
    n_test = len(test_data) if test_data else None
    history = []

    log_fn("Starting SGD training...")
    for j in range(config.epochs):
        start = time.perf_counter()
        steps = network.learn_stochastically(
            cost, config.learning_rate, config.mini_batch_size, training_data, rng=rng
        )
        elapsed = time.perf_counter() - start

        metrics = {"epoch": j + 1, "epochs": config.epochs, "updates": steps, "elapsed": elapsed}
        if test_data:
            correct = evaluate(network, test_data)
            acc = correct / n_test
            metrics.update({
                "test_correct": correct,
                "test_total": n_test,
                "test_accuracy": acc,
            })
            log_fn(
                "Epoch {0}/{1}: {2} / {3} correct (accuracy={4:.4f}). Elapsed time: {5:.3f}s".format(
                    j + 1, config.epochs, correct, n_test, acc, elapsed
                )
            )
        else:
            log_fn("Epoch {0}/{1} complete. Elapsed time: {2:.3f}s".format(j + 1, config.epochs, elapsed))
        history.append(metrics)

        # a failing UI callback must not stop training
        if epoch_callback is not None:
            try:
                epoch_callback(epoch=j + 1, metrics=metrics, network=network)
            except Exception as e:
                log_fn(f"[epoch_callback error] {e}")

    return history
