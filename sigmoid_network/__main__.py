import argparse
import logging

import numpy as np

from sigmoid_network.evaluation import mean_squared_error
from sigmoid_network.neural_network import new_network
from sigmoid_network.training import TrainingConfig, train

XOR = [
    (np.array([0.0, 0.0]), np.array([0.0])),
    (np.array([0.0, 1.0]), np.array([1.0])),
    (np.array([1.0, 0.0]), np.array([1.0])),
    (np.array([1.0, 1.0]), np.array([0.0])),
]


def main(argv=None):
    parser = argparse.ArgumentParser(description="Train a [2, 2, 1] sigmoid network on XOR.")
    parser.add_argument("--epochs", type=int, default=2000)
    parser.add_argument("--eta", type=float, default=0.5)
    parser.add_argument("--cost", default="cross_entropy")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-every", type=int, default=200)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log = logging.getLogger("sigmoid_network")

    net = new_network([2, 2, 1], rng=args.seed)
    config = TrainingConfig(epochs=args.epochs, mini_batch_size=4,
                            learning_rate=args.eta, cost=args.cost)
    data = list(XOR)

    def report(epoch, metrics, network):
        if epoch % args.log_every == 0:
            log.info("Epoch %d: mse=%.5f", epoch, mean_squared_error(network, XOR))

    log.info("Initial mse=%.5f", mean_squared_error(net, XOR))
    train(net, data, config, log_fn=log.debug, epoch_callback=report)
    for x, y in XOR:
        log.info("%s -> %.4f (expected %s)", x, net.forward(x)[0], y[0])
    return mean_squared_error(net, XOR)


if __name__ == "__main__":
    main()
