class NetworkError(ValueError):
    """Base class for every usage error raised by the engine."""


class ConfigurationError(NetworkError):
    """Invalid layer sizes or training hyper-parameters."""


class ShapeMismatch(NetworkError):
    """An input, target or matrix does not match the network's layer sizes."""


class EmptyDatasetError(NetworkError):
    """Training or evaluation was asked to run on zero examples."""
