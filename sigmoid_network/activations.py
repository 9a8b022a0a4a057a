import numpy as np

# Smallest step away from 0 and 1 representable in float64
_LOW = np.finfo(np.float64).tiny
_HIGH = 1.0 - np.finfo(np.float64).epsneg


def sigmoid(z):
    """Logistic function, evaluated without overflow for any argument.

    Works on scalars and arrays; the result always lies strictly in (0, 1).
    """
    z = np.asarray(z, dtype=np.float64)
    e = np.exp(-np.abs(z))
    s = np.where(z >= 0, 1.0 / (1.0 + e), e / (1.0 + e))
    s = np.clip(s, _LOW, _HIGH)
    return s if s.ndim else float(s)


def sigmoid_prime(z):
    s = sigmoid(z)
    return s * (1.0 - s)
