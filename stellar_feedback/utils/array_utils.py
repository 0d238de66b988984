import numpy as np


def as_result(value):
    """Return 0-d results as a plain float and arrays unchanged."""
    if np.ndim(value) == 0:
        return float(value)
    return value
