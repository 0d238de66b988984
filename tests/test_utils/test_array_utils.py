import numpy as np

from stellar_feedback.utils.array_utils import as_result


def test_zero_dimensional_becomes_float():
    result = as_result(np.float64(2.5))
    assert type(result) is float
    assert result == 2.5

    result = as_result(np.array(1.0))
    assert type(result) is float


def test_array_passes_through():
    values = np.array([1.0, 2.0])
    assert as_result(values) is values
