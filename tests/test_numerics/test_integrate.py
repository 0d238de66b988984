import numpy as np
import pytest

from stellar_feedback.numerics.integrate import integrate
from stellar_feedback.utils import error_handling


def test_polynomial():
    assert integrate(lambda x: x * x, 0.0, 1.0) == pytest.approx(1.0 / 3.0, rel=1.0e-10)


def test_empty_interval():
    assert integrate(lambda x: 1.0 / x, 2.0, 2.0) == 0.0


def test_reversed_interval():
    assert integrate(lambda x: x, 1.0, 0.0) == pytest.approx(-0.5)


def test_step_with_break_points():
    step = lambda x: 1.0 if x < 140.0 else 9.0
    result = integrate(step, 100.0, 200.0, points=[0.0, 140.0, 300.0])
    assert result == pytest.approx(40.0 + 9.0 * 60.0, rel=1.0e-10)


def test_zero_outside_support():
    f = lambda x: np.exp(-x) if x > 1.0 else 0.0
    assert integrate(f, 0.0, 50.0, points=[1.0]) == pytest.approx(np.exp(-1.0), rel=1.0e-7)


def test_non_convergence_raises():
    with pytest.raises(error_handling.IntegrationError):
        integrate(lambda x: np.sin(50.0 * x), 0.0, 100.0, limit=1)
