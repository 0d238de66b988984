import numpy as np
import pandas as pd
import pytest

from stellar_feedback.io.restart_file import RestartFile
from stellar_feedback.numerics.interpolator import Interpolator
from stellar_feedback.utils import error_handling

XS = [0.0, 1.0, 2.0, 4.0]
YS = [1.0, 3.0, 2.0, 0.0]


@pytest.mark.parametrize("kind", ["linear", "cubic"])
def test_passes_through_knots(kind):
    f = Interpolator(XS, YS, kind=kind)
    for x, y in zip(XS, YS):
        assert f(x) == pytest.approx(y, abs=1.0e-14)


def test_linear_midpoints():
    f = Interpolator(XS, YS, kind="linear")
    assert f(0.5) == 2.0
    assert f(3.0) == 1.0


def test_cubic_is_natural():
    """A natural cubic spline through points on a line is that line."""
    xs = np.linspace(0.0, 1.0, 6)
    f = Interpolator(xs, 2.0 * xs + 1.0, kind="cubic")
    assert f(0.33) == pytest.approx(1.66)


@pytest.mark.parametrize("kind", ["linear", "cubic"])
def test_clamped_outside_knots(kind):
    f = Interpolator(XS, YS, kind=kind)
    assert f(-10.0) == pytest.approx(f(XS[0]))
    assert f(10.0) == pytest.approx(f(XS[-1]))


def test_array_evaluation():
    f = Interpolator(XS, YS, kind="cubic")
    x = np.linspace(-1.0, 5.0, 50)
    result = f(x)
    assert isinstance(result, np.ndarray)
    assert result.shape == x.shape
    assert isinstance(f(1.5), float)


TEST_INPUTS = [
    ([0.0, 1.0, 1.0], [0.0, 1.0, 2.0], "linear"),
    ([0.0, 2.0, 1.0], [0.0, 1.0, 2.0], "cubic"),
    ([0.0, 1.0, 2.0], [0.0, 1.0], "linear"),
    ([0.0, 1.0], [0.0, 1.0], "cubic"),
    ([0.0], [0.0], "linear"),
    ([0.0, np.nan, 2.0], [0.0, 1.0, 2.0], "linear"),
    ([0.0, 1.0, 2.0], [0.0, 1.0, 2.0], "quintic"),
]
TEST_IDS = [
    "repeated_x",
    "decreasing_x",
    "length_mismatch",
    "too_few_cubic",
    "too_few_linear",
    "nan_knot",
    "unknown_kind",
]


@pytest.mark.parametrize("xs,ys,kind", TEST_INPUTS, ids=TEST_IDS)
def test_malformed_input(xs, ys, kind):
    with pytest.raises(error_handling.InterpolationError):
        Interpolator(xs, ys, kind=kind)


def test_near_duplicate_abscissas_allowed():
    f = Interpolator([0.0, 140.0, 140.0 + 1.0e-10, 150.0], [0.0, 1.0, 9.0, 16.0], kind="linear")
    assert f(140.0) == 1.0
    assert f(150.0) == 16.0


@pytest.mark.parametrize("kind", ["linear", "cubic"])
def test_restart_round_trip(tmp_path, kind):
    f = Interpolator(XS, YS, kind=kind)
    path = tmp_path / "spline.restart"
    with RestartFile(path, "w") as rfile:
        f.dump(rfile)
    with RestartFile(path, "r") as rfile:
        g = Interpolator.from_restart(rfile)

    grid = np.linspace(-1.0, 5.0, 1000)
    assert g.same_knots(f)
    assert np.array_equal(g(grid), f(grid))


def test_restart_unknown_kind(tmp_path):
    path = tmp_path / "spline.restart"
    with RestartFile(path, "w") as rfile:
        rfile.write_int(7)
        rfile.write_int(2)
        rfile.write_array([0.0, 1.0])
        rfile.write_array([0.0, 1.0])
    with RestartFile(path, "r") as rfile:
        with pytest.raises(error_handling.RestartFileError):
            Interpolator.from_restart(rfile)


def test_restart_malformed_knots(tmp_path):
    path = tmp_path / "spline.restart"
    with RestartFile(path, "w") as rfile:
        rfile.write_int(0)
        rfile.write_int(2)
        rfile.write_array([1.0, 0.0])
        rfile.write_array([0.0, 1.0])
    with RestartFile(path, "r") as rfile:
        with pytest.raises(error_handling.RestartFileError):
            Interpolator.from_restart(rfile)


def test_to_dataframe():
    df = Interpolator(XS, YS, kind="linear").to_dataframe()
    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["x", "y"]
    assert df.x.to_list() == XS


@pytest.mark.parametrize("kind", ["linear", "cubic"])
def test_knots_are_read_only(kind):
    xs = np.array(XS)
    f = Interpolator(xs, YS, kind=kind)
    before = f(1.5)

    with pytest.raises(ValueError):
        f.xs[0] = 5.0
    with pytest.raises(ValueError):
        f.ys[-1] = 5.0

    # the caller's array is copied, not frozen
    xs[0] = -1.0
    assert f(1.5) == before
