import logging

import numpy as np
import pytest

from stellar_feedback.io.restart_file import MAGIC, RestartFile
from stellar_feedback.numerics.interpolator import Interpolator
from stellar_feedback.utils import error_handling


def test_round_trip(tmp_path):
    path = tmp_path / "values.restart"
    with RestartFile(path, "w") as rfile:
        rfile.write(0.07)
        rfile.write_int(30)
        rfile.write_array([1.0, 2.5, -3.0])
        rfile.write(1.0e51 * 0.7)

    with RestartFile(path, "r") as rfile:
        assert rfile.read() == 0.07
        assert rfile.read_int() == 30
        assert np.array_equal(rfile.read_array(3), [1.0, 2.5, -3.0])
        assert rfile.read() == 1.0e51 * 0.7


def test_header(tmp_path):
    path = tmp_path / "empty.restart"
    with RestartFile(path, "w"):
        pass
    assert path.read_bytes() == MAGIC


def test_read_past_end(tmp_path):
    path = tmp_path / "short.restart"
    with RestartFile(path, "w") as rfile:
        rfile.write(1.0)

    with RestartFile(path, "r") as rfile:
        rfile.read()
        with pytest.raises(error_handling.RestartFileError, match="Unexpected end"):
            rfile.read()


@pytest.mark.parametrize("count", [2**40, 2**61], ids=["terabytes", "overflowing"])
def test_corrupt_count(tmp_path, count):
    path = tmp_path / "corrupt.restart"
    with RestartFile(path, "w") as rfile:
        rfile.write_int(1)
        rfile.write_int(count)
        rfile.write_array([0.0, 1.0, 2.0])

    with pytest.warns(UserWarning, match="unread data"):
        with RestartFile(path, "r") as rfile:
            with pytest.raises(error_handling.RestartFileError, match="Unexpected end"):
                Interpolator.from_restart(rfile)


def test_bad_header(tmp_path):
    path = tmp_path / "bad.restart"
    path.write_bytes(b"NOTVALID" + b"\x00" * 8)

    with pytest.raises(error_handling.RestartFileError):
        with RestartFile(path, "r"):
            pass


def test_wrong_mode(tmp_path):
    path = tmp_path / "mode.restart"
    with RestartFile(path, "w") as rfile:
        with pytest.raises(error_handling.RestartFileError):
            rfile.read()


def test_unknown_mode(tmp_path):
    with pytest.raises(ValueError):
        RestartFile(tmp_path / "x.restart", "a")


def test_unread_data_warns(tmp_path):
    path = tmp_path / "long.restart"
    with RestartFile(path, "w") as rfile:
        rfile.write(1.0)
        rfile.write(2.0)

    with pytest.warns(UserWarning, match="unread data"):
        with RestartFile(path, "r") as rfile:
            rfile.read()


def test_failed_write_not_logged(tmp_path, caplog):
    caplog.set_level(logging.INFO, logger="stellar_feedback.io.restart_file")
    path = tmp_path / "failed.restart"

    with pytest.raises(ValueError):
        with RestartFile(path, "w") as rfile:
            rfile.write(1.0)
            raise ValueError("model derivation failed")

    assert "Wrote restart file" not in caplog.text


def test_clean_write_logged(tmp_path, caplog):
    caplog.set_level(logging.INFO, logger="stellar_feedback.io.restart_file")
    path = tmp_path / "done.restart"

    with RestartFile(path, "w") as rfile:
        rfile.write(1.0)

    assert "Wrote restart file" in caplog.text
