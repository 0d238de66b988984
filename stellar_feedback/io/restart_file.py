"""
Sequential binary restart file.

Values are written and read back strictly in call order; there are no keys
or offsets, so the reader must consume exactly the sequence the writer
produced. Scalars are stored as little-endian float64, counts as int64.

Example
-------
>>> with RestartFile("restart.bin", "w") as rfile:
...     rfile.write(0.07)
...     rfile.write_array([1.0, 2.0])
>>> with RestartFile("restart.bin", "r") as rfile:
...     m_low = rfile.read()
...     arr = rfile.read_array(2)
"""

import logging
import os
import warnings

import numpy as np

from ..utils import error_handling

logger = logging.getLogger(__name__)

MAGIC = b"SFBRST01"
FLOAT_DTYPE = np.dtype("<f8")
INT_DTYPE = np.dtype("<i8")


class RestartFile(object):
    """A checkpoint handle opened for either writing ("w") or reading ("r")."""

    def __init__(self, path, mode="r"):
        if mode not in ("r", "w"):
            raise ValueError(f"Unknown restart file mode '{mode}', expected 'r' or 'w'.")
        self.path = path
        self.mode = mode
        self._fh = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close(clean=exc_type is None)
        return False

    def open(self):
        if self.mode == "w":
            self._fh = open(self.path, "wb")
            self._fh.write(MAGIC)
        else:
            self._fh = open(self.path, "rb")
            header = self._fh.read(len(MAGIC))
            if header != MAGIC:
                self._fh.close()
                self._fh = None
                raise error_handling.RestartFileError(
                    f"{self.path} is not a stellar feedback restart file."
                )
        return self

    def close(self, clean=True):
        """Close the file. A clean close checks a reader was fully consumed
        and logs a finished writer.
        """
        if self._fh is None:
            return
        if self.mode == "r" and clean and self._fh.read(1):
            warnings.warn(f"Restart file {self.path} was closed with unread data remaining.")
        self._fh.close()
        self._fh = None
        if self.mode == "w" and clean:
            logger.info("Wrote restart file %s (%d bytes)", self.path, os.path.getsize(self.path))

    def write(self, value: float):
        self._check_mode("w")
        self._fh.write(np.asarray(value, dtype=FLOAT_DTYPE).tobytes())

    def write_int(self, value: int):
        self._check_mode("w")
        self._fh.write(np.asarray(value, dtype=INT_DTYPE).tobytes())

    def write_array(self, values):
        self._check_mode("w")
        self._fh.write(np.ascontiguousarray(values, dtype=FLOAT_DTYPE).tobytes())

    def read(self) -> float:
        return float(self._read_buffer(FLOAT_DTYPE, 1)[0])

    def read_int(self) -> int:
        return int(self._read_buffer(INT_DTYPE, 1)[0])

    def read_array(self, count: int) -> np.ndarray:
        if count < 0:
            raise error_handling.RestartFileError(
                f"Negative array length ({count}) read from {self.path}."
            )
        return self._read_buffer(FLOAT_DTYPE, count).copy()

    def _read_buffer(self, dtype, count):
        self._check_mode("r")
        nbytes = dtype.itemsize * count
        remaining = os.fstat(self._fh.fileno()).st_size - self._fh.tell()
        if nbytes > remaining:
            raise error_handling.RestartFileError(
                f"Unexpected end of restart file {self.path}: "
                f"wanted {nbytes} bytes, {remaining} left."
            )
        buffer = self._fh.read(nbytes)
        if len(buffer) != nbytes:
            raise error_handling.RestartFileError(
                f"Unexpected end of restart file {self.path}: "
                f"wanted {nbytes} bytes, got {len(buffer)}."
            )
        return np.frombuffer(buffer, dtype=dtype)

    def _check_mode(self, mode):
        if self._fh is None:
            raise error_handling.RestartFileError(f"Restart file {self.path} is not open.")
        if self.mode != mode:
            raise error_handling.RestartFileError(
                f"Restart file {self.path} is opened with mode '{self.mode}'."
            )
