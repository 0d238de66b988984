"""
One-dimensional interpolators over tabulated knots.

Two kinds are supported: "linear" (numpy.interp) and "cubic" (a natural
cubic spline from scipy). Both clamp the query to the tabulated range, so
evaluating beyond the first or last knot returns the value at that knot
for "linear" and the spline value at the end knot for "cubic".

The knots themselves are the persisted state: an interpolator rebuilt from
the same knots evaluates identically to the original.
"""

import numpy as np
import pandas as pd
from scipy import interpolate

from ..utils import error_handling

KINDS = {"linear": 0, "cubic": 1}
MIN_KNOTS = {"linear": 2, "cubic": 3}


class Interpolator(object):
    """
    Interpolating function through the knots (xs, ys).

    Attributes
    ----------
    kind: str
        Either "linear" or "cubic".
    xs: np.ndarray
        Strictly increasing abscissas, read-only.
    ys: np.ndarray
        Ordinates, one per abscissa, read-only.
    """

    def __init__(self, xs, ys, kind="cubic"):
        if kind not in KINDS:
            raise error_handling.InterpolationError(
                f"Unknown interpolation kind '{kind}', expected one of {list(KINDS)}."
            )
        xs = np.array(xs, dtype=float)
        ys = np.array(ys, dtype=float)
        if xs.ndim != 1 or ys.ndim != 1 or len(xs) != len(ys):
            raise error_handling.InterpolationError(
                f"Mismatched knot arrays: {xs.shape} abscissas and {ys.shape} ordinates."
            )
        if len(xs) < MIN_KNOTS[kind]:
            raise error_handling.InterpolationError(
                f"A {kind} interpolator needs at least {MIN_KNOTS[kind]} knots, got {len(xs)}."
            )
        if not np.all(np.isfinite(xs)) or not np.all(np.isfinite(ys)):
            raise error_handling.InterpolationError("Knots must be finite.")
        if not np.all(np.diff(xs) > 0.0):
            idx = int(np.argmin(np.diff(xs)))
            raise error_handling.InterpolationError(
                f"Abscissas must be strictly increasing; xs[{idx}] = {xs[idx]} "
                f"and xs[{idx + 1}] = {xs[idx + 1]}."
            )
        xs.flags.writeable = False
        ys.flags.writeable = False
        self.kind = kind
        self.xs = xs
        self.ys = ys
        if kind == "cubic":
            self._spline = interpolate.CubicSpline(xs, ys, bc_type="natural")
        else:
            self._spline = None

    def __call__(self, x):
        return self.eval(x)

    def __len__(self):
        return len(self.xs)

    def eval(self, x):
        """Evaluate the interpolator at x (scalar or array)."""
        x_clamped = np.clip(x, self.xs[0], self.xs[-1])
        if self.kind == "linear":
            result = np.interp(x_clamped, self.xs, self.ys)
        else:
            result = self._spline(x_clamped)
        if np.ndim(result) == 0:
            return float(result)
        return result

    @property
    def domain(self):
        return float(self.xs[0]), float(self.xs[-1])

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({"x": self.xs, "y": self.ys})

    def same_knots(self, other) -> bool:
        """True if other has the same kind and bitwise identical knots."""
        return (
            self.kind == other.kind
            and np.array_equal(self.xs, other.xs)
            and np.array_equal(self.ys, other.ys)
        )

    def dump(self, rfile):
        """Write the interpolator to an open RestartFile."""
        rfile.write_int(KINDS[self.kind])
        rfile.write_int(len(self.xs))
        rfile.write_array(self.xs)
        rfile.write_array(self.ys)

    @classmethod
    def from_restart(cls, rfile):
        """Read an interpolator written by dump() from an open RestartFile."""
        code = rfile.read_int()
        kinds = {v: k for k, v in KINDS.items()}
        if code not in kinds:
            raise error_handling.RestartFileError(
                f"Unknown interpolator kind code {code} in restart file."
            )
        count = rfile.read_int()
        xs = rfile.read_array(count)
        ys = rfile.read_array(count)
        try:
            return cls(xs, ys, kind=kinds[code])
        except error_handling.InterpolationError as err:
            raise error_handling.RestartFileError(
                f"Malformed interpolator in restart file: {err.message}"
            ) from err
