"""The SNIa delay time distribution (DTD).

The two component DTD of Mannucci et al. (2006): a prompt, Gaussian
modulated component around `mu`, and a tardy component that rises
exponentially up to `t_break` and decays slowly afterwards. Times are
in Gyr.

Example
-------
>>> dtd = delay_time.SNIaDelayTime()
>>> dtd.normalise()
>>> dtd.integrate(dtd.t_min, dtd.t_max)
>>> 1.0
"""

import logging

import numpy as np

from .. import config
from ..numerics.integrate import integrate
from ..utils.array_utils import as_result

logger = logging.getLogger(__name__)


class SNIaDelayTime(object):
    """
    Attributes
    ----------
    mu, sigma: float
        Centre and width of the prompt component, in Gyr.
    norm1, norm2: float
        Normalisation constants of the prompt and tardy components. Set by
        `normalise()`; both default to 1.
    t_min, t_max: float
        The delay time window, in Gyr. The DTD vanishes outside it.
    """

    def __init__(self, mu=None, sigma=None, norm1=1.0, norm2=1.0):
        params = config.SNIA_DELAY_PARAMS
        self.mu = params["mu"] if mu is None else mu
        self.sigma = params["sigma"] if sigma is None else sigma
        self.norm1 = norm1
        self.norm2 = norm2
        self.t_min = params["t_min"]
        self.t_max = params["t_max"]
        self.t_break = params["t_break"]
        self.rise_scale = params["rise_scale"]
        self.decay_scale = params["decay_scale"]

    def prompt(self, t):
        """The prompt component, norm1 * (t - t_min) * (t_max - t) * G(t; mu, sigma)."""
        t = np.asarray(t, dtype=float)
        a = (t - self.mu) / self.sigma
        delay = self.norm1 * (t - self.t_min) * (self.t_max - t) * np.exp(-0.5 * a * a)
        delay = np.where(self._in_window(t), delay, 0.0)
        return as_result(delay)

    def tardy(self, t):
        """The tardy component; continuous, and zero at t_min."""
        t = np.asarray(t, dtype=float)
        offset = np.exp((self.t_min - self.t_break) / self.rise_scale)
        with np.errstate(over="ignore"):
            delay = np.where(
                t < self.t_break,
                np.exp((t - self.t_break) / self.rise_scale) - offset,
                np.exp((self.t_break - t) / self.decay_scale) - offset,
            )
        delay = self.norm2 * delay
        delay = np.where(self._in_window(t) & (delay > 0.0), delay, 0.0)
        return as_result(delay)

    def functional_form(self, t):
        """
        Returns the value of the DTD at the specified t
        """
        return as_result(np.asarray(self.prompt(t)) + np.asarray(self.tardy(t)))

    def integrate(self, lower, upper, tolerance=None):
        """Integrates the DTD between lower and upper."""
        tolerance = config.INTEGRATION_PARAMS["tolerance"] if tolerance is None else tolerance
        return integrate(
            self.functional_form, lower, upper, tolerance=tolerance, points=self._breaks()
        )

    def normalise(self, tolerance=None):
        """Set norm1 and norm2 so both components integrate to their fractions
        of the SNeIa over [t_min, t_max].
        """
        params = config.SNIA_DELAY_PARAMS
        tolerance = config.INTEGRATION_PARAMS["tolerance"] if tolerance is None else tolerance
        self.norm1 = 1.0
        self.norm2 = 1.0
        dint = integrate(self.prompt, self.t_min, self.t_max, tolerance, self._breaks())
        self.norm1 = params["frac_prompt"] / dint
        dint = integrate(self.tardy, self.t_min, self.t_max, tolerance, self._breaks())
        self.norm2 = params["frac_tardy"] / dint
        logger.debug("SNIa DTD normalisation: norm1 = %g, norm2 = %g", self.norm1, self.norm2)

    def cumulative_knots(self, log_step=None, log_t_end=None, pad_offset=None, tolerance=None):
        """Tabulate the cumulative DTD on a grid in log10(t).

        The grid runs from log10(t_min) in steps of log_step up to (not
        including) log10(t_max). The first tabulated value is repeated on a
        leading knot placed at pad_offset (shifted by that value), which keeps
        the slope of the cubic spline finite at the start. Two trailing knots
        at log10(t_max) and log_t_end pin the cumulative DTD to 1.

        Must be called after `normalise()`.

        Returns
        -------
        (np.ndarray, np.ndarray)
            The knots in log10(t) and the cumulative DTD.
        """
        params = config.SNIA_DELAY_PARAMS
        log_step = params["log_step"] if log_step is None else log_step
        log_t_end = params["log_t_end"] if log_t_end is None else log_t_end
        pad_offset = params["pad_offset"] if pad_offset is None else pad_offset

        log_ts = np.arange(np.log10(self.t_min), np.log10(self.t_max), log_step)
        edges = np.concatenate(([self.t_min], 10.0**log_ts))
        pieces = np.array(
            [self.integrate(lo, hi, tolerance) for lo, hi in zip(edges[:-1], edges[1:])]
        )
        cumulative = np.cumsum(pieces)

        xs = np.concatenate(
            ([pad_offset + cumulative[0]], log_ts, [np.log10(self.t_max), log_t_end])
        )
        ys = np.concatenate(([cumulative[0]], cumulative, [1.0, 1.0]))

        return xs, ys

    def _in_window(self, t):
        return (t >= self.t_min) & (t <= self.t_max)

    def _breaks(self):
        return [self.mu, self.t_break]
