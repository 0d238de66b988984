"""The initial mass functions of Population II and Population III stars.

Both IMFs are unnormalised number densities, dN/dm, that vanish outside
their mass interval. Normalisation is done by the feedback model, which
divides by the mass integral of the IMF.
"""

import numpy as np

from .. import config
from ..numerics.integrate import integrate
from ..utils.array_utils import as_result


class ChabrierIMF(object):
    """
    Population II IMF of Chabrier (2003): a log-normal below 1 solar mass and
    a power law phi(m) ~ m**-2.3 above.

    The log-normal part is scaled by `fac_imf` so that both parts equal 1 at
    m = 1.

    Attributes
    ----------
    mass_min: float
        The minimum stellar mass, in solar masses.
    mass_max: float
        The maximum stellar mass, in solar masses.
    mass_min_snii: float
        The minimum mass of a SNII progenitor.
    mass_min_snia: float
        The lower limit of the SNIa progenitor mass window.
    mass_max_snia: float
        The upper limit of the SNIa progenitor mass window.
    fac_imf: float
        Normalisation factor of the log-normal part.
    """

    slope = 2.3
    m_break = 1.0

    def __init__(
        self,
        mass_min=None,
        mass_max=None,
        mass_min_snii=None,
        mass_min_snia=None,
        mass_max_snia=None,
        fac_imf=None,
    ):
        params = config.POPII_IMF_PARAMS
        self.mass_min = params["mass_min"] if mass_min is None else mass_min
        self.mass_max = params["mass_max"] if mass_max is None else mass_max
        self.mass_min_snii = params["mass_min_snii"] if mass_min_snii is None else mass_min_snii
        self.mass_min_snia = params["mass_min_snia"] if mass_min_snia is None else mass_min_snia
        self.mass_max_snia = params["mass_max_snia"] if mass_max_snia is None else mass_max_snia
        if fac_imf is None:
            fac_imf = 1.0 / self.low_mass_shape(self.m_break)
        self.fac_imf = fac_imf

    @staticmethod
    def low_mass_shape(m):
        """The unscaled log-normal part of the IMF."""
        a = np.log10(m) + 1.1024
        return as_result(np.exp(-0.5 * (a * a / 0.4761)) / m)

    def functional_form(self, m):
        """
        Returns the value of the IMF at the specified m
        """
        m = np.asarray(m, dtype=float)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            low = self.fac_imf * self.low_mass_shape(m)
            high = m ** (-self.slope)
            result = np.where(m < self.m_break, low, high)
        result = np.where((m > self.mass_min) & (m < self.mass_max), result, 0.0)

        return as_result(result)

    def mass_weighted(self, m):
        """The integrand of the mass integral, m * phi(m)."""
        return as_result(np.asarray(m, dtype=float) * self.functional_form(m))

    def integrate(self, lower, upper, tolerance=None):
        """
        Integrates the IMF between the specified lower and upper values.
        """
        tolerance = config.INTEGRATION_PARAMS["tolerance"] if tolerance is None else tolerance
        return integrate(
            self.functional_form, lower, upper, tolerance=tolerance, points=self._breaks()
        )

    def integrate_mass(self, lower, upper, tolerance=None):
        """Integrates m * phi(m) between lower and upper."""
        tolerance = config.INTEGRATION_PARAMS["tolerance"] if tolerance is None else tolerance
        return integrate(
            self.mass_weighted, lower, upper, tolerance=tolerance, points=self._breaks()
        )

    def _breaks(self):
        return [self.mass_min, self.m_break, self.mass_max]


class SusaIMF(object):
    """
    Population III IMF, a fit to the simulated protostellar masses of
    Susa et al. (2014).

    With x = log10(m) rescaled to a tent function s(x) that rises linearly from
    0 at log_m1 to 0.5 at log_m2 and falls back to 0 at log_m3 + (log_m3 - log_m2),
    phi(m) = fac * (s * (1 - s))**pw / m.

    Attributes
    ----------
    mass_min, mass_max: float
        The mass interval of the IMF, in solar masses.
    mass_min_sn: float
        The minimum mass of a PopIII SN progenitor.
    log_m1, log_m2, log_m3: float
        Breakpoints of the tent function in log10(m).
    fac: float
        Fitted scale factor.
    pw: float
        Fitted shape exponent.
    log_z_cutoff: float
        Metallicity below which stars form with this IMF.
    """

    def __init__(
        self,
        mass_min=None,
        mass_max=None,
        mass_min_sn=None,
        log_m1=None,
        log_m2=None,
        log_m3=None,
        fac=None,
        pw=None,
        log_z_cutoff=None,
    ):
        params = config.POPIII_IMF_PARAMS
        self.mass_min = params["mass_min"] if mass_min is None else mass_min
        self.mass_max = params["mass_max"] if mass_max is None else mass_max
        self.mass_min_sn = params["mass_min_sn"] if mass_min_sn is None else mass_min_sn
        self.log_m1 = np.log10(self.mass_min) if log_m1 is None else log_m1
        self.log_m2 = params["log_mass_peak"] if log_m2 is None else log_m2
        self.log_m3 = np.log10(self.mass_max) if log_m3 is None else log_m3
        self.fac = params["fac"] if fac is None else fac
        self.pw = params["pw"] if pw is None else pw
        self.log_z_cutoff = params["log_z_cutoff"] if log_z_cutoff is None else log_z_cutoff

    def functional_form(self, m):
        """
        Returns the value of the IMF at the specified m
        """
        m = np.asarray(m, dtype=float)
        log_m1, log_m2, log_m3 = self.log_m1, self.log_m2, self.log_m3
        with np.errstate(divide="ignore", invalid="ignore"):
            logm = np.log10(m)
            tent = np.where(
                logm < log_m2,
                0.5 * (logm - log_m1) / (log_m2 - log_m1),
                0.5 * (logm + log_m3 - 2.0 * log_m2) / (log_m3 - log_m2),
            )
            base = tent * (1.0 - tent)
            # a negative base has no real power
            imf = self.fac * np.where(base > 0.0, base, 0.0) ** self.pw
            result = np.where(imf > 0.0, imf / m, 0.0)
        result = np.where((m > self.mass_min) & (m < self.mass_max), result, 0.0)

        return as_result(result)

    def mass_weighted(self, m):
        """The integrand of the mass integral, m * phi(m)."""
        return as_result(np.asarray(m, dtype=float) * self.functional_form(m))

    def integrate(self, lower, upper, tolerance=None):
        """
        Integrates the IMF between the specified lower and upper values.
        """
        tolerance = config.INTEGRATION_PARAMS["tolerance"] if tolerance is None else tolerance
        return integrate(
            self.functional_form, lower, upper, tolerance=tolerance, points=self._breaks()
        )

    def integrate_mass(self, lower, upper, tolerance=None):
        """Integrates m * phi(m) between lower and upper."""
        tolerance = config.INTEGRATION_PARAMS["tolerance"] if tolerance is None else tolerance
        return integrate(
            self.mass_weighted, lower, upper, tolerance=tolerance, points=self._breaks()
        )

    def forms_in(self, log_z) -> bool:
        """True if gas with metallicity log_z forms Population III stars."""
        return bool(log_z < self.log_z_cutoff)

    def cumulative_knots(self, log_step=None, log_m_end=None, pad_offset=None, tolerance=None):
        """Tabulate the number of stars above m, N(>m), on a grid in log10(m).

        The grid runs from log10(mass_min) in steps of log_step up to (not
        including) log10(mass_max). It is padded with a leading knot at
        pad_offset holding the integral over the whole IMF, and two trailing
        knots at log10(mass_max) and log_m_end holding zero.

        N(>m) is accumulated from the top down, one grid interval at a time,
        so the ordinates are non-increasing.

        Returns
        -------
        (np.ndarray, np.ndarray)
            The knots in log10(m) and the corresponding N(>m).
        """
        params = config.POPIII_IMF_PARAMS
        log_step = params["log_step"] if log_step is None else log_step
        log_m_end = params["log_m_end"] if log_m_end is None else log_m_end
        pad_offset = params["pad_offset"] if pad_offset is None else pad_offset

        log_ms = np.arange(np.log10(self.mass_min), np.log10(self.mass_max), log_step)
        edges = np.append(10.0**log_ms, self.mass_max)
        pieces = np.array(
            [self.integrate(lo, hi, tolerance) for lo, hi in zip(edges[:-1], edges[1:])]
        )
        survival = np.cumsum(pieces[::-1])[::-1]
        total = self.integrate(0.0, edges[0], tolerance) + survival[0]

        xs = np.concatenate(([pad_offset], log_ms, [np.log10(self.mass_max), log_m_end]))
        ys = np.concatenate(([total], survival, [0.0, 0.0]))

        return xs, ys

    def _breaks(self):
        return [self.mass_min, 10.0**self.log_m2, self.mass_max]
