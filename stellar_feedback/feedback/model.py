"""
The statistical model behind discrete stellar feedback.

For a stellar population of given mass formed at a single instant, the model
holds everything needed to decide how many SNe of each type go off, when,
with which progenitor masses, and how much energy, mass, metals, iron and
magnesium each event returns to the gas:

- the Population II (Chabrier) and Population III (Susa) IMFs, and their
  number and mass integrals;
- the normalised SNIa delay time distribution;
- cumulative tables of the SNIa delay times and of the PopIII IMF, used for
  inverse transform sampling;
- stellar lifetime and PopIII SN energy lookup tables;
- the per event feedback yields.

A model is either derived from scratch with `initialize()`, which runs all
quadratures, or restored from a restart file with `from_restart()`, which
reads the derived values back verbatim. Both give the same model.

Example
-------
>>> model = DiscreteStellarFeedback.initialize()
>>> model.save("feedback.restart")
>>> restored = DiscreteStellarFeedback.load("feedback.restart")
>>> restored == model
>>> True
"""

import logging

import numpy as np

from .. import config
from ..io import load_tables
from ..io.restart_file import RestartFile
from ..numerics.integrate import integrate
from ..numerics.interpolator import Interpolator
from ..utils import error_handling
from ..utils.array_utils import as_result
from . import yields as feedback_yields
from .delay_time import SNIaDelayTime
from .imf import ChabrierIMF, SusaIMF
from .units import UnitSystem

logger = logging.getLogger(__name__)

# Order of the scalars in a restart file. Changing it breaks existing files.
PARAMETER_NAMES = (
    "popii_m_low",
    "popii_m_upp",
    "popii_fac_imf",
    "popii_m_snii_low",
    "popii_m_snia_low",
    "popii_m_snia_upp",
    "popii_snia_delay_mu",
    "popii_snia_delay_sigma",
    "popii_snia_delay_norm1",
    "popii_snia_delay_norm2",
    "popiii_cutoff",
    "popiii_m_low",
    "popiii_m_upp",
    "popiii_m_sn_low",
    "popiii_m1",
    "popiii_m2",
    "popiii_m3",
    "popiii_fac",
    "popiii_pw",
    "popii_mint",
    "popii_niiint",
    "popii_niaint",
    "popiii_mint",
    "popiii_nint",
    "popiii_eint",
)

# Order of the splines in a restart file, written after the scalars.
SPLINE_NAMES = (
    "snia_delay_spline",
    "popiii_imf_spline",
    "popii_lifetime_spline",
    "popiii_lifetime_spline",
    "popiii_e_sn_spline",
)


class DiscreteStellarFeedback(object):
    """The feedback model. Treat instances as read-only once constructed.

    Attributes
    ----------
    popii: ChabrierIMF
        The Population II IMF.
    snia_delay: SNIaDelayTime
        The normalised SNIa delay time distribution.
    popiii: SusaIMF
        The Population III IMF.
    popii_mint, popii_niiint, popii_niaint: float
        Mass, number of SNII progenitors and number of SNIa progenitors of
        the unnormalised PopII IMF.
    popiii_mint, popiii_nint, popiii_eint: float
        Mass, number of SN progenitors and total SN energy (erg) of the
        unnormalised PopIII IMF.
    snia_delay_spline: Interpolator
        Cumulative DTD against log10(t / Gyr).
    popiii_imf_spline: Interpolator
        Number of PopIII stars above m against log10(m).
    popii_lifetime_spline, popiii_lifetime_spline: Interpolator
        Log10 lifetimes against mass.
    popiii_e_sn_spline: Interpolator
        PopIII SN energy (1e51 erg) against mass.
    yields: FeedbackYields
        Per event energies and ejecta.
    """

    def __init__(
        self,
        popii,
        snia_delay,
        popiii,
        integrals,
        splines,
        yields,
    ):
        self.popii = popii
        self.snia_delay = snia_delay
        self.popiii = popiii
        self.popii_mint = integrals["popii_mint"]
        self.popii_niiint = integrals["popii_niiint"]
        self.popii_niaint = integrals["popii_niaint"]
        self.popiii_mint = integrals["popiii_mint"]
        self.popiii_nint = integrals["popiii_nint"]
        self.popiii_eint = integrals["popiii_eint"]
        for name in SPLINE_NAMES:
            setattr(self, name, splines[name])
        self.yields = yields

    @classmethod
    def initialize(cls, feedback_efficiency=None, units: UnitSystem = None, tolerance=None):
        """Derive the model, running every quadrature and building every spline.

        Parameters
        ----------
        feedback_efficiency: float, optional
            Fraction of every energy given to the gas; defaults to config.
        units: UnitSystem, optional
            Internal units of the stored energies and times.
        tolerance: float, optional
            Quadrature tolerance; defaults to config.

        Raises
        ------
        IntegrationError: If any quadrature fails to converge.
        InterpolationError: If any spline cannot be built.
        """
        if tolerance is None:
            tolerance = config.INTEGRATION_PARAMS["tolerance"]

        popii = ChabrierIMF()
        snia_delay = SNIaDelayTime()
        popiii = SusaIMF()

        integrals = {
            "popii_mint": popii.integrate_mass(popii.mass_min, popii.mass_max, tolerance),
            "popii_niiint": popii.integrate(popii.mass_min_snii, popii.mass_max, tolerance),
            "popii_niaint": popii.integrate(popii.mass_min_snia, popii.mass_max_snia, tolerance),
            "popiii_mint": popiii.integrate_mass(popiii.mass_min, popiii.mass_max, tolerance),
            "popiii_nint": popiii.integrate(popiii.mass_min_sn, popiii.mass_max, tolerance),
        }
        logger.debug("IMF integrals: %s", integrals)

        snia_delay.normalise(tolerance)

        splines = {
            "snia_delay_spline": Interpolator(
                *snia_delay.cumulative_knots(tolerance=tolerance), kind="cubic"
            ),
            "popiii_imf_spline": Interpolator(
                *popiii.cumulative_knots(tolerance=tolerance), kind="linear"
            ),
        }
        _check_monotonic(splines["snia_delay_spline"], increasing=True)
        _check_monotonic(splines["popiii_imf_spline"], increasing=False)

        lifetimes = load_tables.read_popii_lifetimes()
        splines["popii_lifetime_spline"] = Interpolator(
            lifetimes["mass"], lifetimes["log_lifetime"], kind="cubic"
        )
        lifetimes = load_tables.read_popiii_lifetimes()
        splines["popiii_lifetime_spline"] = Interpolator(
            lifetimes["mass"], lifetimes["log_lifetime"], kind="cubic"
        )
        energies = load_tables.read_popiii_sn_energy()
        splines["popiii_e_sn_spline"] = Interpolator(
            energies["mass"], energies["energy"], kind="linear"
        )

        e_sn = splines["popiii_e_sn_spline"]
        integrals["popiii_eint"] = integrate(
            lambda m: 1.0e51 * e_sn(m) * popiii.functional_form(m),
            popiii.mass_min_sn,
            popiii.mass_max,
            tolerance=tolerance,
            points=list(e_sn.xs) + [10.0**popiii.log_m2],
        )

        yields = feedback_yields.generate_feedback_yields(
            integrals["popiii_eint"], feedback_efficiency=feedback_efficiency, units=units
        )

        model = cls(popii, snia_delay, popiii, integrals, splines, yields)
        logger.info(
            "Derived discrete feedback model: %.4g SNII, %.4g SNIa and %.4g PopIII SNe per "
            "solar mass",
            model.expected_snii_number(1.0),
            model.expected_snia_number(1.0),
            model.expected_popiii_sn_number(1.0),
        )
        return model

    @classmethod
    def from_restart(cls, rfile):
        """Restore a model written by `dump()` from an open RestartFile.

        Raises
        ------
        RestartFileError: If the file is truncated or malformed.
        """
        p = {name: rfile.read() for name in PARAMETER_NAMES}
        splines = {name: Interpolator.from_restart(rfile) for name in SPLINE_NAMES}
        yields = feedback_yields.FeedbackYields.from_restart(rfile)

        popii = ChabrierIMF(
            mass_min=p["popii_m_low"],
            mass_max=p["popii_m_upp"],
            mass_min_snii=p["popii_m_snii_low"],
            mass_min_snia=p["popii_m_snia_low"],
            mass_max_snia=p["popii_m_snia_upp"],
            fac_imf=p["popii_fac_imf"],
        )
        snia_delay = SNIaDelayTime(
            mu=p["popii_snia_delay_mu"],
            sigma=p["popii_snia_delay_sigma"],
            norm1=p["popii_snia_delay_norm1"],
            norm2=p["popii_snia_delay_norm2"],
        )
        popiii = SusaIMF(
            mass_min=p["popiii_m_low"],
            mass_max=p["popiii_m_upp"],
            mass_min_sn=p["popiii_m_sn_low"],
            log_m1=p["popiii_m1"],
            log_m2=p["popiii_m2"],
            log_m3=p["popiii_m3"],
            fac=p["popiii_fac"],
            pw=p["popiii_pw"],
            log_z_cutoff=p["popiii_cutoff"],
        )
        integrals = {name: p[name] for name in PARAMETER_NAMES if name.endswith("int")}

        logger.info("Restored discrete feedback model from %s", getattr(rfile, "path", rfile))
        return cls(popii, snia_delay, popiii, integrals, splines, yields)

    def dump(self, rfile):
        """Write the model to an open RestartFile."""
        for value in self.parameters().values():
            rfile.write(value)
        for name in SPLINE_NAMES:
            getattr(self, name).dump(rfile)
        self.yields.dump(rfile)

    def save(self, path):
        with RestartFile(path, "w") as rfile:
            self.dump(rfile)

    @classmethod
    def load(cls, path):
        with RestartFile(path, "r") as rfile:
            return cls.from_restart(rfile)

    def parameters(self) -> dict:
        """Every scalar of the model, in restart file order."""
        popii, dtd, popiii = self.popii, self.snia_delay, self.popiii
        values = (
            popii.mass_min,
            popii.mass_max,
            popii.fac_imf,
            popii.mass_min_snii,
            popii.mass_min_snia,
            popii.mass_max_snia,
            dtd.mu,
            dtd.sigma,
            dtd.norm1,
            dtd.norm2,
            popiii.log_z_cutoff,
            popiii.mass_min,
            popiii.mass_max,
            popiii.mass_min_sn,
            popiii.log_m1,
            popiii.log_m2,
            popiii.log_m3,
            popiii.fac,
            popiii.pw,
            self.popii_mint,
            self.popii_niiint,
            self.popii_niaint,
            self.popiii_mint,
            self.popiii_nint,
            self.popiii_eint,
        )
        return {name: float(value) for name, value in zip(PARAMETER_NAMES, values)}

    def __eq__(self, other):
        if not isinstance(other, DiscreteStellarFeedback):
            return NotImplemented
        return (
            self.parameters() == other.parameters()
            and all(getattr(self, n).same_knots(getattr(other, n)) for n in SPLINE_NAMES)
            and self.yields == other.yields
        )

    # Densities

    def popii_imf(self, m):
        return self.popii.functional_form(m)

    def popii_mimf(self, m):
        return self.popii.mass_weighted(m)

    def popiii_imf(self, m):
        return self.popiii.functional_form(m)

    def popiii_mimf(self, m):
        return self.popiii.mass_weighted(m)

    def snia_delay_time(self, t):
        return self.snia_delay.functional_form(t)

    def popiii_e_sn(self, m):
        """Energy (erg) of a PopIII SN with progenitor mass m."""
        return as_result(1.0e51 * np.asarray(self.popiii_e_sn_spline(m)))

    def popiii_eimf(self, m):
        return as_result(np.asarray(self.popiii_e_sn(m)) * np.asarray(self.popiii_imf(m)))

    # Lookups

    def popii_lifetime(self, mass):
        """Lifetime in Gyr of a PopII star of the given mass."""
        return as_result(10.0 ** (np.asarray(self.popii_lifetime_spline(mass)) - 9.0))

    def popiii_lifetime(self, mass):
        """Lifetime in Gyr of a PopIII star of the given mass."""
        return as_result(10.0 ** np.asarray(self.popiii_lifetime_spline(mass)))

    def snia_cumulative_delay(self, t):
        """Fraction of SNeIa that have gone off t Gyr after star formation."""
        with np.errstate(divide="ignore"):
            return self.snia_delay_spline(np.log10(t))

    def popiii_number_above(self, m):
        """Number of PopIII stars above mass m, unnormalised."""
        with np.errstate(divide="ignore"):
            return self.popiii_imf_spline(np.log10(m))

    def forms_popiii(self, log_z) -> bool:
        return self.popiii.forms_in(log_z)

    # Expected event numbers

    def expected_snii_number(self, total_mass: float) -> float:
        """Expected number of SNII from a PopII population of total_mass."""
        return total_mass / self.popii_mint * self.popii_niiint

    def expected_snia_number(self, total_mass: float) -> float:
        """Expected number of SNIa from a PopII population of total_mass."""
        return total_mass / self.popii_mint * self.popii_niaint

    def expected_popiii_sn_number(self, total_mass: float) -> float:
        """Expected number of SNe from a PopIII population of total_mass."""
        return total_mass / self.popiii_mint * self.popiii_nint

    def do_feedback(self, star, particles, dt):
        """Give the feedback of star to the surrounding gas particles over dt."""
        raise error_handling.NotImplementedError(
            "Depositing discrete feedback onto gas particles is not implemented."
        )


def _check_monotonic(spline: Interpolator, increasing: bool):
    steps = np.diff(spline.ys)
    ok = np.all(steps >= 0.0) if increasing else np.all(steps <= 0.0)
    if not ok:
        direction = "non-decreasing" if increasing else "non-increasing"
        raise error_handling.ProgramError(
            f"Cumulative table is not {direction}; the sampler would be ill defined."
        )
