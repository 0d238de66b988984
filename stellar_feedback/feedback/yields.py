"""Energy, mass, metal, iron and magnesium budgets of a single feedback event."""

from dataclasses import astuple, dataclass, fields

from .. import config
from .units import UnitSystem


@dataclass(frozen=True)
class SNYield:
    """The feedback of one supernova.

    Energy is in internal units; mass, metals, fe and mg are in solar masses per
    solar mass of the stellar population.
    """

    energy: float
    mass: float
    metals: float
    fe: float
    mg: float

    def dump(self, rfile):
        for value in astuple(self):
            rfile.write(value)

    @classmethod
    def from_restart(cls, rfile):
        return cls(*[rfile.read() for _ in fields(cls)])


@dataclass(frozen=True)
class WindYield:
    """The feedback of a stellar wind phase.

    The energy is stored as a rate: the total wind energy divided by end_time,
    both in internal units.
    """

    energy: float
    end_time: float

    def dump(self, rfile):
        rfile.write(self.energy)
        rfile.write(self.end_time)

    @classmethod
    def from_restart(cls, rfile):
        return cls(energy=rfile.read(), end_time=rfile.read())


@dataclass(frozen=True)
class FeedbackYields:
    """Per event feedback for every event type of the model."""

    popii_snii: SNYield
    popii_snia: SNYield
    popii_sw: WindYield
    popiii_sn: SNYield
    popiii_sw: WindYield

    def dump(self, rfile):
        for f in fields(self):
            getattr(self, f.name).dump(rfile)

    @classmethod
    def from_restart(cls, rfile):
        return cls(**{f.name: _YIELD_TYPES[f.name].from_restart(rfile) for f in fields(cls)})


_YIELD_TYPES = {
    "popii_snii": SNYield,
    "popii_snia": SNYield,
    "popii_sw": WindYield,
    "popiii_sn": SNYield,
    "popiii_sw": WindYield,
}


def _sn_yield(params, energy, efficiency, units):
    return SNYield(
        energy=units.energy(energy * efficiency),
        mass=params["mass"],
        metals=params["metals"],
        fe=params["fe"],
        mg=params["mg"],
    )


def _wind_yield(params, efficiency, units):
    energy = units.energy(params["energy"] * efficiency)
    end_time = units.time(params["end_time"])
    return WindYield(energy=energy / end_time, end_time=end_time)


def generate_feedback_yields(
    popiii_energy: float, feedback_efficiency: float = None, units: UnitSystem = None
) -> FeedbackYields:
    """Build the yield table from the literals in config.

    Parameters
    ----------
    popiii_energy: float
        The IMF weighted PopIII SN energy in erg.
    feedback_efficiency: float, optional
        The fraction of every energy given to the gas.
    units: UnitSystem, optional
        Internal units the energies and times are converted to.
    """
    params = config.FEEDBACK_PARAMS
    if feedback_efficiency is None:
        feedback_efficiency = params["feedback_efficiency"]
    if units is None:
        units = UnitSystem()

    return FeedbackYields(
        popii_snii=_sn_yield(
            params["popii_snii"], params["popii_snii"]["energy"], feedback_efficiency, units
        ),
        popii_snia=_sn_yield(
            params["popii_snia"], params["popii_snia"]["energy"], feedback_efficiency, units
        ),
        popii_sw=_wind_yield(params["popii_sw"], feedback_efficiency, units),
        popiii_sn=_sn_yield(params["popiii_sn"], popiii_energy, feedback_efficiency, units),
        popiii_sw=_wind_yield(params["popiii_sw"], feedback_efficiency, units),
    )
