"""Conversion from physical units to the internal units of the host simulation."""

from dataclasses import dataclass

from .. import config


@dataclass(frozen=True)
class UnitSystem:
    """The internal units of the host simulation.

    Attributes
    ----------
    energy_in_erg: float
        One internal energy unit, in erg.
    time_in_myr: float
        One internal time unit, in Myr.
    """

    energy_in_erg: float = config.UNITS["energy_in_erg"]
    time_in_myr: float = config.UNITS["time_in_myr"]

    def __post_init__(self):
        if not (self.energy_in_erg > 0.0 and self.time_in_myr > 0.0):
            raise ValueError(
                f"Unit conversion factors must be positive; energy_in_erg = "
                f"{self.energy_in_erg} and time_in_myr = {self.time_in_myr}"
            )

    def energy(self, erg: float) -> float:
        return erg / self.energy_in_erg

    def time(self, myr: float) -> float:
        return myr / self.time_in_myr
