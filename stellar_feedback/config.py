"""Configuration parameters of the discrete stellar feedback model.

Values follow the Chabrier (2003) Population II IMF, the Mannucci et al.
(2006) SNIa delay time distribution, the Susa et al. (2014) Population III
IMF and the Heger & Woosley (2002) Population III SN energies.

Masses are in solar masses, SNIa delay times in Gyr, stellar wind durations
in Myr and energies in erg.
"""

import os

import numpy as np

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")

# Tabulated knots for the lookup splines.
FILEPATHS = {
    "popii_lifetimes": os.path.join(DATA_DIR, "popii_lifetimes.csv"),
    "popiii_lifetimes": os.path.join(DATA_DIR, "popiii_lifetimes.csv"),
    "popiii_sn_energy": os.path.join(DATA_DIR, "popiii_sn_energy.csv"),
}

POPII_IMF_PARAMS = {
    "mass_min": 0.07,  # solar masses, minimum stellar mass.
    "mass_max": 100.0,  # solar masses, maximum stellar mass.
    "mass_min_snii": 8.0,  # solar masses, minimum mass of a SNII progenitor.
    "mass_min_snia": 3.0,  # solar masses, lower limit of SNIa progenitors.
    "mass_max_snia": 8.0,  # solar masses, upper limit of SNIa progenitors.
}

SNIA_DELAY_PARAMS = {
    "mu": 0.05,  # Gyr, centre of the prompt (Gaussian) component.
    "sigma": 0.01,  # Gyr, width of the prompt component.
    "t_min": 0.03,  # Gyr, shortest delay time.
    "t_max": 13.6,  # Gyr, longest delay time.
    "frac_prompt": 0.4,  # fraction of SNeIa in the prompt component.
    "frac_tardy": 0.6,  # fraction of SNeIa in the tardy component.
    "t_break": 0.25,  # Gyr, peak of the tardy component.
    "rise_scale": 0.1,  # Gyr, e-folding time before the peak.
    "decay_scale": 7.0,  # Gyr, e-folding time after the peak.
    "log_step": 0.1,  # step in log10(t) of the cumulative table.
    "log_t_end": np.log10(13.8),  # last knot of the cumulative table.
    "pad_offset": -2.0,  # abscissa of the leading padding knot.
}

POPIII_IMF_PARAMS = {
    "mass_min": 0.7,  # solar masses, minimum stellar mass.
    "mass_max": 500.0,  # solar masses, maximum stellar mass.
    "mass_min_sn": 10.0,  # solar masses, minimum mass of a PopIII SN progenitor.
    "log_mass_peak": 1.51130759,  # log10 of the mass where the IMF peaks.
    "fac": 708.92544818,  # fitted scale factor.
    "pw": 2.8008394,  # fitted shape exponent.
    "log_z_cutoff": -5.0,  # metallicity below which PopIII stars form.
    "log_step": 0.01,  # step in log10(m) of the cumulative table.
    "log_m_end": 3.0,  # last knot of the cumulative table.
    "pad_offset": -2.0,  # abscissa of the leading padding knot.
}

FEEDBACK_PARAMS = {
    "feedback_efficiency": 0.7,  # fraction of the SN energy given to the gas.
    "popii_snii": {
        "energy": 1.0e51,  # erg
        "mass": 0.191445322565,
        "metals": 0.0241439721018,
        "fe": 0.000932719658516,
        "mg": 0.00151412640705,
    },
    "popii_snia": {
        "energy": 1.0e51,  # erg
        "mass": 0.00655147325196,
        "metals": 0.00655147325196,
        "fe": 0.00165100587997,
        "mg": 0.000257789470044,
    },
    # PopIII SN energy is the IMF weighted integral of the SN energy table.
    "popiii_sn": {
        "mass": 0.45,
        "metals": 0.026,
        "fe": 0.0000932719658516,
        "mg": 0.000151412640705,
    },
    "popii_sw": {
        "energy": 1.0e50,  # erg, total over the wind phase.
        "end_time": 31.0,  # Myr
    },
    "popiii_sw": {
        "energy": 1.0e51,  # erg, total over the wind phase.
        "end_time": 16.7,  # Myr
    },
}

INTEGRATION_PARAMS = {
    "tolerance": 1.0e-8,
    "limit": 1000,  # maximum number of subintervals in the adaptive quadrature.
}

# Internal units of the host simulation, expressed in erg and Myr.
UNITS = {
    "energy_in_erg": 1.0,
    "time_in_myr": 1.0,
}
