"""
Load the tabulated knots of the lookup splines from CSV files.
"""
import numpy as np
import pandas as pd

from .. import config


def read_knot_csv(filepath: str, columns: tuple) -> pd.DataFrame:
    """Reads a two-column knot table and checks it can be interpolated.

    Parameters
    ----------
    filepath: str
        Path to a CSV file; lines starting with '#' are ignored.
    columns: tuple
        The expected (abscissa, ordinate) column names.

    Returns
    -------
    pd.DataFrame
        The knot table, in file order.

    Raises
    ------
    ValueError: If the columns are missing, hold NaNs, or the abscissas are
        not strictly increasing.
    """
    # round_trip parsing keeps literals like 140.0000000001 bitwise exact
    df = pd.read_csv(filepath, comment="#", float_precision="round_trip")

    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise ValueError(f"Columns {missing} not found in {filepath}.")
    df = df[list(columns)].astype(float)

    if df.isna().any().any():
        raise ValueError(f"Missing values in the knot table {filepath}.")
    if not np.all(np.diff(df[columns[0]]) > 0.0):
        raise ValueError(f"Column '{columns[0]}' in {filepath} must be strictly increasing.")

    return df


def read_popii_lifetimes() -> pd.DataFrame:
    """Population II lifetimes; mass in solar masses, log10(lifetime / yr)."""
    return read_knot_csv(config.FILEPATHS["popii_lifetimes"], ("mass", "log_lifetime"))


def read_popiii_lifetimes() -> pd.DataFrame:
    """Population III lifetimes; mass in solar masses, log10(lifetime / Gyr)."""
    return read_knot_csv(config.FILEPATHS["popiii_lifetimes"], ("mass", "log_lifetime"))


def read_popiii_sn_energy() -> pd.DataFrame:
    """Population III SN energies; mass in solar masses, energy in 1e51 erg."""
    return read_knot_csv(config.FILEPATHS["popiii_sn_energy"], ("mass", "energy"))
