"""Adaptive quadrature, wrapping scipy.integrate.quad."""

import logging
from typing import Callable, Optional, Sequence
import warnings

import numpy as np
from scipy import integrate as sp_integrate

from .. import config
from ..utils import error_handling

logger = logging.getLogger(__name__)

TOLERANCE = config.INTEGRATION_PARAMS["tolerance"]
LIMIT = config.INTEGRATION_PARAMS["limit"]


def integrate(
    func: Callable[[float], float],
    lower: float,
    upper: float,
    tolerance: float = TOLERANCE,
    points: Optional[Sequence[float]] = None,
    limit: int = LIMIT,
) -> float:
    """Integrate func from lower to upper to the given tolerance.

    The tolerance is applied both as absolute and relative error bound, so the
    integral is accepted once the error estimate is below
    max(tolerance, tolerance * |result|).

    Parameters
    ----------
    func: Callable
        The integrand, called with a single float.
    lower, upper: float
        The integration limits.
    tolerance: float
        Requested accuracy.
    points: Sequence[float], optional
        Locations of kinks or discontinuities of the integrand. Points outside
        the open interval (lower, upper) are ignored.
    limit: int
        Maximum number of subintervals.

    Returns
    -------
    float
        The value of the integral.

    Raises
    ------
    IntegrationError: If the requested tolerance cannot be reached.
    """
    if upper == lower:
        return 0.0

    lo, hi = min(lower, upper), max(lower, upper)
    if points is not None:
        points = sorted(p for p in points if lo < p < hi)
        if len(points) == 0:
            points = None

    with warnings.catch_warnings():
        warnings.simplefilter("error", sp_integrate.IntegrationWarning)
        try:
            result, abserr = sp_integrate.quad(
                func,
                lower,
                upper,
                epsabs=tolerance,
                epsrel=tolerance,
                limit=limit,
                points=points,
            )
        except sp_integrate.IntegrationWarning as warning:
            raise error_handling.IntegrationError(
                f"Integral over [{lower}, {upper}] did not converge to {tolerance}: {warning}"
            ) from warning

    if not np.isfinite(result):
        raise error_handling.IntegrationError(
            f"Integral over [{lower}, {upper}] is not finite ({result})."
        )
    logger.debug("Integral over [%g, %g] = %g (error estimate %.2e)", lower, upper, result, abserr)

    return float(result)
