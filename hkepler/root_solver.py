"""
Quartic Newton-type correction for a scalar root-finding problem.

Given the residual y of an equation y(s) = 0 and its first three derivatives at the
current estimate, quartic_correction returns ds such that s + ds approximates the root
to fourth order. The expression follows the Murray & Dermott treatment of the Kepler
equation and is rearranged so that only one division is performed.
"""

from __future__ import annotations
import math

from .errors import SingularJacobianError
from .kepler_constants import ONE_THIRD


__all__ = ["quartic_correction"]


def quartic_correction(y: float, yp: float, ypp: float, yppp: float) -> float:
    num = y * yp
    den1 = yp * yp - 0.5 * y * ypp
    den12 = den1 * den1
    den2 = yp * den12 - 0.5 * num * (ypp * den1 - ONE_THIRD * num * yppp)
    if den2 == 0.0 or not math.isfinite(den2):
        raise SingularJacobianError(
            f"quartic correction denominator is singular (den2 = {den2!r}, y' = {yp!r})",
            den2=den2,
        )
    ds = -y * den12 / den2
    if not math.isfinite(ds):
        raise SingularJacobianError(
            f"quartic correction overflowed (den2 = {den2:.3e})",
            den2=den2,
        )
    return ds
