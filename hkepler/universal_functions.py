"""
This module implements regime-agnostic Stiefel-Scheifele universal functions.

stumpff_c evaluates the Stumpff functions c0..c3 of z = beta s^2 by reducing the
argument with repeated quartering until a short Taylor series converges, then
rebuilding the values with the double-angle relations. g_functions turns them into the
G-functions G_n(beta, s) = s^n c_n(beta s^2) that appear in the universal Kepler
equation, and kepler_residual evaluates that equation for an arbitrary anomaly. Unlike
the elliptic and hyperbolic branches these expressions stay well defined at beta = 0,
which makes them a convenient independent check of a converged solve.
"""

from __future__ import annotations
from typing import Tuple

from .kepler_types import InitialConditions


__all__ = ["stumpff_c", "g_functions", "kepler_residual"]


def _series(z: float, offset: int) -> float:
    term = 1.0
    for n in range(2, offset + 1):
        term /= n
    total = term
    for n in range(1, 8):
        term *= -z / ((2 * n + offset - 1) * (2 * n + offset))
        total += term
    return total


def stumpff_c(z: float) -> Tuple[float, float, float, float]:
    z = float(z)
    n = 0
    while abs(z) > 0.1:
        z *= 0.25
        n += 1
    c0 = _series(z, 0)
    c1 = _series(z, 1)
    c2 = _series(z, 2)
    c3 = _series(z, 3)
    while n:
        c0, c1, c2, c3 = (
            2.0 * c0 * c0 - 1.0,
            c0 * c1,
            0.5 * c1 * c1,
            0.25 * (c2 + c0 * c3),
        )
        n -= 1
    return c0, c1, c2, c3


def g_functions(beta: float, s: float) -> Tuple[float, float, float, float]:
    s = float(s)
    c0, c1, c2, c3 = stumpff_c(beta * s * s)
    s2 = s * s
    return c0, s * c1, s2 * c2, s2 * s * c3


def kepler_residual(ic: InitialConditions, s: float) -> float:
    _, g1, g2, g3 = g_functions(ic.beta0, s)
    return ic.r0 * g1 + ic.eta0 * g2 + ic.k * g3 - ic.h
