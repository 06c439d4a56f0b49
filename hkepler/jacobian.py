"""
This module assembles the analytic sensitivity matrix of a Kepler step.

kepler_jacobian returns the 7x7 matrix J with J[i, j] = d q[i] / d q0[j], where
q = (x, v, k) is the propagated state and q0 = (x0, v0, k) the initial one. The
propagated position and velocity depend on the initial vectors explicitly through the
Gauss functions and implicitly through three scalars: the separation r0, the product
eta0 = x0 . v0 and the energy parameter beta0 (itself a function of r0, |v0| and k).
Implicit differentiation of the universal Kepler equation y(s; r0, eta0, beta0, k) = h
gives ds/d(each scalar) in closed form since dy/ds = r, and those are chain-ruled
through the explicit expressions for x and r v. Derivatives of the G-functions with
respect to beta at fixed s use

    dg1/dbeta = (s g0 - g1) / (2 beta),    dg2/dbeta = (s g1 - 2 g2) / (2 beta),

with g0 = 1 - beta g2 and g3 = (s - g1) / beta. The same expressions hold in both
regimes. The gravitational parameter is conserved by the step, so the last row is the
unit vector e7.
"""

from __future__ import annotations
import numpy as np

from .errors import SingularJacobianError
from .kepler_constants import JACOBIAN_SIZE
from .kepler_types import GaussCoefficients, InitialConditions


__all__ = ["kepler_jacobian"]


def kepler_jacobian(
    ic: InitialConditions,
    s: float,
    gauss: GaussCoefficients,
    r: float,
) -> np.ndarray:
    x0 = ic.x0
    v0 = ic.v0
    r0 = ic.r0
    k = ic.k
    h = ic.h
    beta0 = ic.beta0
    eta0 = ic.eta0
    g1 = gauss.g1
    g2 = gauss.g2

    g0 = 1.0 - beta0 * g2
    g3 = (s - g1) / beta0
    kr02 = k / (r0 * r0)
    half_binv = 0.5 / beta0

    # implicit derivatives of s; beta enters through |v0| as d beta / d v0 = -2 v0
    dsdbeta = (2.0 * h - r0 * (s * g0 + g1) + k / beta0 * (s * g0 - g1) - eta0 * s * g1) * half_binv / r
    dbetadr0 = -2.0 * kr02
    dbetadk = 2.0 / r0
    dsdr0 = dsdbeta * dbetadr0 - g1 / r
    dsda0 = -g2 / r
    dsdk = dsdbeta * dbetadk - g3 / r

    # explicit partials at fixed s and beta
    pxpr0 = kr02 * g2 * x0 + g1 * v0
    pxpa0 = g2 * v0
    pxpk = -g2 / r0 * x0
    pxps = -k / r0 * g1 * x0 + (r0 * g0 + eta0 * g1) * v0
    pxpbeta = (
        -k / r0 * (s * g1 - 2.0 * g2) * half_binv * x0
        + (s * r0 * g0 - r0 * g1 + s * eta0 * g1 - 2.0 * eta0 * g2) * half_binv * v0
    )

    prvpr0 = kr02 * g1 * x0 + g0 * v0
    prvpa0 = g1 * v0
    prvpk = -g1 / r0 * x0
    prvps = -k * g0 / r0 * x0 + (eta0 * g0 - beta0 * r0 * g1) * v0
    prvpbeta = (
        -k / r0 * (s * g0 - g1) * half_binv * x0
        + (eta0 * s * g0 - eta0 * g1 - s * r0 * beta0 * g1) * half_binv * v0
    )

    prpr0 = g0
    prpa0 = g1
    prpk = g2
    prps = (k - beta0 * r0) * g1 + eta0 * g0
    prpbeta = (s * (k - beta0 * r0) * g1 + eta0 * s * g0 - eta0 * g1 - 2.0 * k * g2) * half_binv

    dxdr0 = pxps * dsdr0 + pxpbeta * dbetadr0 + pxpr0
    dxda0 = pxps * dsda0 + pxpa0
    dxdbeta = pxps * dsdbeta + pxpbeta
    dxdk = pxps * dsdk + pxpbeta * dbetadk + pxpk

    drvdr0 = prvps * dsdr0 + prvpbeta * dbetadr0 + prvpr0
    drvda0 = prvps * dsda0 + prvpa0
    drvdbeta = prvps * dsdbeta + prvpbeta
    drvdk = prvps * dsdk + prvpbeta * dbetadk + prvpk

    drdr0 = prpr0 + prps * dsdr0 + prpbeta * dbetadr0
    drda0 = prpa0 + prps * dsda0
    drdbeta = prps * dsdbeta + prpbeta
    drdk = prpk + prps * dsdk + prpbeta * dbetadk

    v = gauss.fdot * x0 + gauss.gdot * v0
    rinv = 1.0 / r
    dvdr0 = (drvdr0 - drdr0 * v) * rinv
    dvda0 = (drvda0 - drda0 * v) * rinv
    dvdbeta = (drvdbeta - drdbeta * v) * rinv
    dvdk = (drvdk - drdk * v) * rinv

    eye = np.eye(3)
    u0 = x0 / r0
    dbetadv0 = -2.0 * v0

    jac = np.zeros((JACOBIAN_SIZE, JACOBIAN_SIZE))
    jac[0:3, 0:3] = gauss.f * eye + np.outer(dxdr0, u0) + np.outer(dxda0, v0)
    jac[0:3, 3:6] = gauss.g * eye + np.outer(dxdbeta, dbetadv0) + np.outer(dxda0, x0)
    jac[3:6, 0:3] = gauss.fdot * eye + np.outer(dvdr0, u0) + np.outer(dvda0, v0)
    jac[3:6, 3:6] = gauss.gdot * eye + np.outer(dvdbeta, dbetadv0) + np.outer(dvda0, x0)
    jac[0:3, 6] = dxdk
    jac[3:6, 6] = dvdk
    jac[6, 6] = 1.0

    if not np.all(np.isfinite(jac)):
        raise SingularJacobianError(f"Jacobian has non-finite entries (r = {r!r}, beta0 = {beta0!r})")
    return jac
