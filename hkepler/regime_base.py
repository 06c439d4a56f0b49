"""
This abstract base class defines the interface for the two branches of the universal Kepler solver.

The KeplerRegime class holds the energy parameter beta0 of the orbit and provides the
shared finalisation step: given the converged generalized anomaly it asks the concrete
regime for its half-angle functions, builds the Stumpff-like scalars g1(s) and g2(s) and
assembles the Gauss f and g functions. Subclasses supply residual_derivatives, which
evaluates the Kepler-equation residual and its first three derivatives with respect to
s, and half_angle_functions. It serves as the foundation for the elliptic and hyperbolic
implementations, keeping the iteration skeleton identical for both. The class assumes
beta0 has already been checked against the degenerate near-parabolic band.
"""

from __future__ import annotations
import math
from typing import Tuple

from .kepler_types import GaussCoefficients, InitialConditions


class KeplerRegime:
	name: str = "base"

	def __init__(self, beta0: float) -> None:
		self.beta0 = float(beta0)
		self.beta0inv = 1.0 / self.beta0
		self.sqb = math.sqrt(abs(self.beta0))

	@staticmethod
	def applies(beta0: float, threshold: float) -> bool:
		raise NotImplementedError

	def residual_derivatives(
		self,
		s: float,
		fac1: float,
		fac2: float,
		k: float,
		h: float,
	) -> Tuple[float, float, float, float]:
		raise NotImplementedError

	def half_angle_functions(self, s: float) -> Tuple[float, float, float, float]:
		raise NotImplementedError

	def gauss_position(self, ic: InitialConditions, s: float) -> Tuple[float, float, float, float, float, float]:
		g1, g2, cx, sx = self.half_angle_functions(s)
		f = 1.0 - ic.k / ic.r0 * g2
		g = ic.r0 * g1 + ic.eta0 * g2
		return f, g, g1, g2, cx, sx

	def gauss_velocity(self, ic: InitialConditions, r: float, g1: float, g2: float) -> Tuple[float, float]:
		rinv = 1.0 / r
		fdot = -ic.k * g1 * rinv / ic.r0
		gdot = ic.r0 * (1.0 - self.beta0 * g2 + ic.dr0dt * g1) * rinv
		return fdot, gdot

	def finalize(self, ic: InitialConditions, s: float, r: float, position_terms) -> GaussCoefficients:
		f, g, g1, g2, cx, sx = position_terms
		fdot, gdot = self.gauss_velocity(ic, r, g1, g2)
		return GaussCoefficients(f=f, g=g, fdot=fdot, gdot=gdot, g1=g1, g2=g2, cx=cx, sx=sx)

	def __repr__(self) -> str:
		return f"{type(self).__name__}(beta0={self.beta0!r})"
