from __future__ import annotations
import math
from typing import Tuple

from .regime_base import KeplerRegime

"""
This module implements the unbound-orbit branch of the universal Kepler solver. The HyperbolicRegime class mirrors EllipticRegime with cosh and sinh of sqrt(-beta0) s, flipping the signs that come from differentiating the hyperbolic functions; the g2 formula therefore reads -2 sinh^2(x/2) / beta0, which is positive for beta0 < 0. sinh is evaluated directly rather than as exp(x) - cosh(x) so that small arguments keep full relative precision. It applies when beta0 lies below the degenerate band.
"""


class HyperbolicRegime(KeplerRegime):
	name = "hyperbolic"

	@staticmethod
	def applies(beta0: float, threshold: float) -> bool:
		return beta0 < -threshold

	def residual_derivatives(
		self,
		s: float,
		fac1: float,
		fac2: float,
		k: float,
		h: float,
	) -> Tuple[float, float, float, float]:
		xx = self.sqb * s
		cx = math.cosh(xx)
		sx = self.sqb * math.sinh(xx)
		yppp = fac1 * cx + fac2 * sx
		yp = (k - yppp) * self.beta0inv
		ypp = fac2 * cx - fac1 * self.beta0inv * sx
		y = (fac2 - ypp + k * s) * self.beta0inv - h
		return y, yp, ypp, yppp

	def half_angle_functions(self, s: float) -> Tuple[float, float, float, float]:
		xx = 0.5 * self.sqb * s
		cx = math.cosh(xx)
		sx = math.sinh(xx)
		g1 = 2.0 * sx * cx / self.sqb
		g2 = -2.0 * sx * sx * self.beta0inv
		return g1, g2, cx, sx
