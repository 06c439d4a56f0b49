from __future__ import annotations
import math
from typing import Tuple

from .regime_base import KeplerRegime

"""
This module implements the bound-orbit branch of the universal Kepler solver. The EllipticRegime class evaluates the residual of the Wisdom-Hernandez universal Kepler equation and its first three derivatives with sine and cosine of sqrt(beta0) s, and finalises the converged anomaly with half-angle identities so that g2 = 2 sin^2(x/2) / beta0 is free of the cancellation in 1 - cos(x). It applies when beta0 lies above the degenerate band.
"""


class EllipticRegime(KeplerRegime):
	name = "elliptic"

	@staticmethod
	def applies(beta0: float, threshold: float) -> bool:
		return beta0 > threshold

	def residual_derivatives(
		self,
		s: float,
		fac1: float,
		fac2: float,
		k: float,
		h: float,
	) -> Tuple[float, float, float, float]:
		xx = self.sqb * s
		sx = self.sqb * math.sin(xx)
		cx = math.cos(xx)
		yppp = fac1 * cx - fac2 * sx
		yp = (k - yppp) * self.beta0inv
		ypp = fac1 * self.beta0inv * sx + fac2 * cx
		y = (fac2 - ypp + k * s) * self.beta0inv - h
		return y, yp, ypp, yppp

	def half_angle_functions(self, s: float) -> Tuple[float, float, float, float]:
		xx = 0.5 * self.sqb * s
		sx = math.sin(xx)
		cx = math.cos(xx)
		g1 = 2.0 * sx * cx / self.sqb
		g2 = 2.0 * sx * sx * self.beta0inv
		return g1, g2, cx, sx
