"""
This module provides validation utilities for two-body initial conditions.

The InitialConditionsValidator class offers static methods to check that an
InitialConditions value can be stepped (three-component finite vectors, positive
separation consistent with the position vector, positive gravitational parameter, finite
timestep, energy parameter and warm start) and to report the offending fields of an
invalid value. The stepper runs the check before any arithmetic so that malformed input
fails with a typed error instead of producing NaN deep inside the root solver.
"""

from __future__ import annotations
import logging
import math
import numpy as np

from .kepler_types import InitialConditions
from .diagnostics import rate_limited_log


logger = logging.getLogger(__name__)

_SEPARATION_RTOL = 1.0e-8


class InitialConditionsValidator:
	@staticmethod
	def problems(ic: InitialConditions) -> list:
		out = []
		if ic.x0.shape != (3,):
			out.append(f"x0 has shape {ic.x0.shape} (expected (3,))")
		if ic.v0.shape != (3,):
			out.append(f"v0 has shape {ic.v0.shape} (expected (3,))")
		if out:
			return out

		if not np.all(np.isfinite(ic.x0)):
			out.append("x0 is not finite")
		if not np.all(np.isfinite(ic.v0)):
			out.append("v0 is not finite")
		for name in ("r0", "dr0dt", "k", "h", "beta0", "s0"):
			if not math.isfinite(getattr(ic, name)):
				out.append(f"{name} is not finite")
		if out:
			return out

		if not ic.r0 > 0.0:
			out.append(f"r0 must be positive, got {ic.r0!r}")
		else:
			norm = float(np.linalg.norm(ic.x0))
			if abs(norm - ic.r0) > _SEPARATION_RTOL * ic.r0:
				out.append(f"r0 = {ic.r0!r} does not match |x0| = {norm!r}")
		if not ic.k > 0.0:
			out.append(f"k must be positive, got {ic.k!r}")
		return out

	@staticmethod
	def state_is_valid(ic: InitialConditions) -> bool:
		return not InitialConditionsValidator.problems(ic)

	@staticmethod
	def report_invalid_state(label: str, ic: InitialConditions, cfg=None) -> None:
		for problem in InitialConditionsValidator.problems(ic):
			rate_limited_log(
				logger,
				f"invalid:{label}:{problem.split(' ')[0]}",
				"[invalid] %s: %s",
				label,
				problem,
				cfg=cfg,
			)
