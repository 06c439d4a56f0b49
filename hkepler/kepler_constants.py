from __future__ import annotations

import os
from typing import Final

"""
This module defines the numerical constants of the universal-variable Kepler stepper. It includes ONE_THIRD for the quartic root-solver correction, BETA_DEGENERATE as the half-width of the near-parabolic band in which neither the elliptic nor the hyperbolic branch is evaluated, the absolute and relative step tolerances DS_ABS_TOL and DS_REL_TOL (with environment variable override support), the iteration budget MAX_ITERATIONS and the dimension JACOBIAN_SIZE of the sensitivity matrix. It assumes constants are shared by the stepper, its configuration and the tests.


"""


def _parse_positive(name: str, default: float) -> float:
	env_val = os.getenv(name, "")
	if env_val.strip() == "":
		return default
	try:
		val = float(env_val)
	except ValueError:
		return default
	if val > 0.0 and val == val:
		return val
	return default


ONE_THIRD: Final[float] = 1.0 / 3.0

BETA_DEGENERATE: Final[float] = 1.0e-15

DS_ABS_TOL: Final[float] = _parse_positive("HKEPLER_DS_ABS_TOL", 1.0e-8)
DS_REL_TOL: Final[float] = _parse_positive("HKEPLER_DS_REL_TOL", 1.0e-8)

MAX_ITERATIONS: Final[int] = 10

SLOW_CONVERGENCE_ITERATIONS: Final[int] = 4

RESIDUAL_ROUNDING_ULPS: Final[float] = 64.0

JACOBIAN_SIZE: Final[int] = 7
