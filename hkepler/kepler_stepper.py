from __future__ import annotations
import logging
import math
import sys
from typing import Type

import numpy as np

from .diagnostics import rate_limited_log
from .elliptic_regime import EllipticRegime
from .errors import (
    DegenerateOrbitError,
    InvalidInitialConditionsError,
    NonConvergenceError,
    RegimeMismatchError,
)
from .hyperbolic_regime import HyperbolicRegime
from .jacobian import kepler_jacobian
from .kepler_config import KeplerConfig
from .kepler_constants import RESIDUAL_ROUNDING_ULPS, SLOW_CONVERGENCE_ITERATIONS
from .kepler_types import InitialConditions, KeplerStepResult, TwoBodyState
from .regime_base import KeplerRegime
from .root_solver import quartic_correction
from .state_validator import InitialConditionsValidator
from .universal_functions import kepler_residual

"""
This module implements the universal-variable Kepler stepper used as the drift operator of a symplectic integrator. The KeplerStepper class validates the initial conditions, selects the elliptic or hyperbolic regime from the sign of beta0, iterates the quartic root solver on the Wisdom-Hernandez form of the universal Kepler equation starting from the warm start s0 (or h / r0 when s0 is zero), finalises the Gauss f and g functions, writes the propagated position and velocity, recomputes the separation, radial velocity and energy parameter of the result, and optionally assembles the analytic 7x7 Jacobian. Both regimes share one iteration skeleton; the convergence test is taken from KeplerConfig. Every failure (degenerate near-parabolic orbit, exhausted iteration budget, singular root-solver denominator, invalid input) raises a typed KeplerError before a result value exists. The module-level kepler_step, elliptic_step and hyperbolic_step wrap a stepper with the default configuration.
"""

logger = logging.getLogger(__name__)

__all__ = [
	"KeplerStepper",
	"select_regime",
	"kepler_step",
	"elliptic_step",
	"hyperbolic_step",
]

_REGIMES = (EllipticRegime, HyperbolicRegime)


def select_regime(beta0: float, threshold: float) -> KeplerRegime:
	for cls in _REGIMES:
		if cls.applies(beta0, threshold):
			return cls(beta0)
	raise DegenerateOrbitError(beta0, threshold)


class KeplerStepper:
	def __init__(self, config: KeplerConfig | None = None) -> None:
		self.cfg: KeplerConfig = config or KeplerConfig()

	def step(self, ic: InitialConditions, *, jacobian: bool = False) -> KeplerStepResult:
		self._validate(ic)
		regime = select_regime(ic.beta0, self.cfg.beta_threshold)
		return self._advance(ic, regime, jacobian)

	def elliptic(self, ic: InitialConditions, *, jacobian: bool = False) -> KeplerStepResult:
		return self._step_in(EllipticRegime, ic, jacobian)

	def hyperbolic(self, ic: InitialConditions, *, jacobian: bool = False) -> KeplerStepResult:
		return self._step_in(HyperbolicRegime, ic, jacobian)

	def _step_in(self, cls: Type[KeplerRegime], ic: InitialConditions, jacobian: bool) -> KeplerStepResult:
		self._validate(ic)
		threshold = self.cfg.beta_threshold
		if abs(ic.beta0) <= threshold:
			raise DegenerateOrbitError(ic.beta0, threshold)
		if not cls.applies(ic.beta0, threshold):
			raise RegimeMismatchError(ic.beta0, cls.name)
		return self._advance(ic, cls(ic.beta0), jacobian)

	def _validate(self, ic: InitialConditions) -> None:
		problems = InitialConditionsValidator.problems(ic)
		if problems:
			InitialConditionsValidator.report_invalid_state("kepler_step", ic, cfg=self.cfg)
			raise InvalidInitialConditionsError("; ".join(problems))

	def _solve(self, ic: InitialConditions, regime: KeplerRegime):
		cfg = self.cfg
		if ic.s0 == 0.0:
			s = ic.h / ic.r0
		else:
			s = ic.s0
		fac1 = ic.k - ic.r0 * ic.beta0
		fac2 = ic.eta0
		ds = math.inf
		history = []
		iterations = 0
		while iterations == 0 or (not cfg.converged(ds, s) and iterations < cfg.max_iterations):
			try:
				y, yp, ypp, yppp = regime.residual_derivatives(s, fac1, fac2, ic.k, ic.h)
			except OverflowError as err:
				raise NonConvergenceError(s, ds, iterations) from err
			ds = quartic_correction(y, yp, ypp, yppp)
			s += ds
			history.append(ds)
			iterations += 1

		if not cfg.converged(ds, s):
			raise NonConvergenceError(s, ds, iterations)
		if iterations > SLOW_CONVERGENCE_ITERATIONS:
			rate_limited_log(
				logger,
				"slow_convergence",
				"[diag] %s Kepler solve needed %d iterations (beta0=%.3e, h=%.3e, |ds|=%.3e)",
				regime.name,
				iterations,
				ic.beta0,
				ic.h,
				abs(ds),
				level=logging.DEBUG,
				cfg=cfg,
			)
		return s, ds, iterations, tuple(history)

	def _residual_tolerance(self, ic: InitialConditions, s: float, r: float) -> float:
		# the residual is y(s) - h, so a step tolerance on s maps to r times it; rounding in the
		# r0*G1 and h terms sets the floor
		floor = RESIDUAL_ROUNDING_ULPS * sys.float_info.epsilon * (abs(ic.h) + ic.r0 * abs(s))
		return max(self.cfg.tolerance(s) * max(r, 1.0), floor)

	def _advance(self, ic: InitialConditions, regime: KeplerRegime, want_jacobian: bool) -> KeplerStepResult:
		s, ds, iterations, history = self._solve(ic, regime)

		try:
			position_terms = regime.gauss_position(ic, s)
		except OverflowError as err:
			raise NonConvergenceError(s, ds, iterations) from err
		f, g = position_terms[0], position_terms[1]
		x = ic.x0 * f + ic.v0 * g
		r = float(math.sqrt(float(np.dot(x, x))))

		if self.cfg.verify_residual:
			residual = kepler_residual(ic, s)
			if not abs(residual) <= self._residual_tolerance(ic, s, r):
				rate_limited_log(
					logger,
					"residual_check",
					"[warning] universal Kepler residual %.3e exceeds tolerance (s=%.6e)",
					residual,
					s,
					cfg=self.cfg,
				)
				raise NonConvergenceError(s, ds, iterations, residual=residual)

		gauss = regime.finalize(ic, s, r, position_terms)
		v = ic.x0 * gauss.fdot + ic.v0 * gauss.gdot

		rinv = 1.0 / r
		state = TwoBodyState(
			x=x,
			v=v,
			r=r,
			drdt=float(np.dot(x, v)) * rinv,
			beta=2.0 * ic.k * rinv - float(np.dot(v, v)),
			s=s,
			ds=ds,
		)

		jac = None
		if want_jacobian:
			jac = kepler_jacobian(ic, s, gauss, r)

		return KeplerStepResult(
			state=state,
			gauss=gauss,
			regime=regime.name,
			iterations=iterations,
			ds_history=history,
			jacobian=jac,
		)


_DEFAULT_STEPPER = KeplerStepper()


def kepler_step(ic: InitialConditions, *, jacobian: bool = False) -> KeplerStepResult:
	return _DEFAULT_STEPPER.step(ic, jacobian=jacobian)


def elliptic_step(ic: InitialConditions, *, jacobian: bool = False) -> KeplerStepResult:
	return _DEFAULT_STEPPER.elliptic(ic, jacobian=jacobian)


def hyperbolic_step(ic: InitialConditions, *, jacobian: bool = False) -> KeplerStepResult:
	return _DEFAULT_STEPPER.hyperbolic(ic, jacobian=jacobian)
