"""
This module implements an array-oriented facade over the universal Kepler stepper.

The UniversalKeplerSolver class provides exact two-body propagation of relative
position and velocity vectors through the propagate method, accepting either a single
(3,) state or stacked (n, 3) states, and propagate_with_jacobian, which additionally
returns the 7x7 sensitivity of (x, v, mu) with respect to the initial (x, v, mu). It
derives the separation, radial velocity and energy parameter from the Cartesian input
and delegates the solve to KeplerStepper, so the typed errors of the stepper surface
unchanged. It assumes Newtonian gravity with mu = G (m1 + m2) and three-dimensional
vectors.
"""

from __future__ import annotations
import numpy as np

from .kepler_config import KeplerConfig
from .kepler_stepper import KeplerStepper
from .kepler_types import InitialConditions, KeplerStepResult


class UniversalKeplerSolver:
	def __init__(self, config: KeplerConfig | None = None) -> None:
		self.stepper = KeplerStepper(config)

	def step_single(self, r, v, mu, dt, *, s0: float = 0.0, jacobian: bool = False) -> KeplerStepResult:
		ic = InitialConditions.from_cartesian(r, v, float(mu), float(dt), s0=s0)
		return self.stepper.step(ic, jacobian=jacobian)

	def _propagate_single(self, r, v, mu, dt):
		res = self.step_single(r, v, mu, dt)
		return np.array(res.state.x), np.array(res.state.v)

	def propagate(self, r, v, mu, dt):
		r = np.asarray(r, dtype=float)
		v = np.asarray(v, dtype=float)
		mu = float(mu)
		dt = float(dt)
		if r.ndim == 1:
			return self._propagate_single(r, v, mu, dt)
		out_r = []
		out_v = []
		for ri, vi in zip(r, v):
			rn, vn = self._propagate_single(ri, vi, mu, dt)
			out_r.append(rn)
			out_v.append(vn)
		return np.array(out_r), np.array(out_v)

	def propagate_with_jacobian(self, r, v, mu, dt):
		r = np.asarray(r, dtype=float)
		v = np.asarray(v, dtype=float)
		mu = float(mu)
		dt = float(dt)
		if r.ndim == 1:
			res = self.step_single(r, v, mu, dt, jacobian=True)
			return np.array(res.state.x), np.array(res.state.v), np.array(res.jacobian)
		out_r = []
		out_v = []
		out_j = []
		for ri, vi in zip(r, v):
			res = self.step_single(ri, vi, mu, dt, jacobian=True)
			out_r.append(res.state.x)
			out_v.append(res.state.v)
			out_j.append(res.jacobian)
		return np.array(out_r), np.array(out_v), np.array(out_j)
