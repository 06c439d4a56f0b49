from __future__ import annotations
import logging
from typing import Tuple

import numpy as np

from .diagnostics import ConvergenceStats
from .errors import HierarchyError
from .kepler_config import KeplerConfig
from .kepler_stepper import KeplerStepper
from .kepler_types import InitialConditions

"""
This module maps between absolute Cartesian coordinates and the per-level relative (Keplerian) coordinates of a hierarchical N-body system, and drifts every level of the hierarchy with the Kepler stepper. A hierarchy of n bodies is described by an n x n index matrix in the style of a mobile diagram: each of the first n - 1 rows marks the two sides of one binary split with +1 and -1 (0 for bodies outside that level) and the last row, all ones, stands for the centre of mass. planetary_indices builds the matrix of a planetary system in which each new body orbits everything interior to it. hierarchy_matrix turns the index matrix and the masses into the transformation A with entries -m_j/m1 on the +1 side, +m_j/m2 on the -1 side and m_j/M in the last row, so that the relative vectors are R = A X. kepler_to_cartesian inverts the map by solving A X = R. HierarchicalKeplerDrift advances each level exactly with k_i = G (m1_i + m2_i), moves the centre of mass ballistically, and keeps a warm start of the anomaly per level for repeated steps of equal size. Converting orbital elements into relative states is left to the caller. The module assumes positive masses and an index matrix whose levels split the bodies into two non-empty groups.
"""

logger = logging.getLogger(__name__)

__all__ = [
	"planetary_indices",
	"validate_indices",
	"level_masses",
	"hierarchy_matrix",
	"level_gravitational_parameters",
	"kepler_to_cartesian",
	"cartesian_to_kepler",
	"HierarchicalKeplerDrift",
]


def planetary_indices(n_body: int) -> np.ndarray:
	n_body = int(n_body)
	if n_body < 2:
		raise HierarchyError(f"a hierarchy needs at least two bodies, got {n_body}")
	indices = np.zeros((n_body, n_body), dtype=int)
	for i in range(n_body - 1):
		indices[i, : i + 1] = -1
		indices[i, i + 1] = 1
	indices[n_body - 1, :] = 1
	return indices


def validate_indices(indices) -> np.ndarray:
	idx = np.asarray(indices)
	if idx.ndim != 2 or idx.shape[0] != idx.shape[1] or idx.shape[0] < 2:
		raise HierarchyError(f"index matrix must be square with n >= 2, got shape {idx.shape}")
	if not np.all(np.isin(idx, (-1, 0, 1))):
		raise HierarchyError("index matrix entries must be -1, 0 or +1")
	n = idx.shape[0]
	for i in range(n - 1):
		if not (np.any(idx[i] == 1) and np.any(idx[i] == -1)):
			raise HierarchyError(f"level {i} must split the bodies into two non-empty groups")
	if not np.all(idx[n - 1] == 1):
		raise HierarchyError("last row of the index matrix must be all ones (centre of mass)")
	return idx.astype(int)


def _validate_masses(masses, n: int | None = None) -> np.ndarray:
	m = np.asarray(masses, dtype=float).ravel()
	if n is not None and m.size != n:
		raise HierarchyError(f"expected {n} masses, got {m.size}")
	if not np.all(np.isfinite(m)) or not np.all(m > 0.0):
		raise HierarchyError("masses must be finite and positive")
	return m


def level_masses(masses, indices) -> Tuple[np.ndarray, np.ndarray]:
	idx = validate_indices(indices)
	m = _validate_masses(masses, idx.shape[0])
	levels = idx[:-1]
	m1 = np.sum(np.where(levels == 1, m[None, :], 0.0), axis=1)
	m2 = np.sum(np.where(levels == -1, m[None, :], 0.0), axis=1)
	return m1, m2


def hierarchy_matrix(masses, indices) -> np.ndarray:
	idx = validate_indices(indices)
	m = _validate_masses(masses, idx.shape[0])
	n = m.size
	m1, m2 = level_masses(m, idx)
	amat = np.zeros((n, n))
	levels = idx[:-1]
	amat[:-1] = np.where(levels == 1, -m[None, :] / m1[:, None], 0.0)
	amat[:-1] += np.where(levels == -1, m[None, :] / m2[:, None], 0.0)
	amat[n - 1] = m / np.sum(m)
	return amat


def level_gravitational_parameters(masses, indices, G: float = 1.0) -> np.ndarray:
	m1, m2 = level_masses(masses, indices)
	return float(G) * (m1 + m2)


def _solve(amat: np.ndarray, rhs: np.ndarray) -> np.ndarray:
	try:
		return np.linalg.solve(amat, rhs)
	except np.linalg.LinAlgError as err:
		raise HierarchyError("hierarchy transformation matrix is singular") from err


def kepler_to_cartesian(masses, r_rel, v_rel, indices=None) -> Tuple[np.ndarray, np.ndarray]:
	m = _validate_masses(masses)
	n = m.size
	if indices is None:
		indices = planetary_indices(n)
	amat = hierarchy_matrix(m, indices)

	r_rel = np.asarray(r_rel, dtype=float)
	v_rel = np.asarray(v_rel, dtype=float)
	if r_rel.shape != v_rel.shape or r_rel.ndim != 2:
		raise HierarchyError("relative positions and velocities must be matching 2-D arrays")
	if r_rel.shape[0] == n - 1:
		pad = np.zeros((1, r_rel.shape[1]))
		r_rel = np.vstack((r_rel, pad))
		v_rel = np.vstack((v_rel, pad))
	elif r_rel.shape[0] != n:
		raise HierarchyError(f"expected {n - 1} or {n} relative vectors, got {r_rel.shape[0]}")

	return _solve(amat, r_rel), _solve(amat, v_rel)


def cartesian_to_kepler(masses, x, v, indices=None) -> Tuple[np.ndarray, np.ndarray]:
	m = _validate_masses(masses)
	if indices is None:
		indices = planetary_indices(m.size)
	amat = hierarchy_matrix(m, indices)
	x = np.asarray(x, dtype=float)
	v = np.asarray(v, dtype=float)
	if x.shape != v.shape or x.ndim != 2 or x.shape[0] != m.size:
		raise HierarchyError(f"expected ({m.size}, ndim) position and velocity arrays")
	return amat @ x, amat @ v


class HierarchicalKeplerDrift:
	def __init__(
		self,
		masses,
		indices=None,
		G: float = 1.0,
		config: KeplerConfig | None = None,
	) -> None:
		self.masses = _validate_masses(masses)
		n = self.masses.size
		if indices is None:
			indices = planetary_indices(n)
		self.indices = validate_indices(indices)
		if self.indices.shape[0] != n:
			raise HierarchyError(f"index matrix is {self.indices.shape}, expected ({n}, {n})")
		self.G = float(G)
		self.amat = hierarchy_matrix(self.masses, self.indices)
		self.k = level_gravitational_parameters(self.masses, self.indices, self.G)
		self.stepper = KeplerStepper(config)
		self.stats = ConvergenceStats()
		self._s_prev = np.zeros(n - 1)
		self._h_prev: float | None = None

	@property
	def n_levels(self) -> int:
		return self.masses.size - 1

	def reset_warm_start(self) -> None:
		self._s_prev[:] = 0.0
		self._h_prev = None

	def drift(self, x, v, h: float) -> Tuple[np.ndarray, np.ndarray]:
		x = np.asarray(x, dtype=float)
		v = np.asarray(v, dtype=float)
		if x.shape != (self.masses.size, 3) or v.shape != x.shape:
			raise HierarchyError(f"expected ({self.masses.size}, 3) position and velocity arrays")
		h = float(h)
		rk = self.amat @ x
		vk = self.amat @ v

		warm = self._h_prev is not None and self._h_prev == h
		s_new = np.zeros_like(self._s_prev)
		for i in range(self.n_levels):
			s0 = float(self._s_prev[i]) if warm else 0.0
			ic = InitialConditions.from_cartesian(rk[i], vk[i], self.k[i], h, s0=s0)
			res = self.stepper.step(ic)
			self.stats.record(res)
			logger.debug(
				"level %d: %s, %d iterations, s=%.6e",
				i,
				res.regime,
				res.iterations,
				res.state.s,
			)
			rk[i] = res.state.x
			vk[i] = res.state.v
			s_new[i] = res.state.s

		rk[-1] = rk[-1] + h * vk[-1]

		x_new = _solve(self.amat, rk)
		v_new = _solve(self.amat, vk)
		self._s_prev = s_new
		self._h_prev = h
		return x_new, v_new
