from __future__ import annotations
from dataclasses import dataclass

from .kepler_constants import (
    BETA_DEGENERATE,
    DS_ABS_TOL,
    DS_REL_TOL,
    MAX_ITERATIONS,
)

"""
This configuration module defines the parameters of the Kepler stepper through the KeplerConfig dataclass. Key parameters include the absolute and relative tolerances on the root-solver correction, the convergence policy that combines them, the iteration budget, the half-width of the degenerate near-parabolic band, an optional post-convergence residual verification and the rate limits of diagnostic log output. The class provides a copy method for configuration inheritance and validates the convergence policy and numeric fields on construction. It assumes the defaults in kepler_constants are appropriate for double-precision orbits in units where k = G(m1 + m2) is of order unity.

"""
_ALLOWED_POLICIES = {
    "absolute",
    "relative",
    "combined",
}


@dataclass
class KeplerConfig:
    abs_tol: float = DS_ABS_TOL
    rel_tol: float = DS_REL_TOL
    convergence_policy: str = "combined"
    max_iterations: int = MAX_ITERATIONS
    beta_threshold: float = BETA_DEGENERATE
    verify_residual: bool = False
    diag_prints: bool = True
    diag_print_limit: int = 3
    diag_print_interval: int = 1000

    def __post_init__(self) -> None:
        if self.convergence_policy not in _ALLOWED_POLICIES:
            raise ValueError(
                f"convergence_policy must be one of {sorted(_ALLOWED_POLICIES)}, "
                f"got {self.convergence_policy!r}"
            )
        if not (self.abs_tol >= 0.0 and self.rel_tol >= 0.0):
            raise ValueError("abs_tol and rel_tol must be non-negative")
        if self.convergence_policy == "absolute" and self.abs_tol == 0.0:
            raise ValueError("absolute convergence policy needs abs_tol > 0")
        if self.convergence_policy == "relative" and self.rel_tol == 0.0:
            raise ValueError("relative convergence policy needs rel_tol > 0")
        if int(self.max_iterations) < 1:
            raise ValueError("max_iterations must be at least 1")
        if not self.beta_threshold >= 0.0:
            raise ValueError("beta_threshold must be non-negative")
        self.max_iterations = int(self.max_iterations)

    def tolerance(self, s: float) -> float:
        if self.convergence_policy == "absolute":
            return self.abs_tol
        if self.convergence_policy == "relative":
            return self.rel_tol * abs(s)
        return self.abs_tol + self.rel_tol * abs(s)

    def converged(self, ds: float, s: float) -> bool:
        return abs(ds) <= self.tolerance(s)

    def copy(self) -> "KeplerConfig":
        new = object.__new__(KeplerConfig)
        new.__dict__ = dict(getattr(self, "__dict__", {}))
        return new
