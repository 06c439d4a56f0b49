"""
This initialization file serves as the main entry point for the hierarchical Kepler
package, exposing all public APIs through a clean namespace.

It imports and re-exports the value types (InitialConditions, TwoBodyState,
GaussCoefficients, KeplerStepResult), the configuration (KeplerConfig), the universal
Kepler stepper with its elliptic and hyperbolic regimes, the quartic root solver, the
analytic Jacobian builder, the regime-agnostic universal functions, diagnostics helpers,
the array-oriented UniversalKeplerSolver facade, the hierarchy transformation utilities
and the typed error hierarchy. Users can import any major component directly from the
package root while the internal module organization stays one concern per module.
"""

from .kepler_config import KeplerConfig
from .kepler_constants import (
    BETA_DEGENERATE,
    DS_ABS_TOL,
    DS_REL_TOL,
    JACOBIAN_SIZE,
    MAX_ITERATIONS,
    ONE_THIRD,
)
from .errors import (
    KeplerError,
    DegenerateOrbitError,
    RegimeMismatchError,
    NonConvergenceError,
    SingularJacobianError,
    InvalidInitialConditionsError,
    HierarchyError,
)

from .kepler_types import (
    InitialConditions,
    TwoBodyState,
    GaussCoefficients,
    KeplerStepResult,
)
from .root_solver import quartic_correction
from .regime_base import KeplerRegime
from .elliptic_regime import EllipticRegime
from .hyperbolic_regime import HyperbolicRegime
from .jacobian import kepler_jacobian
from .kepler_stepper import (
    KeplerStepper,
    select_regime,
    kepler_step,
    elliptic_step,
    hyperbolic_step,
)
from .universal_functions import stumpff_c, g_functions, kepler_residual
from .state_validator import InitialConditionsValidator
from .diagnostics import (
    ConvergenceStats,
    gauss_determinant,
    rate_limited_log,
    reset_diag_counts,
)
from .kepler_solver import UniversalKeplerSolver
from .hierarchy import (
    planetary_indices,
    validate_indices,
    level_masses,
    hierarchy_matrix,
    level_gravitational_parameters,
    kepler_to_cartesian,
    cartesian_to_kepler,
    HierarchicalKeplerDrift,
)


__all__ = [
    "KeplerConfig",
    "BETA_DEGENERATE",
    "DS_ABS_TOL",
    "DS_REL_TOL",
    "JACOBIAN_SIZE",
    "MAX_ITERATIONS",
    "ONE_THIRD",
    "KeplerError",
    "DegenerateOrbitError",
    "RegimeMismatchError",
    "NonConvergenceError",
    "SingularJacobianError",
    "InvalidInitialConditionsError",
    "HierarchyError",
    "InitialConditions",
    "TwoBodyState",
    "GaussCoefficients",
    "KeplerStepResult",
    "quartic_correction",
    "KeplerRegime",
    "EllipticRegime",
    "HyperbolicRegime",
    "kepler_jacobian",
    "KeplerStepper",
    "select_regime",
    "kepler_step",
    "elliptic_step",
    "hyperbolic_step",
    "stumpff_c",
    "g_functions",
    "kepler_residual",
    "InitialConditionsValidator",
    "ConvergenceStats",
    "gauss_determinant",
    "rate_limited_log",
    "reset_diag_counts",
    "UniversalKeplerSolver",
    "planetary_indices",
    "validate_indices",
    "level_masses",
    "hierarchy_matrix",
    "level_gravitational_parameters",
    "kepler_to_cartesian",
    "cartesian_to_kepler",
    "HierarchicalKeplerDrift",
]
