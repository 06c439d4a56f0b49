"""
Typed failures raised by the Kepler stepper and the hierarchy transform.

Every error derives from KeplerError so an outer integrator can catch the whole family
and decide whether to retry with a different warm start, shrink the timestep or abort.
Errors are raised before a result value is built, so a failed call never leaves a
partially populated state or Jacobian behind.
"""

from __future__ import annotations


__all__ = [
    "KeplerError",
    "DegenerateOrbitError",
    "RegimeMismatchError",
    "NonConvergenceError",
    "SingularJacobianError",
    "InvalidInitialConditionsError",
    "HierarchyError",
]


class KeplerError(Exception):
    pass


class DegenerateOrbitError(KeplerError, ValueError):
    def __init__(self, beta0: float, threshold: float) -> None:
        self.beta0 = float(beta0)
        self.threshold = float(threshold)
        super().__init__(
            f"near-parabolic orbit: |beta0| = {abs(self.beta0):.3e} <= {self.threshold:.1e}"
        )


class RegimeMismatchError(KeplerError, ValueError):
    def __init__(self, beta0: float, regime: str) -> None:
        self.beta0 = float(beta0)
        self.regime = regime
        super().__init__(f"beta0 = {self.beta0:.6e} does not belong to the {regime} regime")


class NonConvergenceError(KeplerError, ArithmeticError):
    def __init__(
        self,
        s: float,
        ds: float,
        iterations: int,
        residual: float | None = None,
    ) -> None:
        self.s = float(s)
        self.ds = float(ds)
        self.iterations = int(iterations)
        self.residual = None if residual is None else float(residual)
        msg = f"Kepler solve did not converge after {self.iterations} iterations: |ds| = {abs(self.ds):.3e}, s = {self.s:.6e}"
        if self.residual is not None:
            msg += f", residual = {self.residual:.3e}"
        super().__init__(msg)


class SingularJacobianError(KeplerError, ArithmeticError):
    def __init__(self, message: str, den2: float | None = None) -> None:
        self.den2 = den2
        super().__init__(message)


class InvalidInitialConditionsError(KeplerError, ValueError):
    pass


class HierarchyError(KeplerError, ValueError):
    pass
