from __future__ import annotations

from dataclasses import dataclass, replace
import math
import numpy as np

"""

This module defines the immutable value types exchanged with the Kepler stepper. InitialConditions bundles the relative position and velocity of a two-body problem together with the derived separation, radial velocity, energy parameter beta0 = 2k/r0 - |v0|^2, the gravitational parameter k, the timestep h and an optional warm-start value of the generalized anomaly. TwoBodyState holds the propagated state together with the converged anomaly and the last root-solver correction, GaussCoefficients holds the finalized f and g functions with their time derivatives, and KeplerStepResult pairs a state with an optional 7x7 Jacobian. Vector fields are stored as read-only float arrays so a returned value can be shared without defensive copies. The module assumes three-dimensional Cartesian vectors.

"""


__all__ = [
    "InitialConditions",
    "TwoBodyState",
    "GaussCoefficients",
    "KeplerStepResult",
]


def _frozen_vec(a) -> np.ndarray:
    arr = np.array(a, dtype=float)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, slots=True)
class InitialConditions:
    x0: np.ndarray
    v0: np.ndarray
    r0: float
    dr0dt: float
    k: float
    h: float
    beta0: float
    s0: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "x0", _frozen_vec(self.x0))
        object.__setattr__(self, "v0", _frozen_vec(self.v0))
        for name in ("r0", "dr0dt", "k", "h", "beta0", "s0"):
            object.__setattr__(self, name, float(getattr(self, name)))

    @classmethod
    def from_cartesian(cls, x0, v0, k: float, h: float, s0: float = 0.0) -> "InitialConditions":
        x0 = np.asarray(x0, dtype=float)
        v0 = np.asarray(v0, dtype=float)
        r0 = float(math.sqrt(float(np.dot(x0, x0))))
        if r0 > 0.0:
            dr0dt = float(np.dot(x0, v0)) / r0
            beta0 = 2.0 * float(k) / r0 - float(np.dot(v0, v0))
        else:
            dr0dt = math.nan
            beta0 = math.nan
        return cls(x0=x0, v0=v0, r0=r0, dr0dt=dr0dt, k=k, h=h, beta0=beta0, s0=s0)

    @property
    def eta0(self) -> float:
        return self.r0 * self.dr0dt

    def with_timestep(self, h: float, s0: float | None = None) -> "InitialConditions":
        if s0 is None:
            s0 = self.s0
        return replace(self, h=float(h), s0=float(s0))


@dataclass(frozen=True, slots=True)
class GaussCoefficients:
    f: float
    g: float
    fdot: float
    gdot: float
    g1: float
    g2: float
    cx: float
    sx: float


@dataclass(frozen=True, slots=True)
class TwoBodyState:
    x: np.ndarray
    v: np.ndarray
    r: float
    drdt: float
    beta: float
    s: float
    ds: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", _frozen_vec(self.x))
        object.__setattr__(self, "v", _frozen_vec(self.v))

    def as_array(self) -> np.ndarray:
        return np.concatenate(
            (self.x, self.v, np.array([self.r, self.drdt, self.beta, self.s, self.ds]))
        )

    def to_initial_conditions(self, k: float, h: float, *, warm_start: bool = True) -> InitialConditions:
        """Chain this state into the next step.

        With ``warm_start`` the converged anomaly seeds the next solve, which is a good
        guess when consecutive timesteps have the same size and sign.
        """
        s0 = self.s if warm_start else 0.0
        return InitialConditions(
            x0=self.x,
            v0=self.v,
            r0=self.r,
            dr0dt=self.drdt,
            k=k,
            h=h,
            beta0=2.0 * float(k) / self.r - float(np.dot(self.v, self.v)),
            s0=s0,
        )


@dataclass(frozen=True, slots=True)
class KeplerStepResult:
    state: TwoBodyState
    gauss: GaussCoefficients
    regime: str
    iterations: int
    ds_history: tuple
    jacobian: np.ndarray | None = None

    def __post_init__(self) -> None:
        if self.jacobian is not None:
            jac = np.array(self.jacobian, dtype=float)
            jac.setflags(write=False)
            object.__setattr__(self, "jacobian", jac)
