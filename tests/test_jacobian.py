"""Tests for the analytic 7x7 Jacobian of a Kepler step.

Tests cover:
- Central finite differences for every column, both regimes
- Mass row/column structure
- Symplecticity of the (x, v) block
- Chain rule across two consecutive steps
"""

import numpy as np
import pytest

from hkepler import InitialConditions, kepler_jacobian, kepler_step


def _propagate(q, h):
    ic = InitialConditions.from_cartesian(q[:3], q[3:6], q[6], h)
    st = kepler_step(ic).state
    return np.concatenate((st.x, st.v, [q[6]]))


def _finite_difference_jacobian(q, h, rel=1e-6):
    q = np.asarray(q, dtype=float)
    jac = np.zeros((7, 7))
    for j in range(7):
        dq = rel * max(1.0, abs(q[j]))
        qp = q.copy()
        qm = q.copy()
        qp[j] += dq
        qm[j] -= dq
        jac[:, j] = (_propagate(qp, h) - _propagate(qm, h)) / (2.0 * dq)
    return jac


def _as_q(ic):
    return np.concatenate((ic.x0, ic.v0, [ic.k]))


@pytest.mark.parametrize(
    "ic_name",
    ["circular_ic", "eccentric_ic", "scenario_b_ic", "hyperbolic_ic"],
)
def test_matches_finite_differences(ic_name, request):
    ic = request.getfixturevalue(ic_name)
    analytic = kepler_step(ic, jacobian=True).jacobian
    numeric = _finite_difference_jacobian(_as_q(ic), ic.h)
    np.testing.assert_allclose(analytic, numeric, rtol=1e-5, atol=1e-7)


@pytest.mark.parametrize("h", [-2.0, 3.5])
def test_matches_finite_differences_long_steps(eccentric_ic, h):
    ic = eccentric_ic.with_timestep(h)
    analytic = kepler_step(ic, jacobian=True).jacobian
    numeric = _finite_difference_jacobian(_as_q(ic), h)
    np.testing.assert_allclose(analytic, numeric, rtol=1e-5, atol=1e-7)


def test_mass_row_is_identity(eccentric_ic):
    jac = kepler_step(eccentric_ic, jacobian=True).jacobian
    expected = np.zeros(7)
    expected[6] = 1.0
    np.testing.assert_array_equal(jac[6], expected)
    assert np.any(jac[:6, 6] != 0.0)


@pytest.mark.parametrize("ic_name", ["eccentric_ic", "hyperbolic_ic"])
def test_phase_space_block_is_symplectic(ic_name, request):
    ic = request.getfixturevalue(ic_name)
    m = kepler_step(ic, jacobian=True).jacobian[:6, :6]
    omega = np.block([[np.zeros((3, 3)), np.eye(3)], [-np.eye(3), np.zeros((3, 3))]])
    np.testing.assert_allclose(m.T @ omega @ m, omega, atol=1e-11)


def test_chain_rule_over_two_steps(eccentric_ic):
    half = eccentric_ic.with_timestep(0.5 * eccentric_ic.h)
    first = kepler_step(half, jacobian=True)
    second = kepler_step(
        first.state.to_initial_conditions(eccentric_ic.k, half.h),
        jacobian=True,
    )
    direct = kepler_step(eccentric_ic, jacobian=True)
    np.testing.assert_allclose(second.jacobian @ first.jacobian, direct.jacobian, atol=1e-10)


def test_builder_called_directly_matches_stepper(hyperbolic_ic):
    res = kepler_step(hyperbolic_ic, jacobian=True)
    jac = kepler_jacobian(hyperbolic_ic, res.state.s, res.gauss, res.state.r)
    np.testing.assert_array_equal(jac, res.jacobian)


def test_zero_velocity_column_is_finite():
    ic = InitialConditions.from_cartesian([1.0, 0.0, 0.0], [0.0, 0.0, 0.0], k=1.0, h=0.2)
    jac = kepler_step(ic, jacobian=True).jacobian
    assert np.all(np.isfinite(jac))
