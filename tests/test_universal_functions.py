"""Tests for the Stumpff functions and the universal Kepler residual."""

import math

import numpy as np
import pytest

from hkepler import g_functions, kepler_residual, kepler_step, stumpff_c


def _closed_form(z):
    if z > 0:
        x = math.sqrt(z)
        return math.cos(x), math.sin(x) / x, (1 - math.cos(x)) / z, (x - math.sin(x)) / x**3
    x = math.sqrt(-z)
    return math.cosh(x), math.sinh(x) / x, (math.cosh(x) - 1) / -z, (math.sinh(x) - x) / x**3


def test_stumpff_at_zero():
    assert stumpff_c(0.0) == pytest.approx((1.0, 1.0, 0.5, 1.0 / 6.0), rel=1e-15)


@pytest.mark.parametrize("z", [0.05, 0.7, 2.0, 30.0, -0.5, -9.0, -40.0])
def test_stumpff_against_closed_form(z):
    np.testing.assert_allclose(stumpff_c(z), _closed_form(z), rtol=1e-10)


@pytest.mark.parametrize("beta,s", [(1.3, 0.7), (-0.6, 1.1), (0.0, 0.4)])
def test_g_function_identities(beta, s):
    g0, g1, g2, g3 = g_functions(beta, s)
    assert g0 + beta * g2 == pytest.approx(1.0, abs=1e-14)
    assert g1 + beta * g3 == pytest.approx(s, abs=1e-14)


@pytest.mark.parametrize("ic_name", ["circular_ic", "eccentric_ic", "scenario_b_ic", "hyperbolic_ic"])
def test_converged_anomaly_solves_universal_equation(ic_name, request):
    ic = request.getfixturevalue(ic_name)
    res = kepler_step(ic)
    assert abs(kepler_residual(ic, res.state.s)) < 1e-12


def test_residual_matches_stepper_branch_values(eccentric_ic):
    res = kepler_step(eccentric_ic)
    _, g1, g2, _ = g_functions(eccentric_ic.beta0, res.state.s)
    assert g1 == pytest.approx(res.gauss.g1, rel=1e-12)
    assert g2 == pytest.approx(res.gauss.g2, rel=1e-12)
