"""Tests for KeplerConfig and the constants module."""

import pytest

from hkepler import BETA_DEGENERATE, DS_ABS_TOL, MAX_ITERATIONS, KeplerConfig
from hkepler.kepler_constants import _parse_positive


def test_defaults():
    cfg = KeplerConfig()
    assert cfg.convergence_policy == "combined"
    assert cfg.max_iterations == MAX_ITERATIONS == 10
    assert cfg.beta_threshold == BETA_DEGENERATE == 1e-15
    assert cfg.abs_tol == DS_ABS_TOL
    assert cfg.verify_residual is False


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(convergence_policy="newton"),
        dict(max_iterations=0),
        dict(abs_tol=-1.0),
        dict(convergence_policy="absolute", abs_tol=0.0),
        dict(convergence_policy="relative", rel_tol=0.0),
        dict(beta_threshold=-1e-15),
    ],
)
def test_invalid_values_raise(kwargs):
    with pytest.raises(ValueError):
        KeplerConfig(**kwargs)


def test_converged_policies():
    absolute = KeplerConfig(convergence_policy="absolute", abs_tol=1e-8)
    relative = KeplerConfig(convergence_policy="relative", rel_tol=1e-4)
    combined = KeplerConfig(convergence_policy="combined", abs_tol=1e-8, rel_tol=1e-8)

    assert absolute.converged(5e-9, 100.0)
    assert not absolute.converged(5e-8, 100.0)

    assert relative.converged(5e-3, 100.0)
    assert not relative.converged(5e-3, 1.0)

    assert combined.converged(5e-9, 0.0)
    assert combined.converged(5e-7, 100.0)
    assert not combined.converged(5e-7, 1.0)

    assert absolute.tolerance(-3.0) == 1e-8
    assert relative.tolerance(-3.0) == pytest.approx(3e-4)
    assert combined.tolerance(2.0) == pytest.approx(3e-8)


def test_copy_is_independent():
    cfg = KeplerConfig(abs_tol=1e-10)
    dup = cfg.copy()
    dup.abs_tol = 1e-6
    assert cfg.abs_tol == 1e-10
    assert dup.convergence_policy == cfg.convergence_policy


def test_environment_override(monkeypatch):
    monkeypatch.setenv("HKEPLER_TEST_TOL", "2.5e-9")
    assert _parse_positive("HKEPLER_TEST_TOL", 1e-8) == 2.5e-9
    monkeypatch.setenv("HKEPLER_TEST_TOL", "not-a-number")
    assert _parse_positive("HKEPLER_TEST_TOL", 1e-8) == 1e-8
    monkeypatch.setenv("HKEPLER_TEST_TOL", "-1")
    assert _parse_positive("HKEPLER_TEST_TOL", 1e-8) == 1e-8
    monkeypatch.delenv("HKEPLER_TEST_TOL")
    assert _parse_positive("HKEPLER_TEST_TOL", 1e-8) == 1e-8
