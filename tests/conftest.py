import pytest

from hkepler import InitialConditions, reset_diag_counts


@pytest.fixture(autouse=True)
def _fresh_diag_counts():
    """Rate-limited diagnostics count occurrences globally; isolate every test."""
    reset_diag_counts()
    yield
    reset_diag_counts()


@pytest.fixture
def circular_ic():
    """Scenario A: unit circular orbit, k = 1, h = 0.01."""
    return InitialConditions(
        x0=[1.0, 0.0, 0.0],
        v0=[0.0, 1.0, 0.0],
        r0=1.0,
        dr0dt=0.0,
        k=1.0,
        h=0.01,
        beta0=1.0,
    )


@pytest.fixture
def eccentric_ic():
    """Inclined bound orbit with e ~ 0.27 and a non-zero radial velocity."""
    return InitialConditions.from_cartesian([1.0, 0.2, -0.1], [0.1, 0.9, 0.3], k=1.0, h=0.5)


@pytest.fixture
def scenario_b_ic():
    """Scenario B: beta0 = 2/1 - 4 = -2."""
    return InitialConditions.from_cartesian([1.0, 0.0, 0.0], [0.0, 2.0, 0.0], k=1.0, h=0.1)


@pytest.fixture
def hyperbolic_ic():
    """Inclined unbound orbit with beta0 ~ -0.85."""
    return InitialConditions.from_cartesian([1.0, 0.3, 0.1], [0.2, 1.6, 0.4], k=1.0, h=0.3)

