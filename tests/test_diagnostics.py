"""Tests for the diagnostics helpers."""

import logging
import threading

import pytest

from hkepler import ConvergenceStats, KeplerConfig, gauss_determinant, kepler_step, rate_limited_log

_LOG = logging.getLogger("hkepler.tests")


def test_rate_limited_log_limits_repeats(caplog):
    cfg = KeplerConfig(diag_print_limit=3, diag_print_interval=5)
    caplog.set_level(logging.WARNING, logger="hkepler.tests")
    emitted = [rate_limited_log(_LOG, "key", "message %d", i, cfg=cfg) for i in range(10)]
    assert emitted == [True, True, True, False, True, False, False, False, False, True]
    messages = [rec.getMessage() for rec in caplog.records]
    assert messages[0] == "message 0"
    assert messages[-1] == "message 9 (occurrence #10)"


def test_rate_limited_log_disabled(caplog):
    cfg = KeplerConfig(diag_prints=False)
    caplog.set_level(logging.DEBUG, logger="hkepler.tests")
    assert rate_limited_log(_LOG, "off", "never", cfg=cfg) is False
    assert not caplog.records


def test_gauss_determinant(eccentric_ic):
    res = kepler_step(eccentric_ic)
    g = res.gauss
    assert gauss_determinant(g) == pytest.approx(g.f * g.gdot - g.g * g.fdot)


def test_convergence_stats(eccentric_ic, hyperbolic_ic):
    stats = ConvergenceStats()
    assert stats.mean_iterations == 0.0
    a = kepler_step(eccentric_ic)
    b = kepler_step(hyperbolic_ic)
    stats.record(a)
    stats.record(b)
    assert stats.calls == 2
    assert stats.total_iterations == a.iterations + b.iterations
    assert stats.max_iterations == max(a.iterations, b.iterations)
    assert stats.by_regime == {"elliptic": 1, "hyperbolic": 1}
    assert stats.max_final_ds == max(abs(a.state.ds), abs(b.state.ds))
    stats.reset()
    assert stats.calls == 0
    assert stats.by_regime == {}


def test_rate_limited_log_counts_across_threads():
    cfg = KeplerConfig(diag_print_limit=0, diag_print_interval=1000)
    emitted = []

    def worker():
        hits = sum(rate_limited_log(_LOG, "threaded", "tick", level=logging.DEBUG, cfg=cfg) for _ in range(500))
        emitted.append(hits)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sum(emitted) == 4
