from __future__ import annotations
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict

from .kepler_types import GaussCoefficients, KeplerStepResult

"""
This module collects the diagnostic helpers of the Kepler stepper. rate_limited_log emits a log record for the first few occurrences of a message key and afterwards only every n-th occurrence, tagging the repeats with their occurrence count, so that a misbehaving orbit inside a long integration does not flood the log. gauss_determinant returns f*gdot - g*fdot, which equals one for every exact two-body step and is used as a correctness check. ConvergenceStats is a caller-owned accumulator of iteration counts per regime, updated through record. The module assumes a logging configuration is installed by the application; records go to the hkepler.* loggers. The occurrence counter is the only module-level state of the package and is guarded by a lock.

"""

logger = logging.getLogger(__name__)

_GLOBAL_DIAG_COUNTS: Dict[str, int] = {}
_DIAG_COUNTS_LOCK = threading.Lock()


def rate_limited_log(
	log: logging.Logger,
	key: str,
	msg: str,
	*args,
	level: int = logging.WARNING,
	cfg=None,
) -> bool:
	if cfg is None:
		enabled = True
		limit = 3
		interval = 1000
	else:
		enabled = bool(getattr(cfg, "diag_prints", True))
		limit = int(getattr(cfg, "diag_print_limit", 3))
		interval = int(getattr(cfg, "diag_print_interval", 1000))
	if not enabled:
		return False
	if limit < 0:
		limit = 0
	if interval < 1:
		interval = 1

	with _DIAG_COUNTS_LOCK:
		c = _GLOBAL_DIAG_COUNTS.get(key, 0) + 1
		_GLOBAL_DIAG_COUNTS[key] = c

	if c <= limit:
		log.log(level, msg, *args)
		return True
	if c % interval == 0:
		log.log(level, msg + " (occurrence #%d)", *args, c)
		return True
	return False


def reset_diag_counts() -> None:
	with _DIAG_COUNTS_LOCK:
		_GLOBAL_DIAG_COUNTS.clear()


def gauss_determinant(gauss: GaussCoefficients) -> float:
	return gauss.f * gauss.gdot - gauss.g * gauss.fdot


@dataclass
class ConvergenceStats:
	calls: int = 0
	total_iterations: int = 0
	max_iterations: int = 0
	max_final_ds: float = 0.0
	by_regime: Dict[str, int] = field(default_factory=dict)

	def record(self, result: KeplerStepResult) -> None:
		self.calls += 1
		self.total_iterations += int(result.iterations)
		if result.iterations > self.max_iterations:
			self.max_iterations = int(result.iterations)
		ads = abs(float(result.state.ds))
		if ads > self.max_final_ds:
			self.max_final_ds = ads
		self.by_regime[result.regime] = self.by_regime.get(result.regime, 0) + 1

	@property
	def mean_iterations(self) -> float:
		if self.calls == 0:
			return 0.0
		return self.total_iterations / self.calls

	def reset(self) -> None:
		self.calls = 0
		self.total_iterations = 0
		self.max_iterations = 0
		self.max_final_ds = 0.0
		self.by_regime.clear()
