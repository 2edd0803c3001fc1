"""
statechain.metrics — Prometheus instrumentation of block and extrinsic execution.

All series live in one `CollectorRegistry` owned by this module (created on first
use, or injected once with `set_registry`). Embedders expose it themselves, e.g.
by serving `generate_latest_text()` with `CONTENT_TYPE_LATEST`.

Series
------
  statechain_extrinsics_total{result,module}   Counter    result: success | failed
                                                          module: balances | proof_of_existence | other
  statechain_blocks_total{result}              Counter    result: executed | rejected
  statechain_block_apply_seconds               Histogram  wall time of execute_block

STATECHAIN_METRICS_BLOCK_SECONDS_BUCKETS overrides the histogram buckets with a
comma-separated list of seconds.
"""

from __future__ import annotations

import os
import time
from typing import Dict, Optional, Tuple

from prometheus_client import (CONTENT_TYPE_LATEST, CollectorRegistry, Counter,
                               Histogram, generate_latest)

_DEFAULT_BUCKETS = (0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0)

_MODULES = frozenset({"balances", "proof_of_existence"})


def _parse_buckets(raw: Optional[str]) -> Tuple[float, ...]:
    if not raw:
        return _DEFAULT_BUCKETS
    parsed = []
    for tok in raw.split(","):
        try:
            parsed.append(float(tok))
        except ValueError:
            continue
    return tuple(sorted(parsed)) or _DEFAULT_BUCKETS


class _Series:
    """The metric objects bound to one registry."""

    def __init__(self, registry: CollectorRegistry) -> None:
        self.registry = registry
        self.extrinsics = Counter(
            "statechain_extrinsics_total",
            "Extrinsics attempted, by result and owning module.",
            labelnames=("result", "module"),
            registry=registry,
        )
        self.blocks = Counter(
            "statechain_blocks_total",
            "Blocks handed to Runtime.execute_block, by result.",
            labelnames=("result",),
            registry=registry,
        )
        self.block_seconds = Histogram(
            "statechain_block_apply_seconds",
            "Wall time of Runtime.execute_block.",
            buckets=_parse_buckets(os.getenv("STATECHAIN_METRICS_BLOCK_SECONDS_BUCKETS")),
            registry=registry,
        )


_series: Optional[_Series] = None


def set_registry(registry: CollectorRegistry) -> bool:
    """
    Register the series in `registry` instead of a private one.

    Only effective before anything was recorded; returns False (and changes
    nothing) once the series exist.
    """
    global _series
    if _series is not None:
        return False
    _series = _Series(registry)
    return True


def _get() -> _Series:
    global _series
    if _series is None:
        _series = _Series(CollectorRegistry())
    return _series


def get_registry() -> CollectorRegistry:
    return _get().registry


def observe_extrinsic(*, result: str, module: str) -> None:
    """Count one extrinsic; anything but 'success' counts as failed."""
    r = "success" if str(result).strip().lower() == "success" else "failed"
    m = str(module).strip().lower()
    _get().extrinsics.labels(result=r, module=m if m in _MODULES else "other").inc()


def observe_block(*, result: str) -> None:
    """Count one block; anything but 'executed' counts as rejected."""
    r = "executed" if str(result).strip().lower() == "executed" else "rejected"
    _get().blocks.labels(result=r).inc()


class _BlockTimer:
    def __init__(self, hist: Histogram) -> None:
        self._hist = hist
        self._start = time.perf_counter()
        self.elapsed: Optional[float] = None

    def stop(self) -> float:
        """Record the elapsed time once; later calls return the same value."""
        if self.elapsed is None:
            self.elapsed = max(0.0, time.perf_counter() - self._start)
            self._hist.observe(self.elapsed)
        return self.elapsed

    def __enter__(self) -> "_BlockTimer":
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()


def time_block_apply() -> _BlockTimer:
    """
    Start timing a block. Stop it explicitly or use it as a context manager:

        with time_block_apply():
            runtime.execute_block(block)
    """
    return _BlockTimer(_get().block_seconds)


def sample(name: str, labels: Optional[Dict[str, str]] = None) -> float:
    """Current value of one sample, 0.0 if it has not been recorded."""
    value = get_registry().get_sample_value(name, labels or {})
    return 0.0 if value is None else float(value)


def generate_latest_text() -> bytes:
    """Prometheus text exposition of the registry."""
    return generate_latest(get_registry())


__all__ = [
    "CONTENT_TYPE_LATEST",
    "set_registry",
    "get_registry",
    "observe_extrinsic",
    "observe_block",
    "time_block_apply",
    "sample",
    "generate_latest_text",
]
