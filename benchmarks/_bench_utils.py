"""Timing helpers shared by the benchmark scripts."""

from __future__ import annotations

import os
import platform
import statistics
import time
from dataclasses import dataclass
from typing import Any, Callable

import jax


def host_metadata() -> dict[str, Any]:
    return {
        "platform": platform.platform(),
        "python": platform.python_version(),
        "jax": jax.__version__,
        "backend": jax.default_backend(),
        "devices": [str(device) for device in jax.devices()],
        "cpu_count": os.cpu_count(),
        "x64": bool(jax.config.jax_enable_x64),
    }


def block_until_ready(value: object) -> None:
    # Rray results carry their buffer on ``.data``
    jax.block_until_ready(getattr(value, "data", value))


@dataclass(frozen=True)
class TimingSummary:
    mean_ms: float
    p50_ms: float
    p90_ms: float
    cv_pct: float
    samples: int


def summarize(timings: list[float]) -> TimingSummary:
    if len(timings) == 1:
        only = timings[0]
        return TimingSummary(mean_ms=only, p50_ms=only, p90_ms=only, cv_pct=0.0, samples=1)
    deciles = statistics.quantiles(timings, n=10, method="inclusive")
    avg = statistics.fmean(timings)
    cv = (statistics.stdev(timings) / avg) * 100.0 if avg > 0 else 0.0
    return TimingSummary(
        mean_ms=avg,
        p50_ms=statistics.median(timings),
        p90_ms=deciles[8],
        cv_pct=cv,
        samples=len(timings),
    )


def time_case(
    fn: Callable[[], object],
    *,
    repeats: int,
    warmup: int,
    samples: int,
    cv_target_pct: float = 5.0,
    max_samples: int = 30,
) -> TimingSummary:
    """Per-call milliseconds, sampling until the coefficient of variation settles."""
    for _ in range(max(0, warmup)):
        block_until_ready(fn())

    timings: list[float] = []
    while True:
        start_ns = time.perf_counter_ns()
        for _ in range(repeats):
            block_until_ready(fn())
        timings.append((time.perf_counter_ns() - start_ns) / repeats / 1e6)

        if len(timings) < max(1, samples):
            continue
        summary = summarize(timings)
        if summary.cv_pct <= cv_target_pct or len(timings) >= max_samples:
            return summary
