from __future__ import annotations

import math
from collections import Counter

import numpy as np

from rpsgen.metrics.models import Failure, Outcome, Snapshot, Success


def percentile(sorted_samples: np.ndarray, p: float) -> float:
    """Nearest-rank percentile of an ascending array; 0.0 when empty."""
    n = len(sorted_samples)
    if n == 0:
        return 0.0
    idx = math.ceil(p * n) - 1
    idx = min(max(idx, 0), n - 1)
    return float(sorted_samples[idx])


class Sampler:
    """Accumulates request outcomes and produces point-in-time snapshots.

    All mutation goes through :meth:`record_issued` and :meth:`ingest`, which
    the dispatch loop calls from a single task. Latencies are kept in full so
    percentiles are exact; new samples wait in a pending list and are merged
    into a sorted array only when a snapshot is requested.
    """

    def __init__(self) -> None:
        self.requests_issued = 0
        self.success_count = 0
        self.error_count = 0
        self._latency_total_ms = 0.0
        self._sorted = np.empty(0, dtype=np.float64)
        self._pending: list[float] = []
        self._errors: Counter[str] = Counter()

    @property
    def resolved(self) -> int:
        return self.success_count + self.error_count

    @property
    def sample_count(self) -> int:
        return len(self._sorted) + len(self._pending)

    def record_issued(self) -> None:
        self.requests_issued += 1

    def ingest(self, outcome: Outcome) -> None:
        if isinstance(outcome, Success):
            self.success_count += 1
            self._latency_total_ms += outcome.latency_ms
            self._pending.append(outcome.latency_ms)
        elif isinstance(outcome, Failure):
            self.error_count += 1
            self._errors[outcome.category] += 1
        else:
            msg = f"Unsupported outcome: {outcome!r}"
            raise TypeError(msg)

    def error_tally(self) -> dict[str, int]:
        return dict(self._errors)

    def sorted_latencies(self) -> np.ndarray:
        if self._pending:
            merged = np.concatenate([self._sorted, np.asarray(self._pending, dtype=np.float64)])
            # stable sort is a timsort here, near-linear on a sorted prefix
            merged.sort(kind="stable")
            self._sorted = merged
            self._pending = []
        return self._sorted

    def snapshot(self, elapsed_sec: float) -> Snapshot:
        samples = self.sorted_latencies()
        n = len(samples)
        avg = self._latency_total_ms / n if n else 0.0
        rps = self.requests_issued / elapsed_sec if elapsed_sec > 0 else 0.0
        return Snapshot(
            requests_issued=self.requests_issued,
            success_count=self.success_count,
            error_count=self.error_count,
            elapsed_sec=elapsed_sec,
            rps=rps,
            avg_latency_ms=avg,
            p90_ms=percentile(samples, 0.90),
            p95_ms=percentile(samples, 0.95),
            p99_ms=percentile(samples, 0.99),
            error_tally=tuple(sorted(self._errors.items())),
        )
