from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

REQUEST_ERROR = "request error"


@dataclass(frozen=True, slots=True)
class Success:
    latency_ms: float


@dataclass(frozen=True, slots=True)
class Failure:
    category: str


Outcome = Union[Success, Failure]


@dataclass(frozen=True, slots=True)
class Snapshot:
    requests_issued: int
    success_count: int
    error_count: int
    elapsed_sec: float
    rps: float
    avg_latency_ms: float
    p90_ms: float
    p95_ms: float
    p99_ms: float
    # (category, count) pairs sorted by category
    error_tally: tuple[tuple[str, int], ...] = field(default_factory=tuple)

    @property
    def in_flight(self) -> int:
        return self.requests_issued - self.success_count - self.error_count
