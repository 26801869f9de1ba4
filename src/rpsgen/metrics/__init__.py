from __future__ import annotations

from rpsgen.metrics.models import REQUEST_ERROR, Failure, Outcome, Snapshot, Success
from rpsgen.metrics.sampler import Sampler, percentile

__all__ = ["REQUEST_ERROR", "Failure", "Outcome", "Sampler", "Snapshot", "Success", "percentile"]
