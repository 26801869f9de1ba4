from __future__ import annotations

from dataclasses import dataclass, field
import time
from typing import Callable


@dataclass(slots=True)
class TokenBucket:
    rate: float
    capacity: float = 1.0
    clock: Callable[[], float] = time.monotonic
    _tokens: float = field(init=False)
    _last: float = field(init=False)

    def __post_init__(self) -> None:
        # starts full, so the first request goes out immediately
        self._tokens = self.capacity
        self._last = self.clock()

    def try_admit(self) -> bool:
        self._refill()
        if self._tokens >= 1.0:
            self._tokens -= 1.0
            return True
        return False

    def time_until_token(self) -> float:
        self._refill()
        if self._tokens >= 1.0:
            return 0.0
        return (1.0 - self._tokens) / self.rate

    def _refill(self) -> None:
        now = self.clock()
        elapsed = now - self._last
        self._last = now
        if elapsed > 0:
            self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)
