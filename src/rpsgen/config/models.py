from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

# RFC 9110 token characters
_HEADER_NAME = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


class ConfigError(ValueError):
    """Raised for any startup misconfiguration; the CLI exits with status 1."""


def valid_header_name(name: str) -> bool:
    return _HEADER_NAME.fullmatch(name) is not None


def valid_header_value(value: str) -> bool:
    # visible ASCII, space and tab only
    return all(ch == "\t" or " " <= ch <= "~" for ch in value)


@dataclass(frozen=True, slots=True)
class TargetConfig:
    address: str
    headers: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    auth_token: str = ""
    timeout_sec: float = 10.0

    def request_headers(self) -> dict[str, str]:
        headers = {name: value for name, value in self.headers}
        if self.auth_token:
            headers["Authentication"] = f"bearer {self.auth_token}"
        return headers


@dataclass(frozen=True, slots=True)
class RunConfig:
    target: TargetConfig
    target_rate: float
    duration_sec: float = 0.0  # 0 runs until interrupted
    report_interval_sec: float = 1.0
    queue_capacity: int = 100
    max_in_flight: int | None = None
    idle_sleep_sec: float = 0.001

    def validate(self) -> None:
        if not math.isfinite(self.target_rate) or self.target_rate <= 0:
            msg = "The 'rps' flag is required and must be a finite number greater than 0."
            raise ConfigError(msg)
        if not self.target.address:
            msg = "The 'address' flag is required."
            raise ConfigError(msg)
        if not math.isfinite(self.duration_sec) or self.duration_sec < 0:
            msg = f"Duration must be a finite non-negative value, got {self.duration_sec}"
            raise ConfigError(msg)
        if not math.isfinite(self.target.timeout_sec) or self.target.timeout_sec <= 0:
            msg = f"Timeout must be a finite number greater than 0, got {self.target.timeout_sec}"
            raise ConfigError(msg)
        for name, value in self.target.headers:
            if not valid_header_name(name) or not valid_header_value(value):
                msg = f"Invalid header: {name}:{value}"
                raise ConfigError(msg)
        if not valid_header_value(self.target.auth_token):
            msg = "Authentication token must be printable ASCII"
            raise ConfigError(msg)
        if self.queue_capacity <= 0:
            msg = f"Queue capacity must be greater than 0, got {self.queue_capacity}"
            raise ConfigError(msg)
        if self.max_in_flight is not None and self.max_in_flight <= 0:
            msg = f"Max in-flight must be greater than 0, got {self.max_in_flight}"
            raise ConfigError(msg)
