from __future__ import annotations

import re
from typing import Iterable

from rpsgen.config.models import ConfigError, valid_header_name, valid_header_value

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_header(raw: str) -> tuple[str, str]:
    parts = raw.split(":")
    if len(parts) != 2:
        msg = f"Invalid header: {raw}"
        raise ConfigError(msg)
    name, value = parts[0].strip(), parts[1].strip()
    if not valid_header_name(name) or not valid_header_value(value):
        msg = f"Invalid header: {raw}"
        raise ConfigError(msg)
    return name, value


def parse_headers(values: Iterable[str]) -> tuple[tuple[str, str], ...]:
    """Parse repeated ``--headers`` values, each possibly comma-separated."""
    headers: list[tuple[str, str]] = []
    for value in values:
        for raw in value.split(","):
            if not raw.strip():
                continue
            headers.append(parse_header(raw))
    return tuple(headers)


def parse_duration(text: str) -> float:
    """Parse strings such as ``1h30m``, ``10s`` or ``100ms`` into seconds."""
    text = text.strip()
    if text == "0":
        return 0.0
    pos = 0
    total = 0.0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if match is None:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(text):
        msg = f"Invalid duration: {text!r} (expected e.g. 1h30m, 10s, 100ms)"
        raise ConfigError(msg)
    return total
