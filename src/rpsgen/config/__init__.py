from __future__ import annotations

from rpsgen.config.models import ConfigError, RunConfig, TargetConfig
from rpsgen.config.parsing import parse_duration, parse_header, parse_headers

__all__ = [
    "ConfigError",
    "RunConfig",
    "TargetConfig",
    "parse_duration",
    "parse_header",
    "parse_headers",
]
