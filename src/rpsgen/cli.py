from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import NoReturn, Sequence

from rich.console import Console
from rich.logging import RichHandler

from rpsgen.config import ConfigError, RunConfig, TargetConfig, parse_duration, parse_headers
from rpsgen.loadgen.runner import run_load
from rpsgen.ui.terminal import Reporter

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="rpsgen", description="Constant-rate HTTP GET load generator")
    parser.add_argument("--rps", type=float, default=0.0, help="Requests per second (required)")
    parser.add_argument("--address", default="", help="Address to hit (required)")
    parser.add_argument("--authentication", default="", help="Token required for api authentication")
    parser.add_argument(
        "--headers",
        action="append",
        default=[],
        help="Header to include in the request as Name:Value (repeatable, comma-separated)",
    )
    parser.add_argument(
        "--duration",
        default="0",
        help="Duration to run the test for in time format (e.g. 1h30m, 10s, 100ms)",
    )
    parser.add_argument("--timeout", type=float, default=10.0, help="Per-request timeout in seconds")
    parser.add_argument("--max-in-flight", type=int, default=None, help="Cap on unresolved requests")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> RunConfig:
    target = TargetConfig(
        address=args.address,
        headers=parse_headers(args.headers),
        auth_token=args.authentication,
        timeout_sec=args.timeout,
    )
    config = RunConfig(
        target=target,
        target_rate=args.rps,
        duration_sec=parse_duration(args.duration),
        max_in_flight=args.max_in_flight,
    )
    config.validate()
    return config


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    try:
        config = config_from_args(args)
    except ConfigError as exc:
        parser.error(str(exc))
    reporter = Reporter(duration_sec=config.duration_sec)
    asyncio.run(run_load(config, reporter))


if __name__ == "__main__":
    main()
