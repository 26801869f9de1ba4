from __future__ import annotations

import pytest

from rpsgen import cli
from rpsgen.config import ConfigError


def _exit_code(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    return excinfo.value.code


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["--address", "http://svc"],
        ["--rps", "0", "--address", "http://svc"],
        ["--rps", "5"],
        ["--rps", "abc", "--address", "http://svc"],
        ["--rps", "5", "--address", "http://svc", "--headers", "broken"],
        ["--rps", "5", "--address", "http://svc", "--duration", "ten"],
        ["--rps", "5", "--address", "http://svc", "--unknown"],
        ["--rps", "nan", "--address", "http://svc"],
        ["--rps", "inf", "--address", "http://svc"],
        ["--rps", "5", "--address", "http://svc", "--timeout", "nan"],
        ["--rps", "5", "--address", "http://svc", "--headers", "X-Name:café"],
    ],
)
def test_bad_flags_exit_with_status_one(argv: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    assert _exit_code(argv) == 1
    assert "Error:" in capsys.readouterr().err


def test_config_from_args() -> None:
    args = cli.build_parser().parse_args(
        [
            "--rps", "12.5",
            "--address", "http://svc/health",
            "--authentication", "tok",
            "--headers", "A:1,B:2",
            "--headers", "C:3",
            "--duration", "1m",
            "--max-in-flight", "40",
        ]
    )
    config = cli.config_from_args(args)
    assert config.target_rate == 12.5
    assert config.duration_sec == 60.0
    assert config.max_in_flight == 40
    assert config.target.headers == (("A", "1"), ("B", "2"), ("C", "3"))
    assert config.target.request_headers()["Authentication"] == "bearer tok"


def test_config_from_args_defaults_to_unbounded_run() -> None:
    args = cli.build_parser().parse_args(["--rps", "1", "--address", "http://svc"])
    config = cli.config_from_args(args)
    assert config.duration_sec == 0.0
    assert config.target.headers == ()


def test_config_from_args_raises_config_error() -> None:
    args = cli.build_parser().parse_args(["--rps", "1", "--address", "http://svc", "--headers", "a:b:c"])
    with pytest.raises(ConfigError):
        cli.config_from_args(args)
