from __future__ import annotations

import pytest

from rpsgen.config import (
    ConfigError,
    RunConfig,
    TargetConfig,
    parse_duration,
    parse_header,
    parse_headers,
)


def test_parse_header() -> None:
    assert parse_header("X-Team:perf") == ("X-Team", "perf")
    assert parse_header("Accept: application/json") == ("Accept", "application/json")


@pytest.mark.parametrize(
    "raw",
    ["no-separator", "a:b:c", ":value", "Referer:http://x", "X-Name:café", "Bad Name:x", "X-A:\x01"],
)
def test_parse_header_rejects_malformed(raw: str) -> None:
    with pytest.raises(ConfigError, match="Invalid header"):
        parse_header(raw)


def test_parse_headers_repeated_and_comma_separated() -> None:
    headers = parse_headers(["A:1,B:2", "C:3"])
    assert headers == (("A", "1"), ("B", "2"), ("C", "3"))


def test_parse_headers_fails_on_any_malformed_entry() -> None:
    with pytest.raises(ConfigError):
        parse_headers(["A:1", "broken"])


@pytest.mark.parametrize(
    ("text", "seconds"),
    [
        ("0", 0.0),
        ("10s", 10.0),
        ("100ms", 0.1),
        ("1h30m", 5400.0),
        ("1.5s", 1.5),
        ("2m10s", 130.0),
        ("500us", 0.0005),
    ],
)
def test_parse_duration(text: str, seconds: float) -> None:
    assert parse_duration(text) == pytest.approx(seconds)


@pytest.mark.parametrize("text", ["", "10", "abc", "10x", "5s junk", "-1s"])
def test_parse_duration_rejects_garbage(text: str) -> None:
    with pytest.raises(ConfigError, match="Invalid duration"):
        parse_duration(text)


def test_request_headers_include_bearer_token() -> None:
    target = TargetConfig(address="http://svc", headers=(("X-A", "1"),), auth_token="tok")
    assert target.request_headers() == {"X-A": "1", "Authentication": "bearer tok"}
    assert "Authentication" not in TargetConfig(address="http://svc").request_headers()


@pytest.mark.parametrize(
    "config",
    [
        RunConfig(target=TargetConfig(address="http://svc"), target_rate=0.0),
        RunConfig(target=TargetConfig(address="http://svc"), target_rate=-3.0),
        RunConfig(target=TargetConfig(address=""), target_rate=5.0),
        RunConfig(target=TargetConfig(address="http://svc"), target_rate=5.0, duration_sec=-1.0),
        RunConfig(target=TargetConfig(address="http://svc"), target_rate=5.0, queue_capacity=0),
        RunConfig(target=TargetConfig(address="http://svc"), target_rate=5.0, max_in_flight=0),
        RunConfig(target=TargetConfig(address="http://svc", timeout_sec=0.0), target_rate=5.0),
        RunConfig(target=TargetConfig(address="http://svc"), target_rate=float("nan")),
        RunConfig(target=TargetConfig(address="http://svc"), target_rate=float("inf")),
        RunConfig(target=TargetConfig(address="http://svc", timeout_sec=float("nan")), target_rate=5.0),
        RunConfig(target=TargetConfig(address="http://svc", timeout_sec=float("inf")), target_rate=5.0),
        RunConfig(target=TargetConfig(address="http://svc", headers=(("X-Name", "café"),)), target_rate=5.0),
        RunConfig(target=TargetConfig(address="http://svc", auth_token="tök"), target_rate=5.0),
    ],
)
def test_validate_rejects_bad_config(config: RunConfig) -> None:
    with pytest.raises(ConfigError):
        config.validate()


def test_validate_accepts_minimal_config() -> None:
    RunConfig(target=TargetConfig(address="http://svc"), target_rate=0.5).validate()
