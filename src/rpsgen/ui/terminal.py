from __future__ import annotations

from rich.console import Console
from rich.text import Text

from rpsgen.metrics import Snapshot


def format_latency(ms: float) -> str:
    """Round to the millisecond: ``12ms``, ``1.5s``, ``0s``."""
    rounded = round(ms)
    if rounded == 0:
        return "0s"
    if rounded < 1000:
        return f"{rounded}ms"
    return f"{rounded / 1000:.3f}".rstrip("0").rstrip(".") + "s"


def format_elapsed(seconds: float) -> str:
    whole = int(seconds)
    hours, rest = divmod(whole, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


def format_duration(seconds: float) -> str:
    if seconds == int(seconds):
        return format_elapsed(seconds)
    return format_latency(seconds * 1000.0)


class Reporter:
    def __init__(self, console: Console | None = None, duration_sec: float = 0.0) -> None:
        self.console = console or Console()
        self.duration_sec = duration_sec

    def render(self, snapshot: Snapshot, final: bool = False) -> None:
        self.console.clear()
        for category, count in snapshot.error_tally:
            self.console.print(Text(f"Error {category}: {count}", style="red"))
        self.console.print(Text(self.summary_line(snapshot)), soft_wrap=True)
        if final:
            self.console.print(Text(self.latency_line(snapshot), style="bold"))

    def summary_line(self, snapshot: Snapshot) -> str:
        fields: dict[str, str] = {
            "avg duration": format_latency(snapshot.avg_latency_ms),
            "elapsed": format_elapsed(snapshot.elapsed_sec),
            "error count": str(snapshot.error_count),
            "in flight": str(snapshot.in_flight),
            "requests": str(snapshot.requests_issued),
            "rps": f"{snapshot.rps:.2f}",
            "success count": str(snapshot.success_count),
        }
        if self.duration_sec > 0:
            fields["duration"] = format_duration(self.duration_sec)
        return " ".join(f"{key}: {fields[key]}" for key in sorted(fields))

    @staticmethod
    def latency_line(snapshot: Snapshot) -> str:
        return (
            f"p99: {format_latency(snapshot.p99_ms)}, "
            f"p95: {format_latency(snapshot.p95_ms)}, "
            f"p90: {format_latency(snapshot.p90_ms)}"
        )
