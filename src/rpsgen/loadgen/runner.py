from __future__ import annotations

import asyncio
import logging
import signal
import time
from enum import Enum
from typing import Callable, Protocol

import httpx

from rpsgen.config import RunConfig
from rpsgen.loadgen.client import deliver
from rpsgen.loadgen.limiter import TokenBucket
from rpsgen.metrics import Outcome, Sampler, Snapshot

logger = logging.getLogger(__name__)

# event-loop timers fire up to about this late
TIMER_RESOLUTION_SEC = 0.001


class DispatchState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class SnapshotRenderer(Protocol):
    def render(self, snapshot: Snapshot, final: bool = False) -> None:
        ...


class Dispatcher:
    """Rate-gated control loop: admit, launch, drain, report.

    Every request runs as its own task and hands its outcome back through a
    bounded queue; the loop is the queue's only consumer, so the sampler is
    only ever touched from here.
    """

    def __init__(
        self,
        config: RunConfig,
        client: httpx.AsyncClient,
        reporter: SnapshotRenderer,
        sampler: Sampler | None = None,
        limiter: TokenBucket | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.config = config
        self.client = client
        self.reporter = reporter
        self.sampler = sampler or Sampler()
        self.limiter = limiter or TokenBucket(rate=config.target_rate)
        self.state = DispatchState.RUNNING
        self._clock = clock
        self.iterations = 0
        self._tasks: set[asyncio.Task[None]] = set()
        self._outcomes: asyncio.Queue[Outcome] | None = None

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def stop(self) -> None:
        if self.state is DispatchState.RUNNING:
            logger.info("Stop requested")
        self.state = DispatchState.STOPPED

    async def run(self) -> Snapshot:
        self._outcomes = asyncio.Queue(maxsize=self.config.queue_capacity)
        started = self._clock()
        last_render = started
        try:
            while self.state is DispatchState.RUNNING:
                self.iterations += 1
                drained = self._drain()
                admitted = self._maybe_admit()
                now = self._clock()
                elapsed = now - started
                if now - last_render >= self.config.report_interval_sec:
                    self.reporter.render(self.sampler.snapshot(elapsed))
                    last_render = now
                if self.config.duration_sec > 0 and elapsed > self.config.duration_sec:
                    logger.info("Run duration of %.3fs reached", self.config.duration_sec)
                    self.stop()
                    break
                if drained or admitted:
                    await asyncio.sleep(0)
                else:
                    await asyncio.sleep(self._idle_delay())
        finally:
            self.state = DispatchState.STOPPED
            await self._abandon_in_flight()
        final = self.sampler.snapshot(self._clock() - started)
        self.reporter.render(final, final=True)
        return final

    def _drain(self) -> int:
        assert self._outcomes is not None
        count = 0
        while True:
            try:
                outcome = self._outcomes.get_nowait()
            except asyncio.QueueEmpty:
                return count
            self.sampler.ingest(outcome)
            count += 1

    def _maybe_admit(self) -> bool:
        assert self._outcomes is not None
        if self._at_capacity():
            return False
        if not self.limiter.try_admit():
            return False
        task = asyncio.create_task(deliver(self.client, self.config.target, self._outcomes))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self.sampler.record_issued()
        return True

    def _at_capacity(self) -> bool:
        cap = self.config.max_in_flight
        return cap is not None and len(self._tasks) >= cap

    def _idle_delay(self) -> float:
        if self._at_capacity():
            return self.config.idle_sleep_sec
        # timed sleeps stop one resolution short of the next token; the rest is yielded
        delay = self.limiter.time_until_token() - TIMER_RESOLUTION_SEC
        if delay <= 0:
            return 0.0
        return min(delay, self.config.idle_sleep_sec)

    async def _abandon_in_flight(self) -> None:
        pending = list(self._tasks)
        if not pending:
            return
        logger.info("Abandoning %d in-flight requests", len(pending))
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)


async def run_load(
    config: RunConfig,
    reporter: SnapshotRenderer,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Snapshot:
    config.validate()
    logger.info("Starting load: %.2f rps against %s", config.target_rate, config.target.address)
    async with httpx.AsyncClient(transport=transport) as client:
        dispatcher = Dispatcher(config, client, reporter)
        loop = asyncio.get_running_loop()
        handled = _handle_interrupt(loop, dispatcher.stop)
        try:
            return await dispatcher.run()
        finally:
            if handled:
                loop.remove_signal_handler(signal.SIGINT)


def _handle_interrupt(loop: asyncio.AbstractEventLoop, callback: Callable[[], None]) -> bool:
    try:
        loop.add_signal_handler(signal.SIGINT, callback)
    except (NotImplementedError, RuntimeError):
        # Windows event loops, or not on the main thread
        logger.debug("SIGINT handler unavailable; Ctrl-C aborts without a final report")
        return False
    return True
