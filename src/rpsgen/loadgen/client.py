from __future__ import annotations

import asyncio
import logging
import time

import httpx

from rpsgen.config import TargetConfig
from rpsgen.metrics import REQUEST_ERROR, Failure, Outcome, Success

logger = logging.getLogger(__name__)


async def execute(client: httpx.AsyncClient, target: TargetConfig) -> Outcome:
    """Issue one GET against the target and classify the result.

    Never raises for per-request failures and never retries. The response
    body is read in full before the latency is taken, whatever the status.
    """
    start = time.perf_counter()
    try:
        resp = await client.get(
            target.address,
            headers=target.request_headers(),
            timeout=target.timeout_sec,
        )
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.debug("Request failed: %s", type(exc).__name__)
        return Failure(REQUEST_ERROR)
    latency_ms = (time.perf_counter() - start) * 1000.0
    if resp.status_code != 200:
        logger.debug("Status code %d", resp.status_code)
        return Failure(str(resp.status_code))
    return Success(latency_ms)


async def deliver(
    client: httpx.AsyncClient,
    target: TargetConfig,
    outcomes: asyncio.Queue[Outcome],
) -> None:
    outcome = await execute(client, target)
    # waits only this task when the queue is full
    await outcomes.put(outcome)
