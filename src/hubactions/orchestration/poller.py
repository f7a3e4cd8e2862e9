"""Status polling for a single remote job."""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable

import structlog

from hubactions.orchestration.models import AttemptOutcome, OperationStatus, TargetId

logger = structlog.get_logger()

MIN_POLL_INTERVAL = 0.1
TIMED_OUT = "timed out"

FetchStatus = Callable[[TargetId], Awaitable[OperationStatus]]
Sleep = Callable[[float], Awaitable[None]]
Clock = Callable[[], float]


class StatusPoller:
    """
    Poll a job until it reaches a terminal status or the timeout elapses.

    A fetch that raises is treated as transient: it is logged and polling
    continues. The timeout, measured from the start of ``poll()``, is the
    only hard stop. Each fetch is bounded by the time left (at least
    ``MIN_POLL_INTERVAL``) and the final sleep is cut short at the deadline,
    so a timed-out poll lasts at least ``timeout`` and less than
    ``timeout + interval``. ``clock`` must share the event loop's time base
    for the fetch bound to line up with the deadline.
    """

    def __init__(
        self,
        fetch_status: FetchStatus,
        *,
        interval: float,
        timeout: float,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = time.monotonic,
    ) -> None:
        if interval < MIN_POLL_INTERVAL:
            logger.warning("poll_interval_clamped", requested=interval, used=MIN_POLL_INTERVAL)
            interval = MIN_POLL_INTERVAL
        self._fetch_status = fetch_status
        self._interval = interval
        self._timeout = timeout
        self._sleep = sleep
        self._clock = clock

    @property
    def interval(self) -> float:
        return self._interval

    async def poll(self, job_id: TargetId) -> AttemptOutcome:
        log = logger.bind(job_id=job_id)
        deadline = self._clock() + self._timeout
        polls = 0

        while True:
            polls += 1
            fetch_timeout = max(deadline - self._clock(), MIN_POLL_INTERVAL)
            try:
                status = await asyncio.wait_for(self._fetch_status(job_id), timeout=fetch_timeout)
            except asyncio.TimeoutError:
                log.warning("status_fetch_timed_out", poll=polls, waited=fetch_timeout)
            except Exception as exc:
                log.warning("status_fetch_failed", poll=polls, error=str(exc))
            else:
                log.info("status_polled", poll=polls, status=status.status.value)
                if status.is_success:
                    return AttemptOutcome.succeeded()
                if status.is_failure:
                    reason = status.status.value if status.status.is_failure else "failed"
                    return AttemptOutcome.failed(reason)

            remaining = deadline - self._clock()
            if remaining <= 0:
                log.warning("poll_timed_out", polls=polls, timeout=self._timeout)
                return AttemptOutcome.failed(TIMED_OUT)
            await self._sleep(min(self._interval, remaining))
