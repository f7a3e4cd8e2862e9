"""
Retry state machine around a trigger-then-poll cycle.

    NOT_STARTED -> TRIGGERING -> POLLING -> SUCCEEDED
                        |            |
                        v            v
                     SKIPPED       FAILED --(attempts left)--> TRIGGERING
                                     |
                                     +--(budget exhausted)--> FAILED_FINAL

A retry restarts the whole cycle from TRIGGERING: a failed or timed-out
remote job is not assumed to be resumable. Backends that can resume a job
may opt in with ``resume_polling=True``.
"""

from __future__ import annotations

import asyncio
import time
from typing import NoReturn

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from hubactions.logging import bind_context
from hubactions.orchestration.models import (
    AttemptOutcome,
    OperationHandle,
    OperationState,
    SyncResult,
    Target,
)
from hubactions.orchestration.poller import TIMED_OUT, Clock, FetchStatus, Sleep, StatusPoller
from hubactions.orchestration.trigger import OperationTrigger


class AttemptFailed(Exception):
    """One trigger-and-poll cycle ended in failure."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class RetryingOperation:
    """Run trigger-then-poll for one target under a bounded retry budget."""

    def __init__(
        self,
        target: Target,
        trigger: OperationTrigger,
        fetch_status: FetchStatus,
        *,
        max_attempts: int,
        retry_delay: float,
        poll_interval: float,
        timeout: float,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = time.monotonic,
        resume_polling: bool = False,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.target = target
        self._trigger = trigger
        self._fetch_status = fetch_status
        self._max_attempts = max_attempts
        self._retry_delay = max(retry_delay, 0.0)
        self._poll_interval = poll_interval
        self._timeout = timeout
        self._sleep = sleep
        self._clock = clock
        self._resume_polling = resume_polling

        self._state = OperationState.NOT_STARTED
        self._history: list[OperationState] = [OperationState.NOT_STARTED]
        self._attempts = 0
        self._last_error: str | None = None
        self._handle: OperationHandle | None = None
        self._log = bind_context(target=target.name, target_id=target.id)

    @property
    def state(self) -> OperationState:
        return self._state

    @property
    def history(self) -> list[OperationState]:
        return list(self._history)

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def _transition(self, state: OperationState) -> None:
        self._state = state
        self._history.append(state)

    async def run(self) -> SyncResult:
        """Drive the state machine to a terminal state and report it."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_fixed(self._retry_delay),
            retry=retry_if_exception_type(AttemptFailed),
            before_sleep=self._before_retry,
            sleep=self._sleep,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    self._attempts = attempt.retry_state.attempt_number
                    outcome = await self._run_attempt()
        except AttemptFailed as exc:
            self._transition(OperationState.FAILED_FINAL)
            self._log.error(
                "operation_failed",
                attempts=self._attempts,
                max_attempts=self._max_attempts,
                error=exc.reason,
            )
            return SyncResult.for_target(
                self.target,
                success=False,
                error=exc.reason,
                attempts=self._attempts,
            )

        if outcome.is_skipped:
            self._log.info("operation_skipped", reason=outcome.reason)
            return SyncResult.for_target(
                self.target, success=True, attempts=self._attempts, skipped=True
            )

        self._log.info("operation_succeeded", attempts=self._attempts)
        return SyncResult.for_target(self.target, success=True, attempts=self._attempts)

    async def _run_attempt(self) -> AttemptOutcome:
        handle = self._handle if self._resume_polling else None

        if handle is None:
            self._transition(OperationState.TRIGGERING)
            try:
                result = await self._trigger.start(self.target)
            except Exception as exc:
                self._fail(f"trigger error: {exc}")
            if result.outcome is not None:
                if result.outcome.is_skipped:
                    self._transition(OperationState.SKIPPED)
                    return result.outcome
                self._fail(result.outcome.reason or "trigger failed")
            handle = result.handle
            self._handle = handle

        if handle is None or handle.job_id is None:
            self._fail("trigger returned no job id")
        self._transition(OperationState.POLLING)
        poller = StatusPoller(
            self._fetch_status,
            interval=self._poll_interval,
            timeout=self._timeout,
            sleep=self._sleep,
            clock=self._clock,
        )
        outcome = await poller.poll(handle.job_id)
        if not outcome.is_success:
            if outcome.reason != TIMED_OUT:
                # Only a timed-out job can be resumed; a failed one is re-triggered.
                self._handle = None
            self._fail(f"job {handle.job_id} {outcome.reason}")

        self._transition(OperationState.SUCCEEDED)
        return outcome

    def _fail(self, reason: str) -> NoReturn:
        self._last_error = reason
        self._transition(OperationState.FAILED)
        self._log.warning(
            "attempt_failed",
            attempt=self._attempts,
            max_attempts=self._max_attempts,
            error=reason,
        )
        raise AttemptFailed(reason)

    def _before_retry(self, retry_state: RetryCallState) -> None:
        self._log.info(
            "attempt_retrying",
            attempt=retry_state.attempt_number,
            next_attempt=retry_state.attempt_number + 1,
            delay=self._retry_delay,
        )
