"""
Tests for StatusPoller.
"""

import asyncio
import time

import pytest
from hubactions.orchestration.models import JobStatus, OperationStatus, OutcomeKind
from hubactions.orchestration.poller import MIN_POLL_INTERVAL, TIMED_OUT, StatusPoller


def status_sequence(*statuses, failed=None):
    """Return a fetch function yielding the given statuses, repeating the last."""
    calls = []

    async def fetch(job_id):
        index = min(len(calls), len(statuses) - 1)
        calls.append(job_id)
        item = statuses[index]
        if isinstance(item, Exception):
            raise item
        return OperationStatus(job_id=job_id, status=item, failed=failed)

    fetch.calls = calls
    return fetch


class TestStatusPoller:
    """Terminal detection, transient errors and the timeout."""

    @pytest.mark.asyncio
    async def test_success_after_two_sleeps(self, clock):
        fetch = status_sequence(JobStatus.PENDING, JobStatus.PENDING, JobStatus.SUCCESSFUL)
        poller = StatusPoller(fetch, interval=5.0, timeout=300, sleep=clock.sleep, clock=clock)

        outcome = await poller.poll(42)

        assert outcome.kind is OutcomeKind.SUCCESS
        assert clock.sleeps == [5.0, 5.0]
        assert fetch.calls == [42, 42, 42]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [JobStatus.FAILED, JobStatus.ERROR, JobStatus.CANCELED])
    async def test_failure_terminal_statuses(self, clock, status):
        fetch = status_sequence(JobStatus.RUNNING, status)
        poller = StatusPoller(fetch, interval=1.0, timeout=60, sleep=clock.sleep, clock=clock)

        outcome = await poller.poll(7)

        assert outcome.kind is OutcomeKind.FAILURE
        assert outcome.reason == status.value

    @pytest.mark.asyncio
    async def test_successful_with_failed_flag_is_failure(self, clock):
        fetch = status_sequence(JobStatus.SUCCESSFUL, failed=True)
        poller = StatusPoller(fetch, interval=1.0, timeout=60, sleep=clock.sleep, clock=clock)

        outcome = await poller.poll(7)

        assert outcome.kind is OutcomeKind.FAILURE
        assert outcome.reason == "failed"

    @pytest.mark.asyncio
    async def test_timeout_bounds(self, clock):
        fetch = status_sequence(JobStatus.RUNNING)
        poller = StatusPoller(fetch, interval=4.0, timeout=10.0, sleep=clock.sleep, clock=clock)

        outcome = await poller.poll(1)

        assert outcome.kind is OutcomeKind.FAILURE
        assert outcome.reason == TIMED_OUT
        assert 10.0 <= clock.elapsed < 10.0 + 4.0
        # The last sleep is shortened to the time left.
        assert clock.sleeps == [4.0, 4.0, 2.0]

    @pytest.mark.asyncio
    async def test_fetch_errors_are_transient(self, clock):
        fetch = status_sequence(
            ConnectionError("boom"),
            ConnectionError("boom again"),
            JobStatus.SUCCESSFUL,
        )
        poller = StatusPoller(fetch, interval=2.0, timeout=60, sleep=clock.sleep, clock=clock)

        outcome = await poller.poll(3)

        assert outcome.is_success
        assert len(fetch.calls) == 3
        assert clock.sleeps == [2.0, 2.0]

    @pytest.mark.asyncio
    async def test_fetch_errors_until_timeout(self, clock):
        fetch = status_sequence(ConnectionError("down"))
        poller = StatusPoller(fetch, interval=3.0, timeout=9.0, sleep=clock.sleep, clock=clock)

        outcome = await poller.poll(3)

        assert outcome.reason == TIMED_OUT
        assert clock.elapsed == pytest.approx(9.0)

    @pytest.mark.asyncio
    async def test_timeout_measured_from_poll_start(self, clock):
        fetch = status_sequence(JobStatus.RUNNING)
        poller = StatusPoller(fetch, interval=1.0, timeout=5.0, sleep=clock.sleep, clock=clock)

        clock.now += 500  # time spent before polling does not count
        start = clock.now
        await poller.poll(1)

        assert clock.now - start == pytest.approx(5.0)

    def test_non_positive_interval_is_clamped(self):
        async def fetch(job_id):
            raise AssertionError("not called")

        assert StatusPoller(fetch, interval=0, timeout=1).interval == MIN_POLL_INTERVAL
        assert StatusPoller(fetch, interval=-3, timeout=1).interval == MIN_POLL_INTERVAL
        assert StatusPoller(fetch, interval=2.5, timeout=1).interval == 2.5

    @pytest.mark.asyncio
    async def test_slow_fetch_is_cut_off_at_deadline(self):
        async def hanging_fetch(job_id):
            await asyncio.Event().wait()

        poller = StatusPoller(hanging_fetch, interval=1.0, timeout=0.3)
        started = time.monotonic()

        outcome = await poller.poll(5)

        assert outcome.reason == TIMED_OUT
        assert 0.25 <= time.monotonic() - started < 0.3 + 1.0

    @pytest.mark.asyncio
    async def test_fetch_running_past_deadline_stops_polling(self, clock):
        calls = []

        async def slow_fetch(job_id):
            calls.append(job_id)
            clock.now += 20.0
            return OperationStatus(job_id=job_id, status=JobStatus.RUNNING, failed=False)

        poller = StatusPoller(slow_fetch, interval=4.0, timeout=10.0, sleep=clock.sleep, clock=clock)

        outcome = await poller.poll(9)

        assert outcome.reason == TIMED_OUT
        assert calls == [9]
        assert clock.sleeps == []
