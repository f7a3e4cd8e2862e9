"""Eligibility check and trigger call for one remote job."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence, runtime_checkable

import structlog

from hubactions.orchestration.models import (
    AttemptOutcome,
    OperationHandle,
    OperationStatus,
    Target,
    TargetId,
)

logger = structlog.get_logger()

ACCEPTED = 202
NO_JOB_ID = "no job id returned"
DEFAULT_JOB_ID_KEYS = ("project_update", "id")


@runtime_checkable
class TriggerResponse(Protocol):
    """Minimal view of a trigger call's HTTP response."""

    @property
    def status_code(self) -> int: ...

    @property
    def body(self) -> Any: ...

    @property
    def text(self) -> str: ...


@runtime_checkable
class OperationBackend(Protocol):
    """Remote calls the orchestrator needs for one kind of operation."""

    async def check_eligible(self, target: Target) -> bool:
        """Read-only pre-check; False means there is nothing to do."""
        ...

    async def trigger(self, target: Target) -> TriggerResponse:
        """Side-effecting call starting the remote job."""
        ...

    async def fetch_status(self, job_id: TargetId) -> OperationStatus:
        """Current status of a started job."""
        ...


@dataclass(frozen=True)
class TriggerResult:
    """Either a started job or a terminal outcome (skipped or failed)."""

    handle: OperationHandle | None = None
    outcome: AttemptOutcome | None = None

    @property
    def started(self) -> bool:
        return self.handle is not None


class OperationTrigger:
    """Start a remote job for a target when the backend says it is eligible."""

    def __init__(
        self,
        backend: OperationBackend,
        *,
        job_id_keys: Sequence[str] = DEFAULT_JOB_ID_KEYS,
    ) -> None:
        self._backend = backend
        self._job_id_keys = tuple(job_id_keys)

    async def start(self, target: Target) -> TriggerResult:
        log = logger.bind(target=target.name, target_id=target.id)

        if not await self._backend.check_eligible(target):
            log.info("target_not_eligible")
            return TriggerResult(outcome=AttemptOutcome.skipped("cannot be updated"))

        response = await self._backend.trigger(target)
        if response.status_code != ACCEPTED:
            log.warning("trigger_rejected", status=response.status_code)
            return TriggerResult(
                outcome=AttemptOutcome.failed(
                    f"trigger rejected with status {response.status_code}: {response.text}"
                )
            )

        job_id = self._extract_job_id(response.body)
        if job_id is None:
            log.warning("trigger_missing_job_id")
            return TriggerResult(outcome=AttemptOutcome.failed(NO_JOB_ID))

        log.info("operation_triggered", job_id=job_id)
        return TriggerResult(handle=OperationHandle(job_id=job_id, target=target))

    def _extract_job_id(self, body: Any) -> TargetId | None:
        if not isinstance(body, dict):
            return None
        for key in self._job_id_keys:
            value = body.get(key)
            if value not in (None, ""):
                return value
        return None
