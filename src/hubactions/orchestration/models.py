"""Data model for asynchronous remote operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

TargetId = Union[int, str]


@dataclass(frozen=True)
class Target:
    """One independently-operable unit of work (e.g. a controller project)."""

    id: TargetId
    name: str


@dataclass(frozen=True)
class OperationHandle:
    """A remote job started for a target."""

    job_id: TargetId | None
    target: Target


class JobStatus(str, Enum):
    """Closed vocabulary of remote job statuses."""

    NEW = "new"
    PENDING = "pending"
    WAITING = "waiting"
    RUNNING = "running"
    SUCCESSFUL = "successful"
    FAILED = "failed"
    ERROR = "error"
    CANCELED = "canceled"

    @property
    def is_success(self) -> bool:
        return self is JobStatus.SUCCESSFUL

    @property
    def is_failure(self) -> bool:
        return self in FAILURE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.is_success or self.is_failure


FAILURE_STATUSES = frozenset({JobStatus.FAILED, JobStatus.ERROR, JobStatus.CANCELED})


@dataclass(frozen=True)
class OperationStatus:
    """A status snapshot read while polling."""

    job_id: TargetId
    status: JobStatus
    failed: bool | None = None

    @property
    def is_success(self) -> bool:
        return self.status.is_success and not self.failed

    @property
    def is_failure(self) -> bool:
        # A "successful" job that flags itself as failed is still a failure.
        return self.status.is_failure or (self.status.is_success and bool(self.failed))


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILURE = "failure"


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one trigger-and-poll cycle."""

    kind: OutcomeKind
    reason: str | None = None

    @classmethod
    def succeeded(cls) -> AttemptOutcome:
        return cls(OutcomeKind.SUCCESS)

    @classmethod
    def skipped(cls, reason: str | None = None) -> AttemptOutcome:
        return cls(OutcomeKind.SKIPPED, reason)

    @classmethod
    def failed(cls, reason: str) -> AttemptOutcome:
        return cls(OutcomeKind.FAILURE, reason)

    @property
    def is_success(self) -> bool:
        """True for success and skipped; skipping is not a failure."""
        return self.kind is not OutcomeKind.FAILURE

    @property
    def is_skipped(self) -> bool:
        return self.kind is OutcomeKind.SKIPPED


class OperationState(str, Enum):
    """Position of a RetryingOperation in its state machine."""

    NOT_STARTED = "not_started"
    TRIGGERING = "triggering"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"
    FAILED_FINAL = "failed_final"

    @property
    def is_terminal(self) -> bool:
        return self in (OperationState.SUCCEEDED, OperationState.SKIPPED, OperationState.FAILED_FINAL)


@dataclass(frozen=True)
class SyncResult:
    """Final per-target record."""

    target_id: TargetId
    target_name: str
    success: bool
    error: str | None = None
    attempts: int = 0
    skipped: bool = False

    @classmethod
    def for_target(
        cls,
        target: Target,
        *,
        success: bool,
        error: str | None = None,
        attempts: int = 0,
        skipped: bool = False,
    ) -> SyncResult:
        return cls(
            target_id=target.id,
            target_name=target.name,
            success=success,
            error=error,
            attempts=attempts,
            skipped=skipped,
        )
