"""Orchestration package - trigger, poll, retry and coordinate remote jobs."""

from hubactions.orchestration.coordinator import CoordinationMode, MultiTargetCoordinator
from hubactions.orchestration.models import (
    AttemptOutcome,
    JobStatus,
    OperationHandle,
    OperationState,
    OperationStatus,
    OutcomeKind,
    SyncResult,
    Target,
)
from hubactions.orchestration.poller import StatusPoller
from hubactions.orchestration.resolver import resolve_targets
from hubactions.orchestration.results import AggregateReport, aggregate
from hubactions.orchestration.retrying import AttemptFailed, RetryingOperation
from hubactions.orchestration.trigger import OperationBackend, OperationTrigger, TriggerResult

__all__ = [
    "AggregateReport",
    "AttemptFailed",
    "AttemptOutcome",
    "CoordinationMode",
    "JobStatus",
    "MultiTargetCoordinator",
    "OperationBackend",
    "OperationHandle",
    "OperationState",
    "OperationStatus",
    "OperationTrigger",
    "OutcomeKind",
    "RetryingOperation",
    "StatusPoller",
    "SyncResult",
    "Target",
    "TriggerResult",
    "aggregate",
    "resolve_targets",
]
