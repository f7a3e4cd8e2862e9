"""Types for collection approval."""

from __future__ import annotations

from dataclasses import dataclass

STAGING_REPOSITORY = "staging"
PUBLISHED_REPOSITORY = "published"


@dataclass(frozen=True)
class CollectionRef:
    """A collection version awaiting approval."""

    namespace: str
    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.namespace}.{self.name}:{self.version}"


@dataclass(frozen=True)
class PollBudget:
    """Timeout/interval pair bounding an approval loop."""

    timeout: float
    interval: float

    @property
    def max_attempts(self) -> int:
        """Number of attempts the budget allows, never fewer than one."""
        if self.interval <= 0:
            return 1
        return max(1, int(self.timeout // self.interval))
