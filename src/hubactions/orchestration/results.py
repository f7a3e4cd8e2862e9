"""Aggregation of per-target results into a run verdict."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

import structlog

from hubactions.orchestration.models import SyncResult

logger = structlog.get_logger()


@dataclass
class AggregateReport:
    """Stable partition of SyncResults into successes and failures."""

    results: list[SyncResult] = field(default_factory=list)
    successes: list[SyncResult] = field(default_factory=list)
    failures: list[SyncResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Whether every target succeeded (skipped counts as success)."""
        return len(self.failures) == 0

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def skipped_count(self) -> int:
        return sum(1 for r in self.successes if r.skipped)

    def failure_lines(self) -> Iterator[str]:
        """One diagnostic line per failed target."""
        for result in self.failures:
            yield f"{result.target_name} (id={result.target_id}): {result.error or 'unknown error'}"

    def summary(self) -> str:
        if self.success:
            return f"All {len(self.results)} project(s) synced successfully"
        return f"{self.failure_count} of {len(self.results)} project(s) failed to sync"

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "total": len(self.results),
            "failed_count": self.failure_count,
            "skipped_count": self.skipped_count,
            "results": [
                {
                    "id": r.target_id,
                    "name": r.target_name,
                    "success": r.success,
                    "skipped": r.skipped,
                    "attempts": r.attempts,
                    "error": r.error,
                }
                for r in self.results
            ],
        }


def aggregate(results: Iterable[SyncResult]) -> AggregateReport:
    """Partition results without reordering or dropping entries."""
    report = AggregateReport()
    for result in results:
        report.results.append(result)
        if result.success:
            report.successes.append(result)
        else:
            report.failures.append(result)

    for line in report.failure_lines():
        logger.error("target_failed", detail=line)
    logger.info(
        "results_aggregated",
        total=len(report.results),
        failed=report.failure_count,
        skipped=report.skipped_count,
    )
    return report
