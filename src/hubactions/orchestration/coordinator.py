"""Run one RetryingOperation per target, sequentially or in parallel."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Callable, Protocol, Sequence

import structlog

from hubactions.orchestration.models import SyncResult, Target
from hubactions.orchestration.poller import Sleep

logger = structlog.get_logger()


class CoordinationMode(str, Enum):
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


class Operation(Protocol):
    async def run(self) -> SyncResult: ...


OperationFactory = Callable[[Target], Operation]


class MultiTargetCoordinator:
    """
    Collect exactly one SyncResult per target, in input order.

    Sequential mode waits ``inter_target_delay`` between targets (not after
    the last) and never starts target N+1 before target N is terminal.
    Parallel mode starts every target at once. A failing target never stops
    its siblings.
    """

    def __init__(
        self,
        operation_factory: OperationFactory,
        *,
        mode: CoordinationMode = CoordinationMode.SEQUENTIAL,
        inter_target_delay: float = 0.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._operation_factory = operation_factory
        self._mode = mode
        self._inter_target_delay = inter_target_delay
        self._sleep = sleep

    async def run(self, targets: Sequence[Target]) -> list[SyncResult]:
        logger.info("coordination_started", mode=self._mode.value, targets=len(targets))
        if self._mode is CoordinationMode.PARALLEL:
            results = await self._run_parallel(targets)
        else:
            results = await self._run_sequential(targets)
        logger.info(
            "coordination_finished",
            mode=self._mode.value,
            failures=sum(1 for r in results if not r.success),
        )
        return results

    async def _run_sequential(self, targets: Sequence[Target]) -> list[SyncResult]:
        results: list[SyncResult] = []
        for index, target in enumerate(targets):
            results.append(await self._run_one(target))
            if index < len(targets) - 1:
                logger.debug("inter_target_delay", seconds=self._inter_target_delay)
                await self._sleep(self._inter_target_delay)
        return results

    async def _run_parallel(self, targets: Sequence[Target]) -> list[SyncResult]:
        slots: list[SyncResult | None] = [None] * len(targets)

        async def run_slot(index: int, target: Target) -> None:
            slots[index] = await self._run_one(target)

        await asyncio.gather(*(run_slot(i, t) for i, t in enumerate(targets)))
        return [result for result in slots if result is not None]

    async def _run_one(self, target: Target) -> SyncResult:
        try:
            return await self._operation_factory(target).run()
        except Exception as exc:
            logger.error(
                "operation_crashed",
                target=target.name,
                target_id=target.id,
                error=str(exc),
                exc_info=True,
            )
            return SyncResult.for_target(target, success=False, error=str(exc))
