"""
Two-mode collection approval.

A standalone hub exposes a direct ``move/staging/published`` endpoint that is
retried in a plain loop. Behind the platform gateway the version must first
become visible in pulp, then both repositories are resolved and a single
move call is issued. The strategy is picked once by probing ``/api/``.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Union

import structlog

from hubactions.approval.models import (
    PUBLISHED_REPOSITORY,
    STAGING_REPOSITORY,
    CollectionRef,
    PollBudget,
)
from hubactions.clients.base import PermanentHTTPError, RetryableHTTPError
from hubactions.core.errors import ApprovalError, ProviderError
from hubactions.orchestration.poller import Sleep
from hubactions.orchestration.trigger import ACCEPTED

if TYPE_CHECKING:
    from hubactions.clients.hub import HubClient

logger = structlog.get_logger()


class StandaloneApproval:
    """Retry the direct move call until it is accepted or the budget runs out."""

    kind = "standalone"

    def __init__(self, client: HubClient, budget: PollBudget, *, sleep: Sleep = asyncio.sleep):
        self._client = client
        self._budget = budget
        self._sleep = sleep

    async def approve(self, ref: CollectionRef) -> None:
        max_attempts = self._budget.max_attempts
        log = logger.bind(collection=str(ref), strategy=self.kind)

        for attempt in range(1, max_attempts + 1):
            try:
                response = await self._client.move_to_published(ref)
            except (RetryableHTTPError, PermanentHTTPError) as exc:
                log.info("approve_attempt_failed", attempt=attempt, error=str(exc))
            else:
                if response.status_code == ACCEPTED:
                    log.info("collection_moved", attempt=attempt)
                    return
                log.info("approve_attempt_rejected", attempt=attempt, status=response.status_code)

            if attempt < max_attempts:
                await self._sleep(self._budget.interval)

        raise ApprovalError(
            f"Failed to approve collection after {max_attempts} attempts",
            details={"collection": str(ref)},
        )


class PlatformApproval:
    """Wait for the version in pulp, resolve both repositories, move once."""

    kind = "platform"

    def __init__(self, client: HubClient, budget: PollBudget, *, sleep: Sleep = asyncio.sleep):
        self._client = client
        self._budget = budget
        self._sleep = sleep

    async def approve(self, ref: CollectionRef) -> None:
        log = logger.bind(collection=str(ref), strategy=self.kind)

        collection_version = await self._wait_for_collection_version(ref)

        staging, published = await asyncio.gather(
            self._find_repository(STAGING_REPOSITORY),
            self._find_repository(PUBLISHED_REPOSITORY),
        )
        if not staging or not published:
            raise ApprovalError("Could not find staging or published repositories")

        hrefs = (
            staging.get("pulp_href"),
            collection_version.get("pulp_href"),
            published.get("pulp_href"),
        )
        if not all(hrefs):
            raise ApprovalError(
                "Hub response is missing pulp_href",
                details={"staging": hrefs[0], "collection_version": hrefs[1], "published": hrefs[2]},
            )

        try:
            response = await self._client.move_collection_version(*hrefs)
        except (RetryableHTTPError, PermanentHTTPError) as exc:
            raise ProviderError(
                f"Failed to move collection: {exc}",
                details={"collection": str(ref)},
            ) from exc
        if response.status_code != ACCEPTED:
            raise ApprovalError(
                f"Failed to move collection: {response.text}",
                details={"status": response.status_code},
            )
        log.info("collection_moved")

    async def _wait_for_collection_version(self, ref: CollectionRef) -> dict[str, Any]:
        max_attempts = self._budget.max_attempts
        for attempt in range(1, max_attempts + 1):
            try:
                found = await self._client.find_collection_version(ref)
            except (RetryableHTTPError, PermanentHTTPError) as exc:
                logger.info("collection_version_lookup_failed", attempt=attempt, error=str(exc))
            else:
                if found is not None:
                    return found
                logger.info("collection_version_not_visible", attempt=attempt, collection=str(ref))

            if attempt < max_attempts:
                await self._sleep(self._budget.interval)

        raise ApprovalError(
            "Collection version not found after waiting",
            details={"collection": str(ref), "attempts": max_attempts},
        )

    async def _find_repository(self, name: str) -> dict[str, Any] | None:
        try:
            return await self._client.find_repository(name)
        except (RetryableHTTPError, PermanentHTTPError) as exc:
            logger.warning("repository_lookup_failed", repository=name, error=str(exc))
            return None


ApprovalStrategy = Union[StandaloneApproval, PlatformApproval]


async def select_strategy(
    client: HubClient,
    budget: PollBudget,
    *,
    sleep: Sleep = asyncio.sleep,
) -> ApprovalStrategy:
    """Probe the hub once; default to the standalone strategy when unsure."""
    if await client.has_platform_gateway():
        strategy: ApprovalStrategy = PlatformApproval(client, budget, sleep=sleep)
    else:
        strategy = StandaloneApproval(client, budget, sleep=sleep)
    logger.info("approval_strategy_selected", strategy=strategy.kind)
    return strategy


async def approve_collection(
    client: HubClient,
    ref: CollectionRef,
    budget: PollBudget,
    *,
    sleep: Sleep = asyncio.sleep,
) -> str:
    """Approve ``ref`` and return the name of the strategy that did it."""
    strategy = await select_strategy(client, budget, sleep=sleep)
    await strategy.approve(ref)
    return strategy.kind
