"""Collection approval command."""

from __future__ import annotations

import asyncio

import httpx

from hubactions.approval import CollectionRef, PollBudget, approve_collection
from hubactions.clients.hub import HubClient
from hubactions.cli.outputs import set_output
from hubactions.cli.ux import header, info, success
from hubactions.config import Settings, get_settings
from hubactions.core.errors import ConfigurationError, ExitCode, main_with_error_handling
from hubactions.galaxy import read_galaxy_version
from hubactions.orchestration.poller import Sleep


async def run_approval(
    settings: Settings,
    ref: CollectionRef,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    sleep: Sleep = asyncio.sleep,
) -> str:
    client = HubClient(
        settings.base_url,
        settings.token,
        timeout=settings.http_timeout,
        max_retries=settings.http_max_retries,
        transport=transport,
    )
    try:
        return await approve_collection(
            client,
            ref,
            PollBudget(timeout=settings.timeout, interval=settings.interval),
            sleep=sleep,
        )
    finally:
        await client.aclose()


@main_with_error_handling()
def approve_command(
    *,
    host: str | None = None,
    token: str | None = None,
    namespace: str | None = None,
    name: str | None = None,
    version: str | None = None,
    timeout: float | None = None,
    interval: float | None = None,
    galaxy_file: str | None = None,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    sleep: Sleep = asyncio.sleep,
) -> int:
    """Move a collection version from staging to published."""
    settings = (settings or get_settings()).with_overrides(
        host=host,
        token=token,
        namespace=namespace,
        collection_name=name,
        version=version,
        timeout=timeout,
        interval=interval,
        galaxy_file=galaxy_file,
    )
    settings.require("host", "token", "namespace", "collection_name")

    resolved_version = settings.version or read_galaxy_version(settings.galaxy_file)
    if not resolved_version:
        raise ConfigurationError("Version must be provided either as input or in galaxy.yml")

    ref = CollectionRef(settings.namespace, settings.collection_name, resolved_version)  # type: ignore[arg-type]
    header("Collection approval")
    info(f"Approving collection {ref}")

    strategy = asyncio.run(run_approval(settings, ref, transport=transport, sleep=sleep))

    success(f"Collection approved successfully ({strategy} hub)")
    set_output("approved", "true")
    return ExitCode.SUCCESS
