"""
Project sync command.

Lists controller projects, selects one or all of them, and runs a
trigger-and-poll project update for each with retries.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import structlog

from hubactions.clients.base import PermanentHTTPError, RetryableHTTPError
from hubactions.clients.controller import ControllerClient
from hubactions.cli.outputs import set_output
from hubactions.cli.ux import console, header, info, print_table, success, warning
from hubactions.config import Settings, get_settings
from hubactions.core.errors import (
    ExitCode,
    OperationFailedError,
    ProviderError,
    main_with_error_handling,
)
from hubactions.orchestration import (
    AggregateReport,
    CoordinationMode,
    MultiTargetCoordinator,
    OperationTrigger,
    RetryingOperation,
    Target,
    aggregate,
    resolve_targets,
)
from hubactions.orchestration.poller import Sleep

logger = structlog.get_logger()


async def sync_projects(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    sleep: Sleep = asyncio.sleep,
) -> AggregateReport:
    """Sync the projects selected by ``settings.project_name``."""
    client = ControllerClient(
        settings.base_url,
        settings.token,
        timeout=settings.http_timeout,
        max_retries=settings.http_max_retries,
        transport=transport,
    )
    try:
        try:
            projects = await client.list_projects()
        except (RetryableHTTPError, PermanentHTTPError) as exc:
            raise ProviderError(f"Failed to get projects: {exc}") from exc

        targets = resolve_targets(projects, settings.project_name)
        logger.info(
            "project_sync_started",
            project=settings.project_name or "*",
            targets=len(targets),
            parallel=settings.parallel,
        )

        trigger = OperationTrigger(client)

        def make_operation(target: Target) -> RetryingOperation:
            return RetryingOperation(
                target,
                trigger,
                client.fetch_status,
                max_attempts=settings.retry_attempts,
                retry_delay=settings.retry_delay,
                poll_interval=settings.interval,
                timeout=settings.timeout,
                sleep=sleep,
            )

        coordinator = MultiTargetCoordinator(
            make_operation,
            mode=CoordinationMode.PARALLEL if settings.parallel else CoordinationMode.SEQUENTIAL,
            inter_target_delay=settings.project_delay,
            sleep=sleep,
        )
        results = await coordinator.run(targets)
    finally:
        await client.aclose()

    return aggregate(results)


def print_report(report: AggregateReport) -> None:
    rows = [
        [
            r.target_name,
            str(r.target_id),
            "skipped" if r.skipped else ("ok" if r.success else "failed"),
            str(r.attempts),
            r.error or "",
        ]
        for r in report.results
    ]
    print_table("Project sync", ["Project", "ID", "Result", "Attempts", "Error"], rows)
    console.print()
    if report.skipped_count:
        warning(f"{report.skipped_count} project(s) skipped, update not allowed")
    if report.success:
        success(report.summary())
    else:
        for line in report.failure_lines():
            console.print(f"  [error]-[/error] {line}")


@main_with_error_handling()
def project_sync_command(
    *,
    host: str | None = None,
    token: str | None = None,
    project_name: str | None = None,
    timeout: float | None = None,
    interval: float | None = None,
    retry_attempts: int | None = None,
    retry_delay: float | None = None,
    project_delay: float | None = None,
    parallel: bool | None = None,
    output_format: str = "text",
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    sleep: Sleep = asyncio.sleep,
) -> int:
    """
    Sync one project (by name) or every project.

    Exit codes: 0 = all synced or skipped, 1 = one or more failed,
    10 = bad inputs, 11 = listing failed, 13 = project not found
    """
    settings = (settings or get_settings()).with_overrides(
        host=host,
        token=token,
        project_name=project_name,
        timeout=timeout,
        interval=interval,
        retry_attempts=retry_attempts,
        retry_delay=retry_delay,
        project_delay=project_delay,
        parallel=parallel,
    )
    settings.require("host", "token")

    if output_format != "json":
        header("Project sync")
        info(f"Syncing {'project: ' + settings.project_name if settings.project_name else 'all projects'}")

    report = asyncio.run(sync_projects(settings, transport=transport, sleep=sleep))

    set_output("synced", "true" if report.success else "false")
    set_output("failed_count", str(report.failure_count))

    if output_format == "json":
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_report(report)

    if not report.success:
        raise OperationFailedError(
            report.summary(),
            details={"failed": ", ".join(r.target_name for r in report.failures)},
        )
    return ExitCode.SUCCESS
