from __future__ import annotations

from typing import Any

import httpx
import structlog

from hubactions.clients.base import ApiResponse, BaseHTTPClient, PermanentHTTPError
from hubactions.core.errors import ProviderError
from hubactions.orchestration.models import JobStatus, OperationStatus, Target, TargetId

logger = structlog.get_logger()

API_PREFIX = "/api/controller/v2"


class ControllerClient(BaseHTTPClient):
    """Automation controller API client for project updates.

    Implements the operation backend used by the orchestrator: the project
    ``can_update`` flag is the eligibility check, ``POST .../update/`` is
    the trigger and ``project_updates/<id>/`` is the job status.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None,
        *,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url,
            timeout=timeout,
            max_retries=max_retries,
            backoff_factor=backoff_factor,
            transport=transport,
        )
        self._token = token

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def list_projects(self) -> list[Target]:
        """Fetch every project, following pagination links."""
        targets: list[Target] = []
        path: str | None = f"{API_PREFIX}/projects/"
        while path:
            response = await self.get(path)
            if response.status_code != 200:
                raise ProviderError(
                    f"Failed to get projects: {response.status_code}",
                    details={"status": response.status_code},
                )
            data = response.json_dict()
            for item in data.get("results") or []:
                targets.append(Target(id=item["id"], name=item.get("name", "")))
            path = data.get("next")
        logger.info("projects_listed", count=len(targets))
        return targets

    async def check_eligible(self, target: Target) -> bool:
        data = await self.get_json(f"{API_PREFIX}/projects/{target.id}/update/")
        return bool(data.get("can_update"))

    async def trigger(self, target: Target) -> ApiResponse:
        return await self.post(f"{API_PREFIX}/projects/{target.id}/update/")

    async def fetch_status(self, job_id: TargetId) -> OperationStatus:
        data = await self.get_json(f"{API_PREFIX}/project_updates/{job_id}/")
        return parse_status(job_id, data)


def parse_status(job_id: TargetId, data: dict[str, Any]) -> OperationStatus:
    """Build an OperationStatus from a job payload."""
    raw = data.get("status")
    try:
        status = JobStatus(str(raw).lower())
    except ValueError as exc:
        raise PermanentHTTPError(f"Unknown job status: {raw!r}") from exc
    failed = data.get("failed")
    return OperationStatus(
        job_id=data.get("id", job_id),
        status=status,
        failed=bool(failed) if failed is not None else None,
    )
