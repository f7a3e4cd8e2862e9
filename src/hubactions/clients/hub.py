from __future__ import annotations

from typing import Any

import httpx
import structlog

from hubactions.approval.models import CollectionRef
from hubactions.clients.base import (
    ApiResponse,
    BaseHTTPClient,
    PermanentHTTPError,
    RetryableHTTPError,
)

logger = structlog.get_logger()

GALAXY_V3 = "/api/galaxy/v3"
PULP_V3 = "/api/galaxy/pulp/api/v3"


class HubClient(BaseHTTPClient):
    """Automation Hub API client for collection approval."""

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
            headers["Authorization"] = f"Token {self._token}"
        return headers

    async def has_platform_gateway(self) -> bool:
        """Probe ``/api/``; a 404 or any error means a standalone hub."""
        try:
            response = await self.get("/api/")
        except (RetryableHTTPError, PermanentHTTPError) as exc:
            logger.info("gateway_probe_failed", error=str(exc))
            return False
        return response.status_code != 404

    async def move_to_published(self, ref: CollectionRef) -> ApiResponse:
        """Standalone hub shortcut moving a version from staging to published."""
        return await self.post(
            f"{GALAXY_V3}/collections/{ref.namespace}/{ref.name}/versions/{ref.version}"
            "/move/staging/published/"
        )

    async def find_collection_version(self, ref: CollectionRef) -> dict[str, Any] | None:
        data = await self.get_json(
            f"{PULP_V3}/content/ansible/collection_versions/",
            params={"namespace": ref.namespace, "name": ref.name, "version": ref.version},
        )
        return _first_result(data)

    async def find_repository(self, name: str) -> dict[str, Any] | None:
        data = await self.get_json(f"{PULP_V3}/repositories/", params={"name": name})
        return _first_result(data)

    async def move_collection_version(
        self,
        source_href: str,
        collection_version_href: str,
        destination_href: str,
    ) -> ApiResponse:
        return await self.post(
            f"{source_href}move_collection_version/",
            json={
                "collection_versions": [collection_version_href],
                "destination_repositories": [destination_href],
            },
        )


def _first_result(data: dict[str, Any]) -> dict[str, Any] | None:
    if (data.get("count") or 0) > 0 and data.get("results"):
        return data["results"][0]
    return None
