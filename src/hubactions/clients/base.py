from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.get_logger()


class RetryableHTTPError(Exception):
    """HTTP errors that should be retried."""


class PermanentHTTPError(Exception):
    """HTTP errors that should not be retried."""


def is_retryable_status(status_code: int) -> bool:
    """Determine if HTTP status code is retryable."""
    return status_code in (408, 429, 500, 502, 503, 504)


@dataclass(frozen=True)
class ApiResponse:
    """A fully-read HTTP response."""

    status_code: int
    body: Any
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json_dict(self) -> dict[str, Any]:
        """Body as a dict, or an empty dict when it is not a JSON object."""
        return self.body if isinstance(self.body, dict) else {}


class BaseHTTPClient:
    """Base async HTTP client with transport-level retry logic.

    Retryable statuses and network errors are retried with exponential
    backoff. Every other response is returned to the caller, which decides
    what a 202 or a 404 means for its operation.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_retries = max(1, max_retries)
        self._backoff_factor = backoff_factor
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _headers(self) -> dict[str, str]:
        """Override to provide custom headers."""
        return {"Content-Type": "application/json"}

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url}{path}"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> BaseHTTPClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> ApiResponse:
        """Execute HTTP request, retrying transient failures."""
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(RetryableHTTPError),
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=self._backoff_factor, max=30),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._send(method, path, params=params, json=json, headers=headers)
        raise AssertionError("unreachable")  # pragma: no cover

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None,
        json: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> ApiResponse:
        url = self._url(path)
        req_headers = self._headers()
        if headers:
            req_headers.update(headers)

        try:
            response = await self._get_client().request(
                method,
                url,
                params=params,
                json=json,
                headers=req_headers,
            )
        except (httpx.TimeoutException, httpx.ConnectError, httpx.ReadError) as exc:
            logger.warning("http_network_error", method=method, url=url, error=str(exc))
            raise RetryableHTTPError(str(exc)) from exc
        except httpx.HTTPError as exc:
            logger.error("http_unexpected_error", method=method, url=url, error=str(exc))
            raise PermanentHTTPError(str(exc)) from exc

        if is_retryable_status(response.status_code):
            logger.warning(
                "http_retryable_error",
                status=response.status_code,
                method=method,
                url=url,
            )
            raise RetryableHTTPError(f"HTTP {response.status_code}: {response.text}")

        try:
            body = response.json() if response.content else None
        except ValueError:
            body = None
        return ApiResponse(status_code=response.status_code, body=body, text=response.text)

    async def get(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> ApiResponse:
        """Execute GET request."""
        return await self._request("GET", path, params=params, headers=headers)

    async def post(
        self,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> ApiResponse:
        """Execute POST request."""
        return await self._request("POST", path, json=json, headers=headers)

    async def get_json(self, path: str, *, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET that must succeed, returning the JSON object body."""
        response = await self.get(path, params=params)
        if not response.ok:
            logger.error(
                "http_permanent_error",
                status=response.status_code,
                method="GET",
                url=self._url(path),
            )
            raise PermanentHTTPError(f"HTTP {response.status_code}: {response.text}")
        return response.json_dict()
