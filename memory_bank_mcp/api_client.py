"""HTTP client for the memory bank REST API."""

import asyncio
import logging
import os
from typing import Any, Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

# Retry configuration for transient failures (connection errors, 5xx).
MAX_RETRIES = 3
RETRY_BASE_DELAY = 1.0  # seconds; exponential: 1s, 2s, 4s


def _seg(value: str) -> str:
    """Quote one path segment (file names may contain spaces or '#')."""
    return quote(value, safe="")


class MemoryBankClient:
    """Async client wrapping the memory bank REST API.

    Configuration via environment variables:
        MEMORY_BANK_API_URL: Backend base URL (default: http://localhost:8000)
        MEMORY_BANK_API_TOKEN: Optional Bearer token
        MEMORY_BANK_API_TIMEOUT: Request timeout in seconds (default: 30)

    ``transport`` lets tests route requests to an in-process app.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_base_delay: float = RETRY_BASE_DELAY,
    ) -> None:
        self.base_url = base_url or os.environ.get("MEMORY_BANK_API_URL", "http://localhost:8000")
        self.token = os.environ.get("MEMORY_BANK_API_TOKEN", "")
        self.timeout = float(os.environ.get("MEMORY_BANK_API_TIMEOUT", "30"))
        self.retry_base_delay = retry_base_delay
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers: dict[str, str] = {}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request_with_retry(
        self,
        method: str,
        path: str,
        idempotent: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute an HTTP request with retry on transient failures.

        Idempotent requests retry on connection errors, timeouts and 5xx
        responses with exponential backoff. Writes (``idempotent=False``) only
        retry when the connection could not be opened, so a request the server
        may already have applied is never sent twice. Client errors (4xx)
        raise immediately.
        """
        client = await self._get_client()
        last_exc: Exception | None = None

        for attempt in range(MAX_RETRIES):
            try:
                resp = await client.request(method, path, **kwargs)
            except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
                last_exc = exc
            except httpx.TimeoutException as exc:
                if not idempotent:
                    raise
                last_exc = exc
            else:
                if resp.status_code < 500:
                    resp.raise_for_status()
                    return resp
                last_exc = httpx.HTTPStatusError(
                    f"Server error {resp.status_code}",
                    request=resp.request,
                    response=resp,
                )
                if not idempotent:
                    raise last_exc

            if attempt < MAX_RETRIES - 1:
                delay = self.retry_base_delay * (2 ** attempt)
                logger.warning(
                    "Request %s %s failed (attempt %d/%d), retrying in %.1fs: %s",
                    method, path, attempt + 1, MAX_RETRIES, delay, last_exc,
                )
                await asyncio.sleep(delay)

        raise last_exc  # type: ignore[misc]

    async def _get_optional(self, path: str, **kwargs: Any) -> Optional[dict[str, Any]]:
        """GET that maps 404 to None."""
        try:
            resp = await self._request_with_retry("GET", path, **kwargs)
        except httpx.HTTPStatusError as exc:
            if exc.response is not None and exc.response.status_code == 404:
                return None
            raise
        return resp.json()

    # -- Projects -----------------------------------------------------------

    async def list_projects(self) -> list[dict[str, Any]]:
        """Maps to GET /api/projects."""
        resp = await self._request_with_retry("GET", "/api/projects")
        return resp.json()

    async def delete_project(self, project_name: str) -> bool:
        """Maps to DELETE /api/projects/{project}. False if it did not exist."""
        try:
            await self._request_with_retry(
                "DELETE", f"/api/projects/{_seg(project_name)}", idempotent=False,
            )
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                return False
            raise
        return True

    # -- Files --------------------------------------------------------------

    def _file_path(self, project_name: str, file_name: str = "") -> str:
        path = f"/api/projects/{_seg(project_name)}/files"
        return f"{path}/{_seg(file_name)}" if file_name else path

    async def list_files(self, project_name: str) -> list[dict[str, Any]]:
        """Maps to GET /api/projects/{project}/files."""
        resp = await self._request_with_retry("GET", self._file_path(project_name))
        return resp.json()

    async def read_file(self, project_name: str, file_name: str) -> Optional[dict[str, Any]]:
        """Maps to GET /api/projects/{project}/files/{file}. None if missing."""
        return await self._get_optional(self._file_path(project_name, file_name))

    async def write_file(self, project_name: str, file_name: str, content: str) -> dict[str, Any]:
        """Maps to POST /api/projects/{project}/files."""
        resp = await self._request_with_retry(
            "POST", self._file_path(project_name), idempotent=False,
            json={"name": file_name, "content": content},
        )
        return resp.json()

    async def update_file(
        self,
        project_name: str,
        file_name: str,
        content: str,
        change_description: Optional[str] = None,
    ) -> dict[str, Any]:
        """Maps to PUT /api/projects/{project}/files/{file}."""
        body: dict[str, Any] = {"content": content}
        if change_description:
            body["change_description"] = change_description
        resp = await self._request_with_retry(
            "PUT", self._file_path(project_name, file_name), idempotent=False, json=body,
        )
        return resp.json()

    async def delete_file(self, project_name: str, file_name: str) -> bool:
        """Maps to DELETE /api/projects/{project}/files/{file}. False if missing."""
        try:
            await self._request_with_retry(
                "DELETE", self._file_path(project_name, file_name), idempotent=False,
            )
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                return False
            raise
        return True

    # -- Versions -----------------------------------------------------------

    def _versions_path(self, project_name: str, file_name: str) -> str:
        return f"{self._file_path(project_name, file_name)}/versions"

    async def get_versions(self, project_name: str, file_name: str) -> dict[str, Any]:
        """Maps to GET .../files/{file}/versions."""
        resp = await self._request_with_retry("GET", self._versions_path(project_name, file_name))
        return resp.json()

    async def get_version(self, project_name: str, file_name: str, version: int) -> Optional[dict[str, Any]]:
        """Maps to GET .../versions/{version}. None if missing."""
        return await self._get_optional(f"{self._versions_path(project_name, file_name)}/{version}")

    async def compare_versions(
        self,
        project_name: str,
        file_name: str,
        version1: int,
        version2: int,
    ) -> Optional[dict[str, Any]]:
        """Maps to GET .../versions/compare. None if either version is missing."""
        return await self._get_optional(
            f"{self._versions_path(project_name, file_name)}/compare",
            params={"version1": version1, "version2": version2},
        )

    async def revert_to_version(self, project_name: str, file_name: str, version: int) -> Optional[dict[str, Any]]:
        """Maps to POST .../versions/{version}/revert. None if the version is missing."""
        try:
            resp = await self._request_with_retry(
                "POST", f"{self._versions_path(project_name, file_name)}/{version}/revert", idempotent=False,
            )
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                return None
            raise
        return resp.json()

    async def cleanup_old_versions(
        self,
        project_name: str,
        max_versions_per_file: Optional[int] = None,
    ) -> dict[str, Any]:
        """Maps to POST /api/projects/{project}/versions/cleanup."""
        body: dict[str, Any] = {}
        if max_versions_per_file is not None:
            body["max_versions_per_file"] = max_versions_per_file
        resp = await self._request_with_retry(
            "POST", f"/api/projects/{_seg(project_name)}/versions/cleanup", idempotent=False, json=body,
        )
        return resp.json()
