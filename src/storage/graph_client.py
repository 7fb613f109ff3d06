# src/storage/graph_client.py - v1
"""Async httpx client for a Graph-style drive API.

Staging paths resolve against ``staging_base_uri`` and destination paths
against ``primary_base_uri``; both are ``.../root:/<folder>`` URIs.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from floodgate.storage.base_storage_client import BaseStorageClient
from floodgate.storage.config import StorageConfig
from floodgate.storage.exceptions import (
    StorageAPIError,
    StorageAuthError,
    StorageNotFoundError,
    StorageRateLimitError,
    StorageServerError,
)
from floodgate.storage.models import ChildrenPage, CopyStatus, DriveItem
from floodgate.storage.retry import with_retry

logger = logging.getLogger(__name__)

CONFLICT_REPLACE = {"@microsoft.graph.conflictBehavior": "replace"}


class GraphStorageClient(BaseStorageClient):
    """Storage client speaking the drive-item REST dialect.

    Args:
        config: Base URIs, token and connection limits.
        http_client: Pre-built client (tests inject one with a MockTransport).
    """

    def __init__(
        self,
        config: StorageConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._owns_client = http_client is None
        if http_client is None:
            limits = httpx.Limits(
                max_connections=config.max_connections,
                max_keepalive_connections=config.max_keepalive_connections,
            )
            http_client = httpx.AsyncClient(timeout=config.timeout_seconds, limits=limits)
        self._client = http_client

    async def __aenter__(self) -> GraphStorageClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def staging_root_name(self) -> str:
        return self.config.staging_root_name

    def _auth_headers(self) -> dict[str, str]:
        if not self.config.access_token:
            return {}
        return {"Authorization": f"Bearer {self.config.access_token}"}

    @staticmethod
    def _raise_for_status(response: httpx.Response, url: str) -> None:
        code = response.status_code
        if code in (401, 403):
            raise StorageAuthError(f"Not authorized for {url}", status_code=code)
        if code == 404:
            raise StorageNotFoundError(f"Not found: {url}", status_code=code)
        if code == 429:
            raise StorageRateLimitError(f"Rate limited: {url}", status_code=code)
        if code >= 500:
            raise StorageServerError(f"Server error {code}: {url}", status_code=code)
        if code >= 400:
            raise StorageAPIError(f"Request failed ({code}): {url}", status_code=code)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
        content: bytes | None = None,
        authorized: bool = True,
    ) -> httpx.Response:
        headers = self._auth_headers() if authorized else {}

        async def _send() -> httpx.Response:
            response = await self._client.request(
                method, url, params=params, json=json_data, content=content, headers=headers,
            )
            self._raise_for_status(response, url)
            return response

        return await with_retry(_send, operation=f"{method} {url}")

    async def list_children(self, folder_path: str, top: int) -> list[DriveItem]:
        """List a staging folder's children, following ``@odata.nextLink`` pages."""
        url: str | None = f"{self.config.staging_base_uri}{folder_path}:/children"
        params: dict[str, Any] | None = {"$top": top}
        items: list[DriveItem] = []

        while url:
            response = await self._request("GET", url, params=params)
            page = ChildrenPage.model_validate(response.json())
            items.extend(page.value)
            # nextLink already carries the query string
            url, params = page.next_link, None

        logger.debug("Listed %d children of '%s'", len(items), folder_path or "/")
        return items

    async def start_copy(self, src_path: str, dest_folder: str) -> str | None:
        body = {
            "parentReference": {
                "path": f"/drive/root:/{self.config.primary_root_name}{dest_folder}",
            },
        }
        response = await self._request(
            "POST",
            f"{self.config.staging_base_uri}{src_path}:/copy",
            params=CONFLICT_REPLACE,
            json_data=body,
        )
        return response.headers.get("Location")

    async def get_copy_status(self, monitor_url: str) -> CopyStatus | None:
        """Read a copy monitor; None when the monitor could not be read."""
        # Monitor URLs are pre-authenticated
        try:
            response = await self._request("GET", monitor_url, authorized=False)
            return CopyStatus.model_validate(response.json())
        except (StorageAPIError, httpx.HTTPError, ValueError) as e:
            logger.debug("Copy monitor %s unreadable: %s", monitor_url, e)
            return None

    async def download(self, download_url: str) -> bytes:
        response = await self._request("GET", download_url, authorized=False)
        return response.content

    async def upload(self, content: bytes, dest_path: str) -> bool:
        response = await self._request(
            "PUT",
            f"{self.config.primary_base_uri}{dest_path}:/content",
            params=CONFLICT_REPLACE,
            content=content,
        )
        return response.status_code in (200, 201)
