# src/pipeline/enumerator.py - v1
"""File tree enumerator: flatten the staging tree into FileRecords.

Breadth-first walk over a folder work queue. A failed listing of any
folder aborts the whole enumeration; later stages treat the list as
authoritative, so a partial listing is never returned.
"""

from __future__ import annotations

import logging
from collections import deque

import httpx

from floodgate.core.models import FileRecord
from floodgate.storage.base_storage_client import BaseStorageClient
from floodgate.storage.exceptions import StorageAPIError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


class EnumerationError(Exception):
    """Listing a staging folder failed; the file list is incomplete."""

    def __init__(self, folder: str, cause: Exception):
        self.folder = folder
        self.cause = cause
        super().__init__(f"Failed to list folder '{folder or '/'}': {cause}")


class FileTreeEnumerator:
    """Walk a staging tree and collect every file beneath it.

    Args:
        client: Storage client for the staging tree.
        page_size: ``$top`` bound for each listing page.
    """

    def __init__(self, client: BaseStorageClient, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._client = client
        self._page_size = page_size

    def _relative_path(self, parent_path: str, name: str) -> str:
        prefix = f"/drive/root:/{self._client.staging_root_name}"
        if parent_path.startswith(prefix):
            parent_path = parent_path[len(prefix):]
        return f"{parent_path}/{name}"

    async def enumerate(self, root_path: str = "") -> list[FileRecord]:
        """Return every file under ``root_path`` (tree-relative, "" = tree root).

        Raises:
            EnumerationError: If any folder listing fails.
        """
        folders: deque[str] = deque([root_path])
        files: list[FileRecord] = []
        visited = 0

        while folders:
            folder = folders.popleft()
            try:
                children = await self._client.list_children(folder, self._page_size)
            except (StorageAPIError, httpx.HTTPError) as e:
                raise EnumerationError(folder, e) from e
            visited += 1

            for item in children:
                item_path = self._relative_path(item.parent_reference.path, item.name)
                if item.is_folder:
                    folders.append(item_path)
                else:
                    files.append(FileRecord(download_url=item.download_url, file_path=item_path))

        logger.info("Enumerated %d files across %d folders", len(files), visited)
        return files
