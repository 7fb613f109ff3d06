# src/storage/base_storage_client.py - v1
"""Abstract storage API interface for the staging and primary content trees."""

from __future__ import annotations

from abc import ABC, abstractmethod

from floodgate.storage.models import CopyStatus, DriveItem


class BaseStorageClient(ABC):
    """Operations the promotion pipeline needs from the remote file store."""

    @property
    @abstractmethod
    def staging_root_name(self) -> str:
        """Name of the staging tree's root folder."""

    @abstractmethod
    async def list_children(self, folder_path: str, top: int) -> list[DriveItem]:
        """List the immediate children of a staging folder, following every page."""

    @abstractmethod
    async def start_copy(self, src_path: str, dest_folder: str) -> str | None:
        """Request a server-side copy into the primary tree.

        Returns the monitor URL to poll, or None if the service gave none.
        """

    @abstractmethod
    async def get_copy_status(self, monitor_url: str) -> CopyStatus | None:
        """Poll a copy operation. None when the monitor could not be read."""

    @abstractmethod
    async def download(self, download_url: str) -> bytes:
        """Fetch raw file content from a staging download URL."""

    @abstractmethod
    async def upload(self, content: bytes, dest_path: str) -> bool:
        """Save content at a primary-tree path, replacing any existing file."""

    async def close(self) -> None:
        """Release network resources."""
