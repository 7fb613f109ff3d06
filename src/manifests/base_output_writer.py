# src/manifests/base_output_writer.py - v1
"""Abstract writer interface for batch manifest blobs."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseOutputWriter(ABC):
    """Unified interface for manifest storage backends."""

    @abstractmethod
    async def write(self, path: str, content: bytes | str) -> None:
        """Write content to the given path, replacing any previous content."""

    @abstractmethod
    async def read(self, path: str) -> bytes:
        """Read content from the given path."""

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if path exists."""

    @abstractmethod
    async def delete(self, path: str) -> None:
        """Remove path if it exists."""

    @abstractmethod
    async def list_dir(self, path: str) -> list[str]:
        """List entries directly under path."""
