# src/status/base_status_store.py - v1
"""Abstract key/value status store interface.

Records are flat string hashes so that concurrent writers touching
different fields of the same key never overwrite each other.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseStatusStore(ABC):
    """Unified interface for status storage backends."""

    @abstractmethod
    async def get(self, key: str) -> dict[str, str]:
        """Return all fields stored under key (empty dict if absent)."""

    @abstractmethod
    async def merge(self, key: str, fields: dict[str, str]) -> dict[str, str]:
        """Set the given fields, keep all others, return the full record."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove every field stored under key."""

    def close(self) -> None:
        """Release backend resources."""
