# src/status/memory_store.py - v1
"""In-process status store (STATUS_BACKEND=memory).

Visible only to the current process; suitable for tests and for
single-process runs with the local dispatcher.
"""

from __future__ import annotations

from floodgate.status.base_status_store import BaseStatusStore


class MemoryStatusStore(BaseStatusStore):
    """Dict-backed status store."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, str]] = {}

    async def get(self, key: str) -> dict[str, str]:
        return dict(self._records.get(key, {}))

    async def merge(self, key: str, fields: dict[str, str]) -> dict[str, str]:
        record = self._records.setdefault(key, {})
        record.update(fields)
        return dict(record)

    async def delete(self, key: str) -> None:
        self._records.pop(key, None)

    def keys(self) -> list[str]:
        """All keys currently holding a record."""
        return sorted(self._records)
