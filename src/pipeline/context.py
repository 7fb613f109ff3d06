# src/pipeline/context.py - v1
"""Per-invocation promotion context.

Built once for each action invocation and passed explicitly to every
pipeline component; nothing in the pipeline reads module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from floodgate.batch.manager import BatchManager
from floodgate.config.settings import Settings
from floodgate.core.models import JobParams
from floodgate.dispatch.base_dispatcher import BaseDispatcher
from floodgate.manifests.base_output_writer import BaseOutputWriter
from floodgate.status.base_status_store import BaseStatusStore
from floodgate.status.tracker import StatusTracker, status_key
from floodgate.storage.base_storage_client import BaseStorageClient

StorageFactory = Callable[[Settings], BaseStorageClient]


@dataclass
class PromotionContext:
    """Settings, parameters and collaborators for one action invocation."""

    settings: Settings
    params: JobParams
    status_store: BaseStatusStore
    dispatcher: BaseDispatcher
    writer: BaseOutputWriter
    storage_factory: StorageFactory
    _storage: BaseStorageClient | None = field(default=None, init=False, repr=False)

    @property
    def storage(self) -> BaseStorageClient:
        """Storage client, created on first use."""
        if self._storage is None:
            self._storage = self.storage_factory(self.settings)
        return self._storage

    def job_tracker(self) -> StatusTracker:
        return StatusTracker(
            self.status_store,
            status_key(self.settings.status_key_prefix, self.params.root_folder),
        )

    def batch_tracker(self, batch_number: int) -> StatusTracker:
        return StatusTracker(
            self.status_store,
            status_key(self.settings.status_key_prefix, self.params.root_folder, batch_number),
        )

    def batch_manager(self) -> BatchManager:
        return BatchManager(self.writer, self.params.root_folder)

    async def close(self) -> None:
        """Close the storage client if one was opened."""
        if self._storage is not None:
            await self._storage.close()
            self._storage = None
