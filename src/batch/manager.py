# src/batch/manager.py - v1
"""Batch manager: persist each batch's file list and failure manifest.

A dispatcher saves every batch before starting its worker so that the
worker reads its files from storage rather than re-enumerating the tree.
"""

from __future__ import annotations

import json
import logging

from floodgate.batch.models import Batch, BatchResults
from floodgate.core.models import FileRecord
from floodgate.manifests import layout
from floodgate.manifests.base_output_writer import BaseOutputWriter

logger = logging.getLogger(__name__)


class BatchManager:
    """Read and write batch manifests for one job.

    Args:
        writer: Manifest storage backend.
        root_folder: Job root folder; determines the manifest namespace.
    """

    def __init__(self, writer: BaseOutputWriter, root_folder: str) -> None:
        self._writer = writer
        self.instance_key = layout.instance_key(root_folder)

    async def save_batch(self, batch: Batch) -> None:
        """Store a batch's file list and drop any stale failure manifest."""
        files = [f.model_dump(mode="json") for f in batch.files]
        await self._writer.write(
            layout.files_path(self.instance_key, batch.batch_number),
            json.dumps(files, indent=2),
        )
        await self._writer.delete(layout.results_path(self.instance_key, batch.batch_number))
        logger.debug(
            "Saved batch %d (%d files) for %s",
            batch.batch_number, len(batch.files), self.instance_key,
        )

    async def get_files(self, batch_number: int) -> list[FileRecord] | None:
        """Files assigned to a batch, or None if it was never saved."""
        path = layout.files_path(self.instance_key, batch_number)
        if not await self._writer.exists(path):
            return None
        raw = json.loads(await self._writer.read(path))
        return [FileRecord.model_validate(item) for item in raw]

    async def write_results(self, batch_number: int, failed_promotes: list[str]) -> None:
        """Persist the failure manifest for a batch."""
        results = BatchResults(failed_promotes=failed_promotes)
        await self._writer.write(
            layout.results_path(self.instance_key, batch_number),
            results.model_dump_json(by_alias=True, indent=2),
        )
        logger.info(
            "Wrote failure manifest for batch %d: %d paths",
            batch_number, len(failed_promotes),
        )

    async def read_results(self, batch_number: int) -> BatchResults | None:
        """Failure manifest for a batch, or None if no failures were recorded."""
        path = layout.results_path(self.instance_key, batch_number)
        if not await self._writer.exists(path):
            return None
        return BatchResults.model_validate_json(await self._writer.read(path))

    async def list_batches(self) -> list[int]:
        """Batch numbers with a saved file list."""
        numbers: list[int] = []
        for name in await self._writer.list_dir(self.instance_key):
            suffix = name.removeprefix(layout.BATCH_DIR_PREFIX)
            if not (name.startswith(layout.BATCH_DIR_PREFIX) and suffix.isdigit()):
                continue
            if await self._writer.exists(layout.files_path(self.instance_key, int(suffix))):
                numbers.append(int(suffix))
        return sorted(numbers)

    async def clear(self) -> int:
        """Remove every batch manifest left by a previous run of this job.

        Returns:
            Number of batches removed.
        """
        numbers = await self.list_batches()
        for number in numbers:
            await self._writer.delete(layout.files_path(self.instance_key, number))
            await self._writer.delete(layout.results_path(self.instance_key, number))
        if numbers:
            logger.info("Cleared %d stale batches for %s", len(numbers), self.instance_key)
        return len(numbers)
