# src/pipeline/executor.py - v1
"""Batch promotion executor: the body of one batch worker.

Steps:
  1. Validate batch parameters (FAILED on missing data, no further work)
  2. Reset the batch record, write STARTED with the copy stage IN_PROGRESS
  3. Load the batch's files from its saved manifest
  4. Promote files chunk by chunk (copy, falling back to download + upload)
  5. Write the failure manifest if any file failed
  6. Mark the copy stage COMPLETED, settle, then chain the next stage

Per-file failures never fail the batch. Anything uncaught ends the batch
as COMPLETED_WITH_ERROR.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from floodgate.core.models import (
    PROMOTE_COPY_STAGE,
    ActionResult,
    BatchPromoteResult,
    FileRecord,
    PromoteFileStatus,
)
from floodgate.pipeline.chainer import StageChainer
from floodgate.pipeline.scheduling import run_in_chunks
from floodgate.storage.exceptions import CopyTimeoutError

if TYPE_CHECKING:
    from floodgate.pipeline.context import PromotionContext

logger = logging.getLogger(__name__)

REQUIRED_BATCH_PARAMS = ("root_folder", "project_excel_path", "admin_page_uri")
MISSING_DATA_MESSAGE = "Required data is not available to proceed with FG Promote action."


class BatchPromotionExecutor:
    """Promote the files of one dispatched batch.

    Args:
        ctx: Promotion context carrying the batch's parameters.
    """

    def __init__(self, ctx: PromotionContext) -> None:
        self._ctx = ctx
        self._settings = ctx.settings

    async def run(self) -> ActionResult:
        """Execute the batch and return the worker's result."""
        params = self._ctx.params
        batch_number = params.batch_number

        if not params.root_folder or batch_number is None:
            logger.error("%s (root folder or batch number missing)", MISSING_DATA_MESSAGE)
            return ActionResult(code=400, payload=MISSING_DATA_MESSAGE)

        tracker = self._ctx.batch_tracker(batch_number)
        missing = params.missing_fields(REQUIRED_BATCH_PARAMS)
        if missing:
            logger.error("%s Missing: %s", MISSING_DATA_MESSAGE, ", ".join(missing))
            record = await tracker.update(status="FAILED", message=MISSING_DATA_MESSAGE)
            return ActionResult(code=400, payload=record.model_dump(mode="json"))

        logger.info("Promote started for batch %d", batch_number)
        try:
            await tracker.clear()
            await tracker.update(
                status="STARTED",
                message="Getting all files to be promoted.",
                details={PROMOTE_COPY_STAGE: "IN_PROGRESS"},
            )

            result = await self.promote_batch(batch_number)
            message = _summarize(result)
            await tracker.update(
                status="IN_PROGRESS",
                message=message,
                details={PROMOTE_COPY_STAGE: "COMPLETED"},
            )

            # Let the last copies settle before the next stage reads them
            await asyncio.sleep(self._settings.settle_delay_s)
            await StageChainer(self._ctx).advance(batch_number)
            body: object = message
        except Exception as e:
            logger.exception("Batch %d failed", batch_number)
            await tracker.update(status="COMPLETED_WITH_ERROR", message=str(e))
            body = {"error": str(e)}

        return ActionResult(body=body)

    async def promote_batch(self, batch_number: int) -> BatchPromoteResult:
        """Promote every file of the batch and record failures."""
        manager = self._ctx.batch_manager()
        files = await manager.get_files(batch_number)
        if files is None:
            logger.warning(
                "No saved file list for batch %d, using invocation parameters",
                batch_number,
            )
            files = list(self._ctx.params.files)
        logger.info("Files for batch %d: %d", batch_number, len(files))

        statuses = await run_in_chunks(
            files,
            self._settings.bulk_request_size,
            self.promote_file,
            pause_s=self._settings.chunk_delay_s,
        )
        result = BatchPromoteResult(batch_number=batch_number, statuses=statuses)

        failed = result.failed_paths
        logger.info("Promote Batch-%d: %d failed", batch_number, len(failed))
        if failed:
            await manager.write_results(batch_number, failed)
        return result

    async def promote_file(self, file: FileRecord) -> PromoteFileStatus:
        """Copy one file to the primary tree, falling back to download + upload."""
        storage = self._ctx.storage
        status = PromoteFileStatus(file_path=file.file_path)
        try:
            dest_folder = file.file_path.rsplit("/", 1)[0]
            try:
                copied = await self.promote_copy(file.file_path, dest_folder)
            except CopyTimeoutError as e:
                logger.warning("%s; falling back to upload", e)
                copied = False
                status.reason = "copy_timeout"

            if copied:
                status.success = True
                status.method = "copy"
                return status

            if not file.download_url:
                raise ValueError("no download URL for fallback upload")
            content = await storage.download(file.download_url)
            if await storage.upload(content, file.file_path):
                status.success = True
                status.method = "upload"
                status.reason = None
            else:
                status.reason = "upload_failed"
        except Exception as e:
            logger.error(
                "Error promoting file %s at %s to main content tree: %s",
                file.download_url, file.file_path, e,
            )
            status.success = False
            status.reason = str(e)
        return status

    async def promote_copy(self, src_path: str, dest_folder: str) -> bool:
        """Server-side copy with a bounded status poll.

        Returns True once the copy reports completion, False if it reports
        failure or no monitor URL was returned.

        Raises:
            CopyTimeoutError: If the poll budget runs out first.
        """
        storage = self._ctx.storage
        monitor_url = await storage.start_copy(src_path, dest_folder)
        if not monitor_url:
            return False

        max_attempts = self._settings.copy_poll_max_attempts
        delay = self._settings.copy_poll_interval_s
        for attempt in range(1, max_attempts + 1):
            copy_status = await storage.get_copy_status(monitor_url)
            if copy_status is not None:
                if copy_status.completed:
                    return True
                if copy_status.failed:
                    return False
            if attempt < max_attempts:
                await asyncio.sleep(delay)
                delay = min(
                    delay * self._settings.copy_poll_backoff,
                    self._settings.copy_poll_max_interval_s,
                )

        raise CopyTimeoutError(src_path, max_attempts)


def _summarize(result: BatchPromoteResult) -> str:
    total = len(result.statuses)
    failed = len(result.failed_paths)
    label = f"Batch-{result.batch_number}"
    if failed:
        return (
            f"Promoted {total - failed} of {total} files in {label}; "
            f"{failed} failed, see the batch failure manifest"
        )
    return f"Promoted {total} files in {label} successfully"
