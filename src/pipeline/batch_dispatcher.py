# src/pipeline/batch_dispatcher.py - v1
"""Batch partitioner and dispatcher.

Splits the enumerated file list into fixed-size batches, saves each one,
and starts one worker per batch without waiting for it to finish. A
batch that cannot be saved or dispatched is marked FAILED on the job
record; the remaining batches are still attempted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from floodgate.batch.partitioner import partition
from floodgate.core.models import DispatchOutcome, FileRecord
from floodgate.dispatch.tracking import dispatch_and_track

if TYPE_CHECKING:
    from floodgate.pipeline.context import PromotionContext

logger = logging.getLogger(__name__)


class BatchDispatcher:
    """Fan a job's files out to batch workers.

    Args:
        ctx: Promotion context of the orchestrating invocation.
    """

    def __init__(self, ctx: PromotionContext) -> None:
        self._ctx = ctx
        self.outcomes: list[DispatchOutcome] = []

    @property
    def accepted_count(self) -> int:
        return sum(1 for o in self.outcomes if o.accepted)

    async def dispatch(
        self, files: Sequence[FileRecord], batch_size: int
    ) -> list[DispatchOutcome]:
        """Partition ``files`` and dispatch every batch.

        Returns:
            One outcome per batch, in batch-number order.
        """
        tracker = self._ctx.job_tracker()
        manager = self._ctx.batch_manager()
        action = self._ctx.settings.worker_action
        batches = partition(files, batch_size)
        logger.info("Dispatching %d files as %d batches", len(files), len(batches))

        for batch in batches:
            number = batch.batch_number
            try:
                await manager.save_batch(batch)
            except Exception as e:
                logger.exception("Could not save batch %d", number)
                record = await tracker.update(
                    status="FAILED",
                    message=f"Failed to save batch {number} before dispatch: {e}",
                )
                self.outcomes.append(
                    DispatchOutcome(code=500, payload=record.model_dump(mode="json"))
                )
                continue

            params = self._ctx.params.for_batch(number, batch.files).model_dump(mode="json")
            outcome = await dispatch_and_track(
                self._ctx.dispatcher,
                action,
                params,
                tracker,
                on_accepted=lambda handle, n=number: {
                    "status": "IN_PROGRESS", "batches": {n: handle},
                },
            )
            self.outcomes.append(outcome)

        return self.outcomes
