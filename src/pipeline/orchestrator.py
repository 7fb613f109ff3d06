# src/pipeline/orchestrator.py - v1
"""Promotion orchestrator: the two job-level actions.

  start_promotion:  reset the job record and hand off to create_batches
  create_batches:   enumerate the staging tree and fan batches out to workers

Both report through the job-level status record only; batch workers own
their per-batch records.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from floodgate.core.models import ActionResult
from floodgate.dispatch.tracking import dispatch_and_track
from floodgate.pipeline.batch_dispatcher import BatchDispatcher
from floodgate.pipeline.enumerator import FileTreeEnumerator

if TYPE_CHECKING:
    from floodgate.pipeline.context import PromotionContext

logger = logging.getLogger(__name__)

REQUIRED_JOB_PARAMS = ("root_folder", "project_excel_path", "admin_page_uri")
MISSING_DATA_MESSAGE = "Required data is not available to proceed with FG Promote action."


async def start_promotion(ctx: PromotionContext) -> ActionResult:
    """Reset the job record and dispatch the batch-creation action.

    Returns:
        code 200 with the job record once batch creation was accepted,
        otherwise code 500 with the FAILED record (or 400 on missing data).
    """
    params = ctx.params
    missing = params.missing_fields(REQUIRED_JOB_PARAMS)
    if missing:
        logger.error("%s Missing: %s", MISSING_DATA_MESSAGE, ", ".join(missing))
        return ActionResult(code=400, payload=MISSING_DATA_MESSAGE)

    tracker = ctx.job_tracker()
    try:
        await tracker.clear()
        await tracker.update(
            status="STARTED", message="Triggering promote action", batches={},
        )
        outcome = await dispatch_and_track(
            ctx.dispatcher,
            ctx.settings.create_batch_action,
            params.passthrough(),
            tracker,
        )
        return ActionResult(code=outcome.code, payload=outcome.payload)
    except Exception as e:
        logger.exception("Promote action failed for %s", params.root_folder)
        record = await tracker.update(
            status="FAILED", message=f"Failed to invoke actions {e}",
        )
        return ActionResult(code=500, payload=record.model_dump(mode="json"))


async def create_batches(ctx: PromotionContext) -> ActionResult:
    """Enumerate the staging tree and dispatch one worker per batch.

    With no root folder there is no record to report into, so the error is
    only returned. Any other missing parameter marks the job FAILED.
    """
    params = ctx.params
    if not params.root_folder:
        logger.error("%s (root folder missing)", MISSING_DATA_MESSAGE)
        return ActionResult(body={"error": MISSING_DATA_MESSAGE})

    tracker = ctx.job_tracker()
    missing = params.missing_fields(REQUIRED_JOB_PARAMS)
    if missing:
        logger.error("%s Missing: %s", MISSING_DATA_MESSAGE, ", ".join(missing))
        await tracker.update(status="FAILED", message=MISSING_DATA_MESSAGE)
        return ActionResult(body={"error": MISSING_DATA_MESSAGE})

    dispatcher = BatchDispatcher(ctx)
    try:
        await tracker.update(status="IN_PROGRESS", message="Getting all files to be promoted.")
        enumerator = FileTreeEnumerator(ctx.storage, page_size=ctx.settings.storage_page_size)
        files = await enumerator.enumerate()
        await ctx.batch_manager().clear()

        if not files:
            await tracker.update(status="COMPLETED", message="No files found to promote")
            return ActionResult(body={"code": 200, "payload": []})

        outcomes = await dispatcher.dispatch(files, ctx.settings.batch_size)
        await tracker.update(
            message=f"Dispatched {dispatcher.accepted_count}/{len(outcomes)} batches",
        )
        return ActionResult(
            body={"code": 200, "payload": [o.model_dump(mode="json") for o in outcomes]},
        )
    except Exception as e:
        logger.exception("Batch creation failed for %s", params.root_folder)
        status = "COMPLETED_WITH_ERROR" if dispatcher.accepted_count else "FAILED"
        await tracker.update(status=status, message=str(e))
        return ActionResult(body={"error": str(e)})
