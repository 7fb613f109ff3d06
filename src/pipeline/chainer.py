# src/pipeline/chainer.py - v1
"""Pipeline stage chainer: hand a finished batch to the next stage."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from floodgate.dispatch.tracking import dispatch_and_track

if TYPE_CHECKING:
    from floodgate.pipeline.context import PromotionContext

logger = logging.getLogger(__name__)


class StageChainer:
    """Dispatch the post-copy stage for a batch.

    Args:
        ctx: Promotion context of the batch invocation.
    """

    def __init__(self, ctx: PromotionContext) -> None:
        self._ctx = ctx

    async def advance(self, batch_number: int) -> dict[str, str]:
        """Start the next stage and record its handle on the batch record.

        Only the handle field is merged, so a status the next stage has
        already written is left untouched.

        Returns:
            ``{"next_stage_activation_id": ...}`` or an empty dict on failure.
        """
        params = {**self._ctx.params.passthrough(), "batch_number": batch_number}
        outcome = await dispatch_and_track(
            self._ctx.dispatcher,
            self._ctx.settings.post_copy_action,
            params,
            self._ctx.batch_tracker(batch_number),
            on_accepted=lambda handle: {"next_stage_activation_id": handle},
        )
        if not outcome.accepted:
            logger.error("Failed to invoke next stage for batch %d", batch_number)
            return {}
        return {"next_stage_activation_id": outcome.activation_id or ""}
