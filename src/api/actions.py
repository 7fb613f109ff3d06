# src/api/actions.py - v1
"""Action entry points: one coroutine per pipeline stage.

Usage:
    from floodgate.api.actions import PromotionService
    service = PromotionService(load_settings())
    result = await service.promote({"root_folder": "/project", ...})

Each entry point takes the JSON parameter dict the hosting layer received,
builds a fresh PromotionContext for the invocation and returns an
ActionResult. Collaborators default to the configured backends and may be
injected for tests or in-process runs.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

from floodgate.config.settings import Settings
from floodgate.core.models import ActionResult, JobParams
from floodgate.dispatch.base_dispatcher import BaseDispatcher
from floodgate.dispatch.dispatcher_factory import create_dispatcher
from floodgate.dispatch.local_dispatcher import ActionHandler
from floodgate.logging.context import clear_context, set_batch_context, set_job_context
from floodgate.manifests.base_output_writer import BaseOutputWriter
from floodgate.manifests.writer_factory import create_writer
from floodgate.pipeline.context import PromotionContext, StorageFactory
from floodgate.pipeline.executor import BatchPromotionExecutor
from floodgate.pipeline.orchestrator import create_batches, start_promotion
from floodgate.status.base_status_store import BaseStatusStore
from floodgate.status.store_factory import create_status_store
from floodgate.storage.client_factory import create_storage_client

logger = logging.getLogger(__name__)

Stage = Callable[[PromotionContext], Awaitable[ActionResult]]


class PromotionService:
    """Hosts the promote, create-batch and batch-worker actions.

    Args:
        settings: Application settings.
        status_store: Status backend. Created from settings if None.
        dispatcher: Dispatch backend. Created from settings if None; a local
            dispatcher is wired to this service's handlers.
        writer: Manifest writer. Created from settings if None.
        storage_factory: Builds the storage client for an invocation.
    """

    def __init__(
        self,
        settings: Settings,
        status_store: BaseStatusStore | None = None,
        dispatcher: BaseDispatcher | None = None,
        writer: BaseOutputWriter | None = None,
        storage_factory: StorageFactory | None = None,
    ) -> None:
        self.settings = settings
        self.status_store = status_store or create_status_store(settings)
        self.writer = writer or create_writer(settings)
        self.storage_factory = storage_factory or create_storage_client
        self.dispatcher = dispatcher or create_dispatcher(settings, self.handlers())

    def handlers(self) -> dict[str, ActionHandler]:
        """Action name to coroutine mapping for in-process dispatch."""
        return {
            self.settings.promote_action: self.promote,
            self.settings.create_batch_action: self.create_batches,
            self.settings.worker_action: self.promote_worker,
        }

    async def promote(self, params: dict[str, Any]) -> ActionResult:
        """Start a promotion job."""
        return await self._run("promote", params, start_promotion)

    async def create_batches(self, params: dict[str, Any]) -> ActionResult:
        """Enumerate the staging tree and dispatch batch workers."""
        return await self._run("promote-create-batch", params, create_batches)

    async def promote_worker(self, params: dict[str, Any]) -> ActionResult:
        """Promote one batch."""
        return await self._run(
            "promote-worker", params, lambda ctx: BatchPromotionExecutor(ctx).run(),
        )

    async def _run(self, action: str, raw: dict[str, Any], stage: Stage) -> ActionResult:
        try:
            params = JobParams.model_validate(raw)
        except ValidationError as e:
            logger.error("Invalid parameters for %s: %s", action, e)
            return ActionResult(code=400, payload=str(e))

        set_job_context(params.root_folder, action=action)
        set_batch_context(params.batch_number)
        ctx = PromotionContext(
            settings=self.settings,
            params=params,
            status_store=self.status_store,
            dispatcher=self.dispatcher,
            writer=self.writer,
            storage_factory=self.storage_factory,
        )
        try:
            return await stage(ctx)
        finally:
            await ctx.close()
            clear_context()
