# src/dispatch/celery_dispatcher.py - v1
"""Celery-backed dispatcher (DISPATCH_BACKEND=celery).

Sends tasks by name, so the dispatching process does not need to import
the worker code. The AsyncResult id is the dispatch handle.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from floodgate.dispatch.base_dispatcher import BaseDispatcher, DispatchError

if TYPE_CHECKING:
    from celery import Celery

logger = logging.getLogger(__name__)


class CeleryDispatcher(BaseDispatcher):
    """Publish actions onto a Celery broker."""

    def __init__(self, app: Celery, queue: str) -> None:
        self._app = app
        self._queue = queue

    async def invoke(self, action: str, params: dict[str, Any]) -> str:
        try:
            result = await asyncio.to_thread(
                self._app.send_task, action, kwargs={"params": params}, queue=self._queue,
            )
        except Exception as e:
            raise DispatchError(action, str(e)) from e
        logger.debug("Published %s to %s as %s", action, self._queue, result.id)
        return result.id
