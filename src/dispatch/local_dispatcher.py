# src/dispatch/local_dispatcher.py - v1
"""In-process dispatcher (DISPATCH_BACKEND=local).

Runs each action as an asyncio task on the current event loop. Handlers
receive the same JSON parameter dict a remote worker would, so no memory
is shared between hops except through the status store.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Awaitable, Callable

from floodgate.dispatch.base_dispatcher import BaseDispatcher, DispatchError

logger = logging.getLogger(__name__)

ActionHandler = Callable[[dict[str, Any]], Awaitable[Any]]


class LocalDispatcher(BaseDispatcher):
    """Dispatch actions to registered coroutine handlers."""

    def __init__(self, handlers: dict[str, ActionHandler] | None = None) -> None:
        self._handlers: dict[str, ActionHandler] = dict(handlers or {})
        self._tasks: dict[str, asyncio.Task] = {}

    def register(self, action: str, handler: ActionHandler) -> None:
        self._handlers[action] = handler

    async def invoke(self, action: str, params: dict[str, Any]) -> str:
        handler = self._handlers.get(action)
        if handler is None:
            raise DispatchError(action, "no handler registered")

        handle = uuid.uuid4().hex
        task = asyncio.create_task(handler(dict(params)), name=f"{action}:{handle}")
        task.add_done_callback(lambda t: self._on_done(action, handle, t))
        self._tasks[handle] = task
        logger.debug("Dispatched %s as %s", action, handle)
        return handle

    @property
    def pending(self) -> int:
        """Number of dispatched actions still running."""
        return len(self._tasks)

    def _on_done(self, action: str, handle: str, task: asyncio.Task) -> None:
        self._tasks.pop(handle, None)
        if task.cancelled():
            logger.warning("Action %s (%s) was cancelled", action, handle)
        elif task.exception() is not None:
            logger.error(
                "Action %s (%s) raised", action, handle, exc_info=task.exception(),
            )

    async def drain(self) -> None:
        """Wait until every dispatched action, including ones they dispatch, finishes."""
        while True:
            pending = [t for t in self._tasks.values() if not t.done()]
            if not pending:
                return
            await asyncio.wait(pending)
