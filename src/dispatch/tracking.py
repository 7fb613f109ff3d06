# src/dispatch/tracking.py - v1
"""Dispatch an action and record the outcome in a status record.

Every asynchronous hand-off in the pipeline goes through
``dispatch_and_track`` so that acceptance and failure are written the
same way at each call site.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from floodgate.core.models import DispatchOutcome
from floodgate.dispatch.base_dispatcher import BaseDispatcher, DispatchError
from floodgate.status.tracker import StatusTracker

logger = logging.getLogger(__name__)

AcceptedUpdate = Callable[[str], dict[str, Any]]


def _attach_activation(handle: str) -> dict[str, Any]:
    return {"status": "IN_PROGRESS", "activation_id": handle}


async def dispatch_and_track(
    dispatcher: BaseDispatcher,
    action: str,
    params: dict[str, Any],
    tracker: StatusTracker,
    on_accepted: AcceptedUpdate = _attach_activation,
) -> DispatchOutcome:
    """Start ``action`` and merge its outcome into ``tracker``'s record.

    Args:
        dispatcher: Backend that starts the action.
        action: Action name.
        params: JSON-serializable invocation parameters.
        tracker: Status record to update.
        on_accepted: Maps the dispatch handle to ``StatusTracker.update`` kwargs.

    Returns:
        code 200 with the handle on acceptance, code 500 on dispatch failure.
    """
    try:
        handle = await dispatcher.invoke(action, params)
    except DispatchError as e:
        logger.error("Failed to invoke %s: %s", action, e.reason)
        record = await tracker.update(
            status="FAILED", message=f"Failed to invoke actions {e.reason}",
        )
        return DispatchOutcome(code=500, payload=record.model_dump(mode="json"))

    logger.info("Invoked %s as %s", action, handle)
    record = await tracker.update(**on_accepted(handle))
    return DispatchOutcome(
        code=200, activation_id=handle, payload=record.model_dump(mode="json"),
    )
