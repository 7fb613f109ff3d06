# src/dispatch/dispatcher_factory.py - v1
"""Factory: instantiate the dispatcher from configuration."""

from __future__ import annotations

from floodgate.config.settings import Settings
from floodgate.dispatch.base_dispatcher import BaseDispatcher
from floodgate.dispatch.local_dispatcher import ActionHandler, LocalDispatcher


def create_dispatcher(
    settings: Settings,
    handlers: dict[str, ActionHandler] | None = None,
) -> BaseDispatcher:
    """Create the dispatcher selected by DISPATCH_BACKEND.

    Args:
        settings: Application settings.
        handlers: Action handlers for the local backend.
    """
    if settings.dispatch_backend == "local":
        return LocalDispatcher(handlers)

    if settings.dispatch_backend == "celery":
        from floodgate.dispatch.celery_dispatcher import CeleryDispatcher
        from floodgate.worker.celery_app import create_celery_app
        return CeleryDispatcher(create_celery_app(settings), queue=settings.celery_queue)

    raise ValueError(f"Unsupported dispatch backend: {settings.dispatch_backend!r}")
