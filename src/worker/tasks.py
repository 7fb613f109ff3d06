# src/worker/tasks.py - v1
"""Celery tasks for the promotion actions.

Run a worker with:
    celery -A floodgate.worker.tasks:app worker -Q floodgate

Tasks are registered under the configured action names so that
``CeleryDispatcher.invoke`` reaches them through ``send_task``.
"""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from typing import Any

from celery import Celery
from celery.signals import worker_process_init

from floodgate.api.actions import PromotionService
from floodgate.config.settings import Settings, load_settings
from floodgate.dispatch.celery_dispatcher import CeleryDispatcher
from floodgate.logging.logger import setup_logging
from floodgate.worker.celery_app import create_celery_app

logger = logging.getLogger(__name__)


def register_tasks(app: Celery, settings: Settings) -> dict[str, Any]:
    """Register the job-start, create-batch and batch-worker tasks on ``app``.

    Returns:
        Registered tasks keyed by action name.
    """

    @lru_cache(maxsize=1)
    def get_service() -> PromotionService:
        dispatcher = CeleryDispatcher(app, queue=settings.celery_queue)
        return PromotionService(settings, dispatcher=dispatcher)

    @app.task(name=settings.promote_action)
    def promote_job(params: dict[str, Any]) -> dict[str, Any]:
        result = asyncio.run(get_service().promote(params))
        return result.model_dump(mode="json")

    @app.task(name=settings.create_batch_action)
    def promote_create_batch(params: dict[str, Any]) -> dict[str, Any]:
        result = asyncio.run(get_service().create_batches(params))
        return result.model_dump(mode="json")

    @app.task(name=settings.worker_action)
    def promote_worker(params: dict[str, Any]) -> dict[str, Any]:
        result = asyncio.run(get_service().promote_worker(params))
        return result.model_dump(mode="json")

    return {
        settings.promote_action: promote_job,
        settings.create_batch_action: promote_create_batch,
        settings.worker_action: promote_worker,
    }


settings = load_settings()
app = create_celery_app(settings)
tasks = register_tasks(app, settings)


@worker_process_init.connect
def init_worker_process(**kwargs) -> None:
    """Configure logging once per worker process."""
    setup_logging(
        level=settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    logger.info("Celery worker initialized (queue=%s)", settings.celery_queue)
