# src/worker/celery_app.py - v1
"""Celery application for hosting the promotion actions.

Brokered workers run the create-batch and batch-worker actions; any
process that only dispatches needs the app for ``send_task`` alone.
"""

from __future__ import annotations

from celery import Celery

from floodgate.config.settings import Settings


def create_celery_app(settings: Settings) -> Celery:
    """Build a Celery app from settings.

    Args:
        settings: Application settings (broker, result backend, queue).
    """
    app = Celery(
        "floodgate",
        broker=settings.celery_broker_url,
        backend=settings.celery_result_backend or None,
    )
    app.conf.update(
        # Serialization
        task_serializer="json",
        result_serializer="json",
        accept_content=["json"],

        timezone="UTC",
        enable_utc=True,

        result_expires=3600,
        task_default_queue=settings.celery_queue,

        # A batch holds a worker slot for its whole run
        worker_prefetch_multiplier=1,
        task_acks_late=True,
        task_reject_on_worker_lost=True,

        # Failures are reported through the status store, never retried here
        task_autoretry_for=(),
        task_retry_kwargs={"max_retries": 0},

        worker_send_task_events=True,
        task_send_sent_event=True,
    )
    return app
