# tests/unit/worker/test_tasks.py - v1
"""Tests for worker/celery_app.py and worker/tasks.py."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

from celery import Celery

from floodgate.config.settings import Settings
from floodgate.core.models import ActionResult
from floodgate.worker.celery_app import create_celery_app
from floodgate.worker.tasks import register_tasks


class TestCreateCeleryApp:
    def test_conf(self):
        s = Settings(_env_file=None, celery_queue="promote", celery_broker_url="memory://")
        app = create_celery_app(s)
        assert isinstance(app, Celery)
        assert app.conf.task_default_queue == "promote"
        assert app.conf.task_serializer == "json"
        assert app.conf.task_acks_late is True


class TestRegisterTasks:
    def test_names_match_actions(self):
        s = Settings(_env_file=None, celery_broker_url="memory://")
        app = create_celery_app(s)
        tasks = register_tasks(app, s)
        assert set(tasks) == {s.promote_action, s.create_batch_action, s.worker_action}
        assert s.promote_action in app.tasks
        assert s.worker_action in app.tasks

    def test_worker_task_runs_service(self):
        s = Settings(_env_file=None, celery_broker_url="memory://")
        app = create_celery_app(s)
        tasks = register_tasks(app, s)

        with patch(
            "floodgate.worker.tasks.PromotionService.promote_worker",
            new=AsyncMock(return_value=ActionResult(body="done")),
        ) as promote_worker:
            out = tasks[s.worker_action].run({"root_folder": "/pink", "batch_number": 0})

        assert out["body"] == "done"
        promote_worker.assert_awaited_once_with({"root_folder": "/pink", "batch_number": 0})

    def test_promote_task_runs_service(self):
        s = Settings(_env_file=None, celery_broker_url="memory://")
        app = create_celery_app(s)
        tasks = register_tasks(app, s)
        params = {"root_folder": "/pink", "admin_page_uri": "a", "project_excel_path": "p"}

        with patch(
            "floodgate.worker.tasks.PromotionService.promote",
            new=AsyncMock(return_value=ActionResult(payload={"status": "IN_PROGRESS"})),
        ) as promote:
            out = tasks[s.promote_action].run(params)

        assert out["payload"] == {"status": "IN_PROGRESS"}
        promote.assert_awaited_once_with(params)
