# tests/unit/logging/test_unit_context.py - v1
"""Tests for logging/context.py - contextvars log context."""

from __future__ import annotations

import asyncio

import pytest

from floodgate.logging.context import (
    clear_context,
    get_context,
    set_batch_context,
    set_job_context,
)


class TestLogContext:
    def teardown_method(self):
        clear_context()

    def test_empty_by_default(self):
        clear_context()
        assert get_context().as_dict() == {}

    def test_job_context(self):
        set_job_context("/pink", action="promote")
        ctx = get_context()
        assert ctx.root_folder == "/pink"
        assert ctx.action == "promote"
        assert ctx.batch_number is None

    def test_batch_zero_kept(self):
        set_batch_context(0)
        assert get_context().as_dict() == {"batch_number": 0}

    def test_empty_root_is_none(self):
        set_job_context("")
        assert get_context().root_folder is None

    @pytest.mark.asyncio
    async def test_tasks_do_not_leak(self):
        async def worker(n: int) -> int | None:
            set_batch_context(n)
            await asyncio.sleep(0)
            return get_context().batch_number

        results = await asyncio.gather(worker(1), worker(2))
        assert results == [1, 2]
