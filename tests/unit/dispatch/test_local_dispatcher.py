# tests/unit/dispatch/test_local_dispatcher.py - v1
"""Tests for dispatch/local_dispatcher.py - in-process action tasks."""

from __future__ import annotations

import asyncio
import logging

import pytest

from floodgate.dispatch.base_dispatcher import BaseDispatcher, DispatchError
from floodgate.dispatch.local_dispatcher import LocalDispatcher


class TestBaseDispatcher:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseDispatcher()  # type: ignore[abstract]


class TestLocalDispatcher:
    @pytest.mark.asyncio
    async def test_invoke_returns_before_handler_finishes(self):
        started = asyncio.Event()
        release = asyncio.Event()

        results: list[int] = []

        async def handler(params):
            started.set()
            await release.wait()
            results.append(params["n"] * 2)

        dispatcher = LocalDispatcher({"double": handler})
        handle = await dispatcher.invoke("double", {"n": 21})
        assert isinstance(handle, str) and handle

        await started.wait()
        assert results == []
        assert dispatcher.pending == 1
        release.set()
        await dispatcher.drain()
        assert results == [42]

    @pytest.mark.asyncio
    async def test_unknown_action(self):
        with pytest.raises(DispatchError, match="no handler registered"):
            await LocalDispatcher().invoke("missing", {})

    @pytest.mark.asyncio
    async def test_params_copied(self):
        seen = {}

        async def handler(params):
            params["mutated"] = True
            seen.update(params)

        dispatcher = LocalDispatcher()
        dispatcher.register("act", handler)
        original = {"a": 1}
        await dispatcher.invoke("act", original)
        await dispatcher.drain()
        assert original == {"a": 1}
        assert seen == {"a": 1, "mutated": True}

    @pytest.mark.asyncio
    async def test_drain_waits_for_nested_dispatch(self):
        order: list[str] = []
        dispatcher = LocalDispatcher()

        async def child(params):
            await asyncio.sleep(0)
            order.append("child")

        async def parent(params):
            await dispatcher.invoke("child", {})
            order.append("parent")

        dispatcher.register("child", child)
        dispatcher.register("parent", parent)
        await dispatcher.invoke("parent", {})
        await dispatcher.drain()
        assert sorted(order) == ["child", "parent"]

    @pytest.mark.asyncio
    async def test_handler_error_does_not_escape(self, caplog):
        async def boom(params):
            raise RuntimeError("boom")

        dispatcher = LocalDispatcher({"boom": boom})
        handle = await dispatcher.invoke("boom", {})
        with caplog.at_level(logging.ERROR, logger="floodgate.dispatch.local_dispatcher"):
            await dispatcher.drain()
        assert f"Action boom ({handle}) raised" in caplog.text
        assert dispatcher.pending == 0

    @pytest.mark.asyncio
    async def test_finished_tasks_are_released(self):
        async def noop(params):
            return None

        dispatcher = LocalDispatcher({"noop": noop})
        for _ in range(5):
            await dispatcher.invoke("noop", {})
        await dispatcher.drain()
        assert dispatcher.pending == 0
