# tests/unit/dispatch/test_tracking.py - v1
"""Tests for dispatch/tracking.py - dispatch outcome recorded in status."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from floodgate.dispatch.base_dispatcher import DispatchError
from floodgate.dispatch.tracking import dispatch_and_track
from floodgate.status.tracker import StatusTracker


@pytest.fixture
def tracker(status_store) -> StatusTracker:
    return StatusTracker(status_store, "fg:/pink")


class TestDispatchAndTrack:
    @pytest.mark.asyncio
    async def test_accepted_default_update(self, tracker):
        dispatcher = AsyncMock()
        dispatcher.invoke.return_value = "act-1"

        outcome = await dispatch_and_track(dispatcher, "next", {"x": 1}, tracker)

        assert outcome.accepted
        assert outcome.activation_id == "act-1"
        record = await tracker.read()
        assert record.status == "IN_PROGRESS"
        assert record.activation_id == "act-1"
        dispatcher.invoke.assert_awaited_once_with("next", {"x": 1})

    @pytest.mark.asyncio
    async def test_accepted_custom_update(self, tracker):
        dispatcher = AsyncMock()
        dispatcher.invoke.return_value = "act-2"

        await dispatch_and_track(
            dispatcher, "next", {}, tracker,
            on_accepted=lambda h: {"batches": {3: h}},
        )
        record = await tracker.read()
        assert record.batches == {"3": "act-2"}
        assert record.status is None

    @pytest.mark.asyncio
    async def test_failure_writes_failed(self, tracker):
        dispatcher = AsyncMock()
        dispatcher.invoke.side_effect = DispatchError("next", "quota exceeded")

        outcome = await dispatch_and_track(dispatcher, "next", {}, tracker)

        assert outcome.code == 500
        assert outcome.activation_id is None
        assert outcome.payload["status"] == "FAILED"
        assert outcome.payload["status_message"] == "Failed to invoke actions quota exceeded"
