# tests/unit/core/test_unit_models.py - v1
"""Tests for core/models.py - shared domain models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from floodgate.core.models import (
    TERMINAL_STATUSES,
    ActionResult,
    BatchPromoteResult,
    DispatchOutcome,
    FileRecord,
    JobParams,
    PromoteFileStatus,
    StatusRecord,
    is_terminal,
)


class TestStatusLifecycle:
    @pytest.mark.parametrize("status", ["COMPLETED", "COMPLETED_WITH_ERROR", "FAILED"])
    def test_terminal(self, status):
        assert is_terminal(status)
        assert status in TERMINAL_STATUSES

    @pytest.mark.parametrize("status", ["STARTED", "IN_PROGRESS", None])
    def test_non_terminal(self, status):
        assert not is_terminal(status)

    def test_record_terminal_property(self):
        assert StatusRecord(status="FAILED").is_terminal
        assert not StatusRecord().is_terminal

    def test_invalid_status_rejected(self):
        with pytest.raises(ValidationError):
            StatusRecord(status="DONE")


class TestFileRecord:
    def test_frozen(self):
        record = FileRecord(download_url="https://dl/x", file_path="/x.html")
        with pytest.raises(ValidationError):
            record.file_path = "/y.html"  # type: ignore[misc]


class TestJobParams:
    def test_missing_fields(self):
        params = JobParams(root_folder="/pink", admin_page_uri="")
        missing = params.missing_fields(("root_folder", "admin_page_uri", "project_excel_path"))
        assert missing == ["admin_page_uri", "project_excel_path"]

    def test_passthrough_excludes_batch_fields(self, sample_files):
        params = JobParams(root_folder="/pink", batch_number=3, files=sample_files)
        data = params.passthrough()
        assert "batch_number" not in data
        assert "files" not in data
        assert data["root_folder"] == "/pink"

    def test_for_batch(self, sample_files):
        params = JobParams(root_folder="/pink", do_publish=True)
        scoped = params.for_batch(1, sample_files[:2])
        assert scoped.batch_number == 1
        assert len(scoped.files) == 2
        assert scoped.do_publish is True
        assert params.batch_number is None

    def test_round_trip_through_json_params(self, sample_files):
        scoped = JobParams(root_folder="/pink").for_batch(0, sample_files)
        rebuilt = JobParams.model_validate(scoped.model_dump(mode="json"))
        assert rebuilt.files == sample_files


class TestBatchPromoteResult:
    def test_counts_partition_statuses(self):
        result = BatchPromoteResult(batch_number=0, statuses=[
            PromoteFileStatus(file_path="/a", success=True, method="copy"),
            PromoteFileStatus(file_path="/b", success=False, reason="boom"),
            PromoteFileStatus(file_path="/c", success=True, method="upload"),
        ])
        assert len(result.succeeded) + len(result.failed_paths) == len(result.statuses)
        assert result.failed_paths == ["/b"]

    def test_missing_path_placeholder(self):
        result = BatchPromoteResult(
            batch_number=0, statuses=[PromoteFileStatus(file_path="", success=False)],
        )
        assert result.failed_paths == ["Path Info Not available"]


class TestOutcomes:
    def test_dispatch_outcome_accepted(self):
        assert DispatchOutcome(code=200, activation_id="h1").accepted
        assert not DispatchOutcome(code=500).accepted

    def test_action_result_defaults(self):
        result = ActionResult(body="done")
        assert result.code is None
        assert result.payload is None
