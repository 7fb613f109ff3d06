# src/core/models.py - v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


# === STATUS LIFECYCLE ===

ProjectStatus = Literal[
    "STARTED", "IN_PROGRESS", "COMPLETED", "COMPLETED_WITH_ERROR", "FAILED"
]

TERMINAL_STATUSES: frozenset[str] = frozenset(
    {"COMPLETED", "COMPLETED_WITH_ERROR", "FAILED"}
)

# Stage-detail keys written into StatusRecord.details
PROMOTE_COPY_STAGE = "promoteCopyStatus"


def is_terminal(status: str | None) -> bool:
    """True if the status ends a record's lifecycle."""
    return status in TERMINAL_STATUSES


# === FILES AND JOB PARAMETERS ===


class FileRecord(BaseModel):
    """One staging file to promote. Immutable once enumerated."""

    model_config = {"frozen": True}

    download_url: str | None = None
    file_path: str


class JobParams(BaseModel):
    """Invocation parameters passed verbatim across every pipeline hop.

    Batch workers additionally receive ``batch_number`` and ``files``.
    """

    root_folder: str = ""
    admin_page_uri: str = ""
    project_excel_path: str = ""
    do_publish: bool = False
    batch_number: int | None = None
    files: list[FileRecord] = Field(default_factory=list)

    def missing_fields(self, required: tuple[str, ...]) -> list[str]:
        """Return names of required fields that are empty."""
        return [name for name in required if not getattr(self, name)]

    def passthrough(self) -> dict[str, Any]:
        """Job-level parameters without batch-specific fields."""
        return self.model_dump(mode="json", exclude={"batch_number", "files"})

    def for_batch(self, batch_number: int, files: list[FileRecord]) -> JobParams:
        """Copy of these parameters scoped to one batch."""
        return self.model_copy(update={"batch_number": batch_number, "files": list(files)})


# === STATUS RECORDS ===


class StatusRecord(BaseModel):
    """Persisted projection of a job or batch's progress."""

    status: ProjectStatus | None = None
    status_message: str | None = None
    details: dict[str, str] = Field(default_factory=dict)
    batches: dict[str, str] = Field(default_factory=dict)
    activation_id: str | None = None
    next_stage_activation_id: str | None = None
    updated_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self.status)


# === PROMOTION OUTCOMES ===


class PromoteFileStatus(BaseModel):
    """Outcome of promoting one file."""

    file_path: str
    success: bool = False
    method: Literal["copy", "upload"] | None = None
    reason: str | None = None


class BatchPromoteResult(BaseModel):
    """Aggregated per-file outcomes for one batch."""

    batch_number: int
    statuses: list[PromoteFileStatus] = Field(default_factory=list)

    @property
    def succeeded(self) -> list[PromoteFileStatus]:
        return [s for s in self.statuses if s.success]

    @property
    def failed_paths(self) -> list[str]:
        return [s.file_path or "Path Info Not available" for s in self.statuses if not s.success]


# === ACTION RESULTS ===


class DispatchOutcome(BaseModel):
    """Result of asking for a unit of work to start asynchronously."""

    code: int
    activation_id: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def accepted(self) -> bool:
        return self.code == 200


class ActionResult(BaseModel):
    """Value returned from a top-level action to the hosting layer.

    Carries either a ``code``/``payload`` pair or a ``body``.
    """

    code: int | None = None
    payload: Any = None
    body: Any = None
