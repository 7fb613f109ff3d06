# src/batch/models.py - v1
"""Batch models: Batch, BatchResults."""

from __future__ import annotations

from pydantic import BaseModel, Field

from floodgate.core.models import FileRecord


class Batch(BaseModel):
    """Contiguous slice of a job's files handled by one worker."""

    batch_number: int
    files: list[FileRecord] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.files)


class BatchResults(BaseModel):
    """Failure manifest for one batch."""

    failed_promotes: list[str] = Field(default_factory=list, alias="failedPromotes")

    model_config = {"populate_by_name": True}
