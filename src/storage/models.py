# src/storage/models.py - v1
"""Storage API wire models: drive items, listing pages, copy status."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ParentReference(BaseModel):
    """Location of an item's parent folder."""

    model_config = ConfigDict(extra="ignore")

    path: str = ""


class DriveItem(BaseModel):
    """A file or folder returned by a children listing."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    parent_reference: ParentReference = Field(
        default_factory=ParentReference, alias="parentReference"
    )
    folder: dict[str, Any] | None = None
    download_url: str | None = Field(default=None, alias="@microsoft.graph.downloadUrl")

    @property
    def is_folder(self) -> bool:
        return self.folder is not None


class ChildrenPage(BaseModel):
    """One page of a folder listing."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    value: list[DriveItem] = Field(default_factory=list)
    next_link: str | None = Field(default=None, alias="@odata.nextLink")


class CopyStatus(BaseModel):
    """State reported by a copy operation's monitor URL."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    status: Literal[
        "notStarted", "inProgress", "completed", "updating", "failed",
        "deletePending", "deleteFailed", "waiting",
    ] | str = "inProgress"
    percentage_complete: float | None = Field(default=None, alias="percentageComplete")

    @property
    def completed(self) -> bool:
        return self.status == "completed"

    @property
    def failed(self) -> bool:
        return self.status == "failed"
