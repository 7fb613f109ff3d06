# tests/conftest.py - v1
"""Shared test fixtures for all unit and integration tests.

Provides zero-delay settings, in-memory status store, a local manifest
writer under tmp_path and a scriptable fake storage client.
No external services: all I/O is in memory or under tmp_path.
"""

from __future__ import annotations

from typing import Any

import pytest

from floodgate.config.settings import Settings
from floodgate.core.models import FileRecord, JobParams
from floodgate.dispatch.local_dispatcher import LocalDispatcher
from floodgate.manifests.local_writer import LocalWriter
from floodgate.pipeline.context import PromotionContext
from floodgate.status.memory_store import MemoryStatusStore
from floodgate.storage.base_storage_client import BaseStorageClient
from floodgate.storage.models import CopyStatus, DriveItem

STAGING_ROOT = "project-pink"


class FakeStorageClient(BaseStorageClient):
    """In-memory staging tree with scripted copy behavior.

    ``copy_behavior`` maps a source path to one of:
      "completed"  copy reports completion on the first poll
      "failed"     copy reports failure
      "stuck"      copy never leaves inProgress
      "no_monitor" service returns no monitor URL
      "error"      start_copy raises
    Paths not listed default to "completed".
    """

    def __init__(self, tree: dict[str, list[str]] | None = None) -> None:
        self.tree = tree or {}
        self.copy_behavior: dict[str, str] = {}
        self.failing_uploads: set[str] = set()
        self.failing_folders: set[str] = set()
        self.copied: list[tuple[str, str]] = []
        self.uploaded: dict[str, bytes] = {}
        self.status_polls = 0
        self.closed = False

    @property
    def staging_root_name(self) -> str:
        return STAGING_ROOT

    async def list_children(self, folder_path: str, top: int) -> list[DriveItem]:
        if folder_path in self.failing_folders:
            from floodgate.storage.exceptions import StorageServerError
            raise StorageServerError(f"listing {folder_path} failed", status_code=500)
        parent = f"/drive/root:/{STAGING_ROOT}{folder_path}"
        items = []
        for name in self.tree.get(folder_path, []):
            if name.endswith("/"):
                items.append(DriveItem.model_validate({
                    "name": name.rstrip("/"),
                    "parentReference": {"path": parent},
                    "folder": {"childCount": 1},
                }))
            else:
                items.append(DriveItem.model_validate({
                    "name": name,
                    "parentReference": {"path": parent},
                    "@microsoft.graph.downloadUrl": f"https://dl.example{folder_path}/{name}",
                }))
        return items

    async def start_copy(self, src_path: str, dest_folder: str) -> str | None:
        behavior = self.copy_behavior.get(src_path, "completed")
        if behavior == "error":
            raise RuntimeError(f"copy request for {src_path} rejected")
        if behavior == "no_monitor":
            return None
        self.copied.append((src_path, dest_folder))
        return f"https://monitor.example/{behavior}{src_path}"

    async def get_copy_status(self, monitor_url: str) -> CopyStatus | None:
        self.status_polls += 1
        behavior = monitor_url.split("/")[3]
        if behavior == "completed":
            return CopyStatus(status="completed")
        if behavior == "failed":
            return CopyStatus(status="failed")
        return CopyStatus(status="inProgress")

    async def download(self, download_url: str) -> bytes:
        return f"content of {download_url}".encode()

    async def upload(self, content: bytes, dest_path: str) -> bool:
        if dest_path in self.failing_uploads:
            return False
        self.uploaded[dest_path] = content
        return True

    async def close(self) -> None:
        self.closed = True


# === FIXTURES: Configuration ===


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings with every delay zeroed and manifests under tmp_path."""
    return Settings(
        _env_file=None,
        batch_size=2,
        bulk_request_size=2,
        chunk_delay_s=0,
        settle_delay_s=0,
        copy_poll_max_attempts=3,
        copy_poll_interval_s=0,
        copy_poll_max_interval_s=0,
        manifest_root=tmp_path / "manifests",
        storage_staging_base_uri="https://graph.example/drive/root:/project-pink",
        storage_primary_base_uri="https://graph.example/drive/root:/project",
    )


@pytest.fixture
def job_params() -> dict[str, Any]:
    return {
        "root_folder": "/project-pink",
        "admin_page_uri": "https://admin.example/tools/floodgate",
        "project_excel_path": "/drafts/floodgate/project.xlsx",
        "do_publish": False,
    }


# === FIXTURES: Collaborators ===


@pytest.fixture
def status_store() -> MemoryStatusStore:
    return MemoryStatusStore()


@pytest.fixture
def writer(tmp_path) -> LocalWriter:
    return LocalWriter(tmp_path / "manifests")


@pytest.fixture
def sample_tree() -> dict[str, list[str]]:
    """Staging tree: /a holds 1.html and 2.html, /b holds 3.html."""
    return {
        "": ["a/", "b/"],
        "/a": ["1.html", "2.html"],
        "/b": ["3.html"],
    }


@pytest.fixture
def fake_storage(sample_tree) -> FakeStorageClient:
    return FakeStorageClient(sample_tree)


@pytest.fixture
def sample_files() -> list[FileRecord]:
    return [
        FileRecord(download_url="https://dl.example/a/1.html", file_path="/a/1.html"),
        FileRecord(download_url="https://dl.example/a/2.html", file_path="/a/2.html"),
        FileRecord(download_url="https://dl.example/b/3.html", file_path="/b/3.html"),
    ]


@pytest.fixture
def make_context(settings, status_store, writer, fake_storage):
    """Build a PromotionContext around the shared fakes."""

    def _make(params: dict[str, Any], dispatcher: Any = None) -> PromotionContext:
        return PromotionContext(
            settings=settings,
            params=JobParams.model_validate(params),
            status_store=status_store,
            dispatcher=dispatcher or LocalDispatcher(),
            writer=writer,
            storage_factory=lambda _settings: fake_storage,
        )

    return _make
