# src/manifests/local_writer.py - v1
"""Local filesystem manifest writer (default backend)."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from floodgate.manifests.base_output_writer import BaseOutputWriter


class LocalWriter(BaseOutputWriter):
    """Write manifests under a root directory on the local filesystem."""

    def __init__(self, base_path: str | Path | None = None) -> None:
        """Initialize with optional base path.

        Args:
            base_path: Root directory for all writes. If None, paths are absolute.
        """
        self._base = Path(base_path).expanduser() if base_path else None

    def _resolve(self, path: str) -> Path:
        if self._base is not None:
            return self._base / path
        return Path(path)

    async def write(self, path: str, content: bytes | str) -> None:
        """Write atomically so concurrent readers never see a partial manifest."""
        p = self._resolve(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        data = content.encode("utf-8") if isinstance(content, str) else content
        fd, tmp_name = tempfile.mkstemp(dir=p.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(data)
            os.replace(tmp_name, p)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def read(self, path: str) -> bytes:
        return self._resolve(path).read_bytes()

    async def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    async def delete(self, path: str) -> None:
        self._resolve(path).unlink(missing_ok=True)

    async def list_dir(self, path: str) -> list[str]:
        p = self._resolve(path)
        if not p.is_dir():
            return []
        return [entry.name for entry in sorted(p.iterdir())]
