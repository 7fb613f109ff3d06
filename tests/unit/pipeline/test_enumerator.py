# tests/unit/pipeline/test_enumerator.py - v1
"""Tests for pipeline/enumerator.py - breadth-first tree walk."""

from __future__ import annotations

import pytest

from floodgate.pipeline.enumerator import EnumerationError, FileTreeEnumerator


class TestFileTreeEnumerator:
    @pytest.mark.asyncio
    async def test_flattens_tree(self, fake_storage):
        files = await FileTreeEnumerator(fake_storage).enumerate()
        assert {f.file_path for f in files} == {"/a/1.html", "/a/2.html", "/b/3.html"}

    @pytest.mark.asyncio
    async def test_download_urls_kept(self, fake_storage):
        files = await FileTreeEnumerator(fake_storage).enumerate()
        by_path = {f.file_path: f.download_url for f in files}
        assert by_path["/b/3.html"] == "https://dl.example/b/3.html"

    @pytest.mark.asyncio
    async def test_breadth_first_order(self, fake_storage):
        fake_storage.tree = {
            "": ["top.html", "a/"],
            "/a": ["deep/", "a.html"],
            "/a/deep": ["d.html"],
        }
        files = await FileTreeEnumerator(fake_storage).enumerate()
        assert [f.file_path for f in files] == ["/top.html", "/a/a.html", "/a/deep/d.html"]

    @pytest.mark.asyncio
    async def test_empty_tree(self, fake_storage):
        fake_storage.tree = {}
        assert await FileTreeEnumerator(fake_storage).enumerate() == []

    @pytest.mark.asyncio
    async def test_listing_failure_is_fatal(self, fake_storage):
        fake_storage.failing_folders = {"/b"}
        with pytest.raises(EnumerationError, match="/b"):
            await FileTreeEnumerator(fake_storage).enumerate()

    @pytest.mark.asyncio
    async def test_page_size_passed(self, fake_storage):
        seen: list[int] = []
        original = fake_storage.list_children

        async def spy(folder_path, top):
            seen.append(top)
            return await original(folder_path, top)

        fake_storage.list_children = spy
        await FileTreeEnumerator(fake_storage, page_size=250).enumerate()
        assert set(seen) == {250}
