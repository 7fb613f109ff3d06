# src/pipeline/scheduling.py - v1
"""Chunked scheduling policy for bounded-concurrency work.

Items run in chunks of ``chunk_size``: everything inside a chunk runs
concurrently, chunks run strictly in order, and a fixed pause separates
consecutive chunks.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence, TypeVar

from floodgate.batch.partitioner import chunked

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def run_in_chunks(
    items: Sequence[T],
    chunk_size: int,
    worker: Callable[[T], Awaitable[R]],
    pause_s: float = 0.0,
) -> list[R]:
    """Apply ``worker`` to every item under the chunked policy.

    Results are returned in item order. ``worker`` is expected to handle
    its own per-item failures.
    """
    chunks = chunked(items, chunk_size)
    results: list[R] = []

    for index, chunk in enumerate(chunks):
        results.extend(await asyncio.gather(*(worker(item) for item in chunk)))
        logger.debug("Chunk %d/%d done (%d items)", index + 1, len(chunks), len(chunk))
        if index < len(chunks) - 1 and pause_s > 0:
            await asyncio.sleep(pause_s)

    return results
