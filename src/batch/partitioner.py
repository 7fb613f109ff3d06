# src/batch/partitioner.py - v1
"""Split an ordered sequence into fixed-size contiguous slices."""

from __future__ import annotations

from typing import Sequence, TypeVar

from floodgate.batch.models import Batch
from floodgate.core.models import FileRecord

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> list[list[T]]:
    """Contiguous slices of at most ``size`` items, in original order."""
    if size <= 0:
        raise ValueError(f"size must be > 0, got {size}")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def partition(files: Sequence[FileRecord], batch_size: int) -> list[Batch]:
    """Partition files into batches numbered densely from 0.

    Produces ceil(len(files) / batch_size) batches; concatenating their
    files reproduces the input order exactly.
    """
    return [
        Batch(batch_number=number, files=chunk)
        for number, chunk in enumerate(chunked(files, batch_size))
    ]
