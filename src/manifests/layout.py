# src/manifests/layout.py - v1
"""Manifest path conventions.

    {instance_key}/batch_{n}/files.json     files assigned to the batch
    {instance_key}/batch_{n}/results.json   failure manifest (only on failures)
"""

from __future__ import annotations

import re

BATCH_DIR_PREFIX = "batch_"
FILES_MANIFEST = "files.json"
RESULTS_MANIFEST = "results.json"


def instance_key(root_folder: str) -> str:
    """Filesystem- and key-safe identifier for a job's root folder."""
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "_", root_folder.strip("/"))
    return cleaned.strip("_") or "root"


def batch_dir(instance: str, batch_number: int) -> str:
    return f"{instance}/{BATCH_DIR_PREFIX}{batch_number}"


def files_path(instance: str, batch_number: int) -> str:
    return f"{batch_dir(instance, batch_number)}/{FILES_MANIFEST}"


def results_path(instance: str, batch_number: int) -> str:
    return f"{batch_dir(instance, batch_number)}/{RESULTS_MANIFEST}"
