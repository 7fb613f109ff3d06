# src/storage/client_factory.py - v1
"""Factory: instantiate the storage API client from configuration."""

from __future__ import annotations

from floodgate.config.settings import Settings
from floodgate.storage.base_storage_client import BaseStorageClient
from floodgate.storage.config import StorageConfig
from floodgate.storage.graph_client import GraphStorageClient


def create_storage_client(settings: Settings) -> BaseStorageClient:
    """Create the storage client for the configured content trees.

    Raises:
        ValueError: If either base URI is missing.
    """
    if not settings.storage_staging_base_uri or not settings.storage_primary_base_uri:
        raise ValueError(
            "STORAGE_STAGING_BASE_URI and STORAGE_PRIMARY_BASE_URI must be set"
        )
    return GraphStorageClient(StorageConfig.from_settings(settings))
