# src/storage/config.py - v1
"""Configuration for the storage API client."""

from __future__ import annotations

from pydantic import BaseModel

from floodgate.config.settings import Settings


class StorageConfig(BaseModel):
    """Connection settings for the staging and primary content trees."""

    staging_base_uri: str
    primary_base_uri: str
    access_token: str = ""
    timeout_seconds: float = 30.0
    max_connections: int = 50
    max_keepalive_connections: int = 10
    page_size: int = 1000

    @property
    def staging_root_name(self) -> str:
        """Last path segment of the staging base URI."""
        return self.staging_base_uri.rstrip("/").split("/")[-1]

    @property
    def primary_root_name(self) -> str:
        """Last path segment of the primary base URI."""
        return self.primary_base_uri.rstrip("/").split("/")[-1]

    @classmethod
    def from_settings(cls, settings: Settings) -> StorageConfig:
        return cls(
            staging_base_uri=settings.storage_staging_base_uri,
            primary_base_uri=settings.storage_primary_base_uri,
            access_token=settings.storage_access_token,
            timeout_seconds=settings.storage_timeout_s,
            max_connections=settings.storage_max_connections,
            page_size=settings.storage_page_size,
        )
