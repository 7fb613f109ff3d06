# src/config/settings.py - v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings: status store,
storage API, batching and throttling, copy polling, dispatch backend,
batch manifests and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Status store ===
    status_backend: Literal["memory", "redis"] = "memory"
    status_redis_url: str = ""
    status_key_prefix: str = "floodgate:promote"

    # === Storage API ===
    storage_staging_base_uri: str = ""
    storage_primary_base_uri: str = ""
    storage_access_token: str = ""
    storage_timeout_s: float = 30.0
    storage_page_size: int = 1000
    storage_max_connections: int = 50

    # === Batching ===
    batch_size: int = 50
    bulk_request_size: int = 20
    chunk_delay_s: float = 3.0
    settle_delay_s: float = 3.0

    # === Copy polling ===
    copy_poll_max_attempts: int = 30
    copy_poll_interval_s: float = 1.0
    copy_poll_backoff: float = 1.5
    copy_poll_max_interval_s: float = 10.0

    # === Dispatch ===
    dispatch_backend: Literal["local", "celery"] = "local"
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = ""
    celery_queue: str = "floodgate"
    promote_action: str = "floodgate.promote"
    create_batch_action: str = "floodgate.promote-create-batch"
    worker_action: str = "floodgate.promote-worker"
    post_copy_action: str = "floodgate.post-copy-worker"

    # === Batch manifests ===
    manifest_writer: Literal["local", "s3"] = "local"
    manifest_root: Path = Path("~/.floodgate/batches")
    manifest_s3_bucket: str = ""
    manifest_s3_prefix: str = "floodgate/"
    manifest_s3_region: str = ""

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator(
        "batch_size", "bulk_request_size", "storage_page_size", "copy_poll_max_attempts"
    )
    @classmethod
    def validate_positive(cls, v: int, info) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @field_validator(
        "chunk_delay_s", "settle_delay_s", "copy_poll_interval_s", "copy_poll_max_interval_s"
    )
    @classmethod
    def validate_non_negative(cls, v: float, info) -> float:  # noqa: N805
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.bulk_request_size > self.batch_size:
            errors.append("BULK_REQUEST_SIZE must be <= BATCH_SIZE")

        if self.status_backend == "redis" and not self.status_redis_url:
            errors.append("STATUS_REDIS_URL must be set when STATUS_BACKEND=redis")

        if self.manifest_writer == "s3" and not self.manifest_s3_bucket:
            errors.append("MANIFEST_S3_BUCKET must be set when MANIFEST_WRITER=s3")

        if self.dispatch_backend == "celery" and not self.celery_broker_url:
            errors.append("CELERY_BROKER_URL must be set when DISPATCH_BACKEND=celery")

        # Celery workers run in other processes, possibly on other hosts
        if self.dispatch_backend == "celery":
            if self.status_backend != "redis":
                errors.append("STATUS_BACKEND must be redis when DISPATCH_BACKEND=celery")
            if self.manifest_writer != "s3":
                errors.append("MANIFEST_WRITER must be s3 when DISPATCH_BACKEND=celery")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-job config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
