# src/manifests/writer_factory.py - v1
"""Factory: instantiate manifest writer from configuration."""

from __future__ import annotations

from floodgate.config.settings import Settings
from floodgate.manifests.base_output_writer import BaseOutputWriter
from floodgate.manifests.local_writer import LocalWriter


def create_writer(settings: Settings) -> BaseOutputWriter:
    """Create the manifest writer selected by MANIFEST_WRITER.

    Raises:
        ValueError: If writer type is not supported.
    """
    if settings.manifest_writer == "local":
        return LocalWriter(settings.manifest_root)

    if settings.manifest_writer == "s3":
        from floodgate.manifests.s3_writer import S3Writer
        if not settings.manifest_s3_bucket:
            raise ValueError(
                "MANIFEST_S3_BUCKET must be set when MANIFEST_WRITER=s3"
            )
        return S3Writer(
            bucket=settings.manifest_s3_bucket,
            prefix=settings.manifest_s3_prefix,
            region=settings.manifest_s3_region or None,
        )

    raise ValueError(f"Unsupported manifest writer: {settings.manifest_writer!r}")
