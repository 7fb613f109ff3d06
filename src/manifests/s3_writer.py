# src/manifests/s3_writer.py - v1
"""S3-compatible manifest writer (MANIFEST_WRITER=s3).

Lets batch workers on different hosts share batch file lists and
failure manifests. Requires 'boto3' package: pip install boto3.
"""

from __future__ import annotations

import logging

from floodgate.manifests.base_output_writer import BaseOutputWriter

logger = logging.getLogger(__name__)


class S3Writer(BaseOutputWriter):
    """Write manifests to S3-compatible object storage."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "floodgate/",
        region: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        """Initialize S3 writer.

        Args:
            bucket: S3 bucket name.
            prefix: Key prefix for all objects (e.g. "floodgate/").
            region: AWS region (optional, uses boto3 default if not set).
            endpoint_url: Custom endpoint for MinIO/compatible storage.
        """
        try:
            import boto3
        except ImportError as e:
            raise ImportError(
                "boto3 package required for S3 writer: pip install boto3"
            ) from e

        kwargs: dict = {}
        if region:
            kwargs["region_name"] = region
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        self._s3 = boto3.client("s3", **kwargs)
        self._bucket = bucket
        self._prefix = prefix.rstrip("/") + "/" if prefix else ""

    def _full_key(self, path: str) -> str:
        return f"{self._prefix}{path}"

    async def write(self, path: str, content: bytes | str) -> None:
        key = self._full_key(path)
        body = content.encode("utf-8") if isinstance(content, str) else content
        self._s3.put_object(
            Bucket=self._bucket, Key=key, Body=body, ContentType="application/json",
        )
        logger.debug("S3 write: s3://%s/%s (%d bytes)", self._bucket, key, len(body))

    async def read(self, path: str) -> bytes:
        response = self._s3.get_object(Bucket=self._bucket, Key=self._full_key(path))
        return response["Body"].read()

    async def exists(self, path: str) -> bool:
        try:
            self._s3.head_object(Bucket=self._bucket, Key=self._full_key(path))
            return True
        except self._s3.exceptions.ClientError:
            return False

    async def delete(self, path: str) -> None:
        self._s3.delete_object(Bucket=self._bucket, Key=self._full_key(path))

    async def list_dir(self, path: str) -> list[str]:
        """List objects and sub-prefixes directly under a prefix."""
        prefix = self._full_key(path)
        if not prefix.endswith("/"):
            prefix += "/"

        paginator = self._s3.get_paginator("list_objects_v2")
        items: list[str] = []
        for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix, Delimiter="/"):
            for obj in page.get("Contents", []):
                name = obj["Key"][len(prefix):]
                if name:
                    items.append(name)
            for cp in page.get("CommonPrefixes", []):
                dir_name = cp["Prefix"][len(prefix):].rstrip("/")
                if dir_name:
                    items.append(dir_name)
        return sorted(items)
