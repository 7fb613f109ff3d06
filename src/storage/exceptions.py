# src/storage/exceptions.py - v1
"""Storage API exceptions."""

from __future__ import annotations


class StorageAPIError(Exception):
    """Base exception for storage API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StorageAuthError(StorageAPIError):
    """Authentication or authorization failed."""


class StorageNotFoundError(StorageAPIError):
    """Item or folder not found."""


class StorageRateLimitError(StorageAPIError):
    """Rate limit exceeded (HTTP 429)."""


class StorageServerError(StorageAPIError):
    """Remote side failed (HTTP 5xx)."""


class CopyTimeoutError(StorageAPIError):
    """A server-side copy never reported completion within its poll budget."""

    def __init__(self, src_path: str, attempts: int):
        super().__init__(f"Copy of {src_path} timed out after {attempts} status polls")
        self.src_path = src_path
        self.attempts = attempts
