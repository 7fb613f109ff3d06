# src/storage/retry.py - v1
"""Retry policy with exponential backoff for storage API calls.

Errors are classified by type; each type has its own retry budget.
Authentication, not-found and other client errors are never retried.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx

from floodgate.storage.exceptions import (
    StorageAPIError,
    StorageRateLimitError,
    StorageServerError,
)

logger = logging.getLogger(__name__)


class StorageRetryExhausted(StorageAPIError):
    """All retries exhausted for a storage call."""

    def __init__(self, operation: str, error_type: str, attempts: int, last_error: Exception):
        self.operation = operation
        self.error_type = error_type
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Storage call '{operation}' failed after {attempts} attempts ({error_type}): {last_error}",
            status_code=getattr(last_error, "status_code", None),
        )


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for a specific error type."""

    max_retries: int
    base_delay_s: float
    backoff_factor: float = 2.0
    jitter: bool = True


DEFAULT_RETRY_CONFIGS: dict[str, RetryConfig] = {
    "rate_limit": RetryConfig(max_retries=5, base_delay_s=2.0),
    "timeout": RetryConfig(max_retries=3, base_delay_s=1.0, backoff_factor=1.5),
    "server_error": RetryConfig(max_retries=3, base_delay_s=2.0),
    "network": RetryConfig(max_retries=2, base_delay_s=1.0),
}


def classify_error(error: Exception) -> str:
    """Classify an exception into a retry error type."""
    if isinstance(error, StorageRateLimitError):
        return "rate_limit"
    if isinstance(error, StorageServerError):
        return "server_error"
    if isinstance(error, httpx.TimeoutException):
        return "timeout"
    if isinstance(error, httpx.TransportError):
        return "network"
    return "fatal"


def _compute_delay(config: RetryConfig, attempt: int) -> float:
    """Compute delay for a given attempt (0-based)."""
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    operation: str = "request",
    retry_configs: dict[str, RetryConfig] | None = None,
    **kwargs: Any,
) -> Any:
    """Execute an async storage call with retry logic.

    Raises:
        StorageRetryExhausted: If a retryable error outlives its budget.
        StorageAPIError: Non-retryable errors are re-raised unchanged.
    """
    configs = retry_configs or DEFAULT_RETRY_CONFIGS
    attempts = 0

    while True:
        try:
            return await fn(*args, **kwargs)
        except (StorageAPIError, httpx.HTTPError) as e:
            error_type = classify_error(e)
            config = configs.get(error_type)
            if config is None:
                raise
            attempts += 1
            if attempts > config.max_retries:
                raise StorageRetryExhausted(operation, error_type, attempts, e) from e

            delay = _compute_delay(config, attempts - 1)
            logger.warning(
                "Storage '%s' - %s (attempt %d/%d), retrying in %.1fs",
                operation, error_type, attempts, config.max_retries, delay,
            )
            await asyncio.sleep(delay)
