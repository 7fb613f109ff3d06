# src/logging/context.py - v1
"""Contextual logging support: attach root_folder, batch_number, action to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set once per action invocation.
_root_folder: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "root_folder", default=None
)
_batch_number: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "batch_number", default=None
)
_action: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "action", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    root_folder: str | None = None
    batch_number: int | None = None
    action: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        root_folder=_root_folder.get(),
        batch_number=_batch_number.get(),
        action=_action.get(),
    )


def set_job_context(root_folder: str, action: str | None = None) -> None:
    """Set job-level context (called once per action invocation)."""
    _root_folder.set(root_folder or None)
    _action.set(action)


def set_batch_context(batch_number: int | None) -> None:
    """Set batch-level context (called by batch workers)."""
    _batch_number.set(batch_number)


def clear_context() -> None:
    """Reset all context variables."""
    _root_folder.set(None)
    _batch_number.set(None)
    _action.set(None)
