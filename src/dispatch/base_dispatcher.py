# src/dispatch/base_dispatcher.py - v1
"""Abstract dispatch interface: start a named action without waiting for it."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class DispatchError(Exception):
    """The dispatch backend refused or failed to start an action."""

    def __init__(self, action: str, reason: str):
        self.action = action
        self.reason = reason
        super().__init__(f"{action}: {reason}")


class BaseDispatcher(ABC):
    """Fire-and-forget action invocation."""

    @abstractmethod
    async def invoke(self, action: str, params: dict[str, Any]) -> str:
        """Request that ``action`` run asynchronously with ``params``.

        Returns as soon as the request is accepted.

        Returns:
            Dispatch handle (activation id) of the started unit of work.

        Raises:
            DispatchError: If the request was not accepted.
        """
