# src/status/tracker.py - v1
"""Status tracker: durable, keyed job and batch progress records.

The job-level record lives under ``{prefix}:{root_folder}`` and each batch
keeps its own record under ``{prefix}:{root_folder}:Batch_{n}``, so one
batch's failure never overwrites a sibling's progress.

Writes are field-level merges. The lifecycle is
``STARTED -> IN_PROGRESS -> {COMPLETED, COMPLETED_WITH_ERROR, FAILED}``;
once a record is terminal only ``clear()`` can move it back.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from floodgate.core.models import ProjectStatus, StatusRecord, is_terminal
from floodgate.status.base_status_store import BaseStatusStore

logger = logging.getLogger(__name__)

_STATUS = "status"
_MESSAGE = "statusMessage"
_ACTIVATION_ID = "activationId"
_NEXT_STAGE_ACTIVATION_ID = "nextStageActivationId"
_UPDATED_AT = "updatedAt"
_DETAILS_PREFIX = "details."
_BATCHES_PREFIX = "batches."


def status_key(prefix: str, root_folder: str, batch_number: int | None = None) -> str:
    """Build the store key for a job, or for one of its batches."""
    key = f"{prefix}:{root_folder}"
    if batch_number is not None:
        key = f"{key}:Batch_{batch_number}"
    return key


def decode_record(fields: dict[str, str]) -> StatusRecord:
    """Rebuild a StatusRecord from flat store fields."""
    details = {
        k[len(_DETAILS_PREFIX):]: v for k, v in fields.items() if k.startswith(_DETAILS_PREFIX)
    }
    batches = {
        k[len(_BATCHES_PREFIX):]: v for k, v in fields.items() if k.startswith(_BATCHES_PREFIX)
    }
    updated_at = fields.get(_UPDATED_AT)
    return StatusRecord(
        status=fields.get(_STATUS) or None,
        status_message=fields.get(_MESSAGE),
        details=details,
        batches=batches,
        activation_id=fields.get(_ACTIVATION_ID),
        next_stage_activation_id=fields.get(_NEXT_STAGE_ACTIVATION_ID),
        updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
    )


class StatusTracker:
    """Read and merge-write one status record.

    Args:
        store: Backend shared by every pipeline participant.
        key: Record key (see ``status_key``).
    """

    def __init__(self, store: BaseStatusStore, key: str) -> None:
        self._store = store
        self.key = key

    async def clear(self) -> None:
        """Reset the record to an empty initial state."""
        await self._store.delete(self.key)
        logger.debug("Cleared status %s", self.key)

    async def read(self) -> StatusRecord:
        """Current record, or an empty record if none exists."""
        return decode_record(await self._store.get(self.key))

    async def update(
        self,
        status: ProjectStatus | None = None,
        message: str | None = None,
        details: dict[str, str] | None = None,
        batches: dict[int | str, str] | None = None,
        activation_id: str | None = None,
        next_stage_activation_id: str | None = None,
    ) -> StatusRecord:
        """Merge the supplied fields into the record and return the result.

        Unspecified fields keep their previous values. A status that would
        move a terminal record back to a non-terminal one is dropped; the
        remaining fields are still merged.
        """
        fields: dict[str, str] = {}

        if status is not None:
            current = (await self._store.get(self.key)).get(_STATUS)
            if is_terminal(current) and not is_terminal(status):
                logger.warning(
                    "Ignoring %s -> %s for %s: record is terminal",
                    current, status, self.key,
                )
            else:
                fields[_STATUS] = status

        if message is not None:
            fields[_MESSAGE] = message
        if activation_id is not None:
            fields[_ACTIVATION_ID] = activation_id
        if next_stage_activation_id is not None:
            fields[_NEXT_STAGE_ACTIVATION_ID] = next_stage_activation_id
        for stage, value in (details or {}).items():
            fields[f"{_DETAILS_PREFIX}{stage}"] = value
        for batch_number, handle in (batches or {}).items():
            fields[f"{_BATCHES_PREFIX}{batch_number}"] = handle

        fields[_UPDATED_AT] = datetime.now(timezone.utc).isoformat()
        record = decode_record(await self._store.merge(self.key, fields))
        logger.info(
            "Status %s: %s %s",
            self.key, record.status, record.status_message or "",
        )
        return record
