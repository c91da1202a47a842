"""
Optimistic status transitions for workflow records.

The visible status changes as soon as a transition is requested; the server
is then asked to confirm. Requests on the same record reach the server one
at a time, in request order. Only the most recent request for a record may
clear or roll back what the user sees.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, Optional

from job_portal.api.base import ensure_success, invoke
from job_portal.errors import TransitionRejected, TransitionResult, UpdateFailed
from job_portal.logging_config import get_structured_logger
from job_portal.models import Record
from job_portal.workflow.models import StatusEntity, TransitionTable

logger = logging.getLogger(__name__)
slog = get_structured_logger(__name__)

DisplayCallback = Callable[[str, Optional[str]], None]


class StatusTransitionManager:
    """
    Tracks the workflow status of the records in one view session.

    Example:
        ```python
        manager = StatusTransitionManager(api.update_status, TransitionTable.permissive())
        manager.sync(records)
        result = await manager.request_transition("42", "shortlisted")
        if not result.ok:
            notify(result.error)
        ```
    """

    def __init__(
        self,
        update_status: Callable[[str, str], Any],
        table: Optional[TransitionTable] = None,
        on_display: Optional[DisplayCallback] = None,
    ):
        """
        Initialize manager.

        Args:
            update_status: Collaborator call ``(record_id, status) -> {"success": bool}``;
                sync or async
            table: Allowed transitions; defaults to the permissive employer table
            on_display: Called with ``(record_id, status)`` whenever the visible
                status of a record changes
        """
        self.update_status = update_status
        self.table = table or TransitionTable.permissive()
        self.on_display = on_display
        self.entities: Dict[str, StatusEntity] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    # Session bookkeeping

    def track(self, record_id: str, status: Optional[str]) -> StatusEntity:
        """
        Start tracking a record, or refresh it from server data.

        A record with a transition in flight keeps its state; the pending
        answer decides the outcome.
        """
        status = self.table.canonical(status) or self.table.initial
        entity = self.entities.get(record_id)

        if entity is None:
            entity = StatusEntity(record_id=record_id, current_status=status)
            self.entities[record_id] = entity
        elif not entity.in_flight:
            entity.current_status = status

        return entity

    def sync(self, records: Iterable[Record]) -> None:
        """Track every record of a fetch."""
        for record in records:
            self.track(record.id, record.status)

    def displayed_status(self, record_id: str) -> Optional[str]:
        entity = self.entities.get(record_id)
        return entity.displayed_status if entity else None

    def discard(self, record_id: str) -> None:
        """Forget a record (removed from the list)."""
        self.entities.pop(record_id, None)
        self._locks.pop(record_id, None)

    def clear(self) -> None:
        """Forget everything (view session closed)."""
        self.entities.clear()
        self._locks.clear()

    def _display(self, record_id: str, status: Optional[str]) -> None:
        if self.on_display is None:
            return
        try:
            self.on_display(record_id, status)
        except Exception as e:
            logger.error(f"Display callback failed for record {record_id}: {e}")

    # Transitions

    async def request_transition(self, record_id: str, to_status: str) -> TransitionResult:
        """
        Change the status of a record optimistically.

        Args:
            record_id: Record identifier
            to_status: Requested status (aliases accepted)

        Returns:
            TransitionResult; ``ok`` is False with an UpdateFailed error when
            the table rejects the change or the server call fails
        """
        target = self.table.canonical(to_status)
        entity = self.entities.get(record_id)

        if entity is None:
            return self._failed(record_id, None, UpdateFailed(
                f"Record {record_id} is not part of this list", record_id
            ))

        visible = entity.displayed_status
        if target == visible:
            return TransitionResult(
                ok=True, record_id=record_id, status=entity.current_status
            )

        if not self.table.is_allowed(visible, target):
            return self._failed(record_id, entity.current_status, TransitionRejected(
                f"Cannot change status from '{visible}' to '{target}'", record_id
            ))

        entity.generation += 1
        generation = entity.generation
        entity.pending_status = target
        self._display(record_id, target)
        slog.transition(record_id, visible, target, "optimistic")

        lock = self._locks.setdefault(record_id, asyncio.Lock())
        async with lock:
            return await self._commit(entity, target, generation)

    async def _commit(
        self, entity: StatusEntity, target: str, generation: int
    ) -> TransitionResult:
        record_id = entity.record_id

        if self.entities.get(record_id) is not entity:
            # Removed from the list while waiting for the lock
            return self._failed(record_id, None, UpdateFailed(
                f"Record {record_id} was removed before its status was saved", record_id
            ))

        if generation != entity.generation:
            # A newer request for this record supersedes this one
            slog.transition(record_id, entity.current_status, target, "superseded")
            return TransitionResult(
                ok=True, record_id=record_id, status=entity.current_status
            )

        if target == entity.current_status:
            # An earlier request already saved this status
            entity.pending_status = None
            self._display(record_id, target)
            slog.transition(record_id, None, target, "committed")
            return TransitionResult(ok=True, record_id=record_id, status=target)

        if not self.table.is_allowed(entity.current_status, target):
            self._rollback(entity, generation)
            return self._failed(record_id, entity.current_status, TransitionRejected(
                f"Cannot change status from '{entity.current_status}' to '{target}'", record_id
            ))

        try:
            response = await invoke(self.update_status, record_id, target)
            ensure_success(response)
        except Exception as e:
            self._rollback(entity, generation)
            slog.transition(record_id, entity.current_status, target, "failed", {"error": e})
            return self._failed(record_id, entity.current_status, UpdateFailed(
                f"Failed to update status to '{target}': {e}", record_id
            ))

        entity.current_status = target
        if generation == entity.generation:
            entity.pending_status = None
            self._display(record_id, target)
        slog.transition(record_id, None, target, "committed")
        return TransitionResult(ok=True, record_id=record_id, status=target)

    def _rollback(self, entity: StatusEntity, generation: int) -> None:
        if generation != entity.generation:
            return
        entity.pending_status = None
        self._display(entity.record_id, entity.current_status)

    def _failed(
        self, record_id: str, status: Optional[str], error: UpdateFailed
    ) -> TransitionResult:
        logger.warning(error.message)
        return TransitionResult(ok=False, error=error, record_id=record_id, status=status)
