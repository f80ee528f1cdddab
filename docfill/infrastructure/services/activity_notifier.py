"""Activity notifier: records activity log entries fire-and-forget (implements IActivityNotifier)."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from docfill.application.dtos.activity import ActivityEvent
from docfill.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from docfill.application.interfaces.services import UnitOfWorkFactory

logger = get_logger(__name__)


class ActivityLogNotifier:
    """Writes each event in its own unit of work on a background task.

    notify() returns immediately, so it may be called while another unit of
    work is open. Failures are logged and dropped; call drain() before
    shutting down to wait for pending writes.
    """

    def __init__(self, unit_of_work: UnitOfWorkFactory) -> None:
        self._unit_of_work = unit_of_work
        self._pending: set[asyncio.Task[None]] = set()

    def notify(self, event: ActivityEvent) -> None:
        try:
            task = asyncio.get_running_loop().create_task(self._record(event))
        except RuntimeError:
            logger.warning(
                "No running event loop; dropping activity %s for %s",
                event.action_type.value,
                event.actor_id,
            )
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _record(self, event: ActivityEvent) -> None:
        try:
            async with self._unit_of_work() as uow:
                await uow.activity_logs.create_entry(event)
        except Exception:
            logger.exception(
                "Failed to record activity %s (entity %s)",
                event.action_type.value,
                event.entity_id,
            )

    async def drain(self) -> None:
        """Wait for every scheduled write to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
